"""Document transfer runtime: streaming downloads and multipart uploads."""

from .download import ChunkSink, DownloadSession
from .multipart import MultipartUploadEncoder, choose_boundary, encode_metadata
from .upload import UploadTask

__all__ = [
    "ChunkSink",
    "DownloadSession",
    "MultipartUploadEncoder",
    "UploadTask",
    "choose_boundary",
    "encode_metadata",
]
