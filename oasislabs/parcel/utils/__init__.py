"""Utility functions."""

from .casing import camel_case, param_case, to_json_body, to_query_params

__all__ = ["camel_case", "param_case", "to_json_body", "to_query_params"]
