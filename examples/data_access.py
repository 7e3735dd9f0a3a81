#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import os

from oasislabs.parcel import Parcel, ParcelConfig


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Upload a document, download it and print its history")
    p.add_argument("--owner", default=None, help="Identity that will own the document")
    p.add_argument("--app", default=None, help="App the document is uploaded for")
    p.add_argument("--out", default="./acme_document", help="Where to save the download")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    async with Parcel(os.environ["PARCEL_TOKEN"], config=ParcelConfig.from_env()) as parcel:
        identity = await parcel.get_current_identity()
        print(f"Uploading data with identity: {identity.id}")

        document = await parcel.upload_document(
            "Eggs and Emmentaler is the best!",
            {
                "details": {"title": "Favorite sando", "tags": ["lang:en"]},
                "owner": args.owner,
                "to_app": args.app,
            },
        ).finished
        print(f"Created document {document.id} with owner {document.owner}")

        with open(args.out, "wb") as f:
            size = await parcel.download_document(document.id).pipe_to(f)
        print(f"Document {document.id} ({size} bytes) downloaded to {args.out}")

        print(f"Access log for document {document.id}:")
        async for event in parcel.paginate_document_history(document.id):
            print(f"{event.accessor} accessed this document on {event.created_at.isoformat()}")


if __name__ == "__main__":
    asyncio.run(main())
