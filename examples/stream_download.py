#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import os

from oasislabs.parcel import AbortError, Parcel, ParcelConfig


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream a Parcel document, stopping after a byte limit")
    p.add_argument("document_id")
    p.add_argument("limit", nargs="?", type=int, default=1024 * 1024)
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    async with Parcel(os.environ["PARCEL_TOKEN"], config=ParcelConfig.from_env()) as parcel:
        session = parcel.download_document(args.document_id)
        received = 0
        try:
            async for chunk in session:
                received += len(chunk)
                if received >= args.limit:
                    session.abort()
        except AbortError:
            print(f"Stopped after {received} bytes")
        else:
            print(f"Downloaded all {received} bytes")


if __name__ == "__main__":
    asyncio.run(main())
