#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from laakhay.cdf import CdfClient
from laakhay.cdf.models import AddFile


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Upload a local file and download it again")
    p.add_argument("path", type=Path)
    p.add_argument("--external-id", default=None)
    p.add_argument("--mime-type", default="application/octet-stream")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    data = args.path.read_bytes()
    external_id = args.external_id or args.path.name

    async with CdfClient.from_env("files-example") as client:
        metadata = await client.files.upload(
            AddFile(name=args.path.name, external_id=external_id, mime_type=args.mime_type),
            overwrite=True,
        )
        if metadata.upload_url is None:
            raise SystemExit("No upload URL returned")
        await client.files.upload_blob(metadata.upload_url, data, args.mime_type)
        print(f"Uploaded {len(data)} bytes as file {metadata.id}")

        # The content may take a moment to become available.
        await asyncio.sleep(2)
        content = await client.files.download_file(external_id)
        print(f"Downloaded {len(content)} bytes, match={content == data}")


if __name__ == "__main__":
    asyncio.run(main())
