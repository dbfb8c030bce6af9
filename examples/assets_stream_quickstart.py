#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from laakhay.cdf import CdfClient, ClientConfig
from laakhay.cdf.models import AssetQuery, FilterAssetsRequest


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream assets page by page, then partitioned")
    p.add_argument("limit", nargs="?", type=int, default=1000, help="Page size")
    p.add_argument("partitions", nargs="?", type=int, default=4)
    p.add_argument("--max-retries", type=int, default=5)
    p.add_argument("--verbose", action="store_true", help="Log every request and page")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    # Credentials come from COGNITE_PROJECT, COGNITE_CLIENT_ID, COGNITE_CLIENT_SECRET, ...
    config = ClientConfig(max_retries=args.max_retries)
    async with CdfClient.from_env("assets-quickstart", config=config) as client:
        count = 0
        async for asset in client.assets.list.stream(AssetQuery(limit=args.limit)):
            count += 1
            if count <= 5:
                print(f"{asset.id:>16} | {asset.name}")
        print(f"Streamed {count} assets")

        merged = 0
        async for _ in client.assets.filter.stream_partitioned(
            FilterAssetsRequest(limit=args.limit), args.partitions
        ):
            merged += 1
        print(f"Partitioned ({args.partitions}) stream returned {merged} assets")


if __name__ == "__main__":
    asyncio.run(main())
