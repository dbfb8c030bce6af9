#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import time

from laakhay.cdf import CdfClient
from laakhay.cdf.models import (
    AddDatapoints,
    AddTimeSeries,
    Datapoint,
    DatapointsFilter,
    DatapointsQuery,
    Identity,
    LatestDatapointsQuery,
)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Write and read back datapoints for one time series")
    p.add_argument("external_id", nargs="?", default="laakhay-cdf-example")
    p.add_argument("count", nargs="?", type=int, default=10)
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    identity = Identity.of_external_id(args.external_id)
    now = int(time.time() * 1000)
    points = [Datapoint(timestamp=now - i * 1000, value=float(i)) for i in range(args.count)]

    async with CdfClient.from_env("datapoints-example") as client:
        # Creates the series on first run.
        await client.time_series.insert_datapoints_create_missing(
            [AddDatapoints(id=identity, datapoints=points)],
            lambda ids: [AddTimeSeries(external_id=i.external_id, name=i.external_id) for i in ids],
        )

        result = await client.time_series.retrieve_datapoints(
            DatapointsFilter(items=[DatapointsQuery(id=identity)], start="1h-ago", end="now")
        )
        for series in result:
            print(f"{series.external_id}: {len(series.datapoints)} datapoints")

        latest = await client.time_series.retrieve_latest_datapoints(
            [LatestDatapointsQuery(id=identity, before="now")]
        )
        if latest and latest[0].datapoints:
            dp = latest[0].datapoints[0]
            print(f"Latest: {dp.timestamp} -> {dp.value}")


if __name__ == "__main__":
    asyncio.run(main())
