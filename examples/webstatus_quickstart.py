#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from baseline.webstatus import BaselineStatus, ClientConfig, Timeframe, WebStatusAPI, q


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Query Baseline status from api.webstatus.dev")
    p.add_argument("group", nargs="?", default="css", help="Feature group (css, javascript, html)")
    p.add_argument(
        "status", nargs="?", default="widely", choices=[s.value for s in BaselineStatus]
    )
    p.add_argument("limit", nargs="?", type=int, default=10, help="Records to print")
    p.add_argument("--summary", action="store_true", help="Also print baseline summary and trends")
    p.add_argument("--verbose", action="store_true", help="Log page fetches and retries")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    async with WebStatusAPI(ClientConfig.from_env()) as api:
        stream = api.records(q().by_status(args.status).by_group(args.group))
        print(f"{'Feature':40} | {'Status':8} | {'Since':10}")
        print("-" * 64)
        shown = 0
        async for record in stream:
            baseline = record.get("baseline") or {}
            print(
                f"{record.get('name', '')[:40]:40} | {baseline.get('status', ''):8} | {baseline.get('high_date') or baseline.get('low_date') or '':10}"
            )
            shown += 1
            if shown >= args.limit:
                break
        print(f"Pages fetched: {stream.pages.pages_fetched}")

        if args.summary:
            summary = await api.baseline_summary()
            print(f"Baseline: newly={summary.newly} widely={summary.widely} total={summary.total}")
            trends = await api.baseline_trends(
                [Timeframe(label="30d", days=30), Timeframe(label="1y", days=365)]
            )
            for label, counts in trends.items():
                print(f"  {label:>4}: newly={counts.newly} widely={counts.widely}")


if __name__ == "__main__":
    asyncio.run(main())
