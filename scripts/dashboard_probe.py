#!/usr/bin/env python3
"""Probe a dashboard API the way the UI uses it.

Pulls the asset list, prints one derived table page and the chart
selection, then follows one asset's telemetry over the push channel
for a while, printing the effective value each time it changes.

Usage
-----
::

    export ASSETDASH_API_URL="http://localhost:8000"
    python scripts/dashboard_probe.py --query pump --sort status --watch 30

Options::

    --query TEXT        Free-text table search
    --status STATUS     Status filter (default: all)
    --sort KEY          Sort column; repeat to toggle direction
    --page N            Page to show (clamped)
    --asset ID          Asset to follow (default: the chart selection)
    --watch SECONDS     How long to follow live telemetry (0 = skip)
    --verbose           DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from assetdash import AssetDashClient, AssetDetailView, DashboardConfig, DashboardView, TelemetryRecord  # noqa: E402


def _format_telemetry(record: TelemetryRecord | None, *, live: bool) -> str:
    if record is None:
        return "  (no telemetry)"
    tag = "live" if live else "pull"
    return (
        f"  [{tag}] {record.timestamp.isoformat()} "
        f"temp={record.temperature:.1f}°C pressure={record.pressure:.1f}psi "
        f"vibration={record.vibration:.2f} power={record.power_consumption:.1f}kW status={record.status}"
    )


async def _run(args: argparse.Namespace) -> int:
    config = DashboardConfig.from_env()
    async with AssetDashClient(config) as client:
        dashboard = DashboardView(client)
        if not await dashboard.refresh():
            print(dashboard.error, file=sys.stderr)
            return 1

        if args.query:
            dashboard.search(args.query)
        if args.status:
            dashboard.filter_status(args.status)
        for key in args.sort or []:
            dashboard.sort_by(key)
        if args.page:
            dashboard.go_to_page(args.page)

        view = dashboard.view
        print(f"Status tabs: {', '.join(view.status_options)}")
        for record in view.page:
            marker = "*" if record.id == dashboard.selected_id else " "
            print(f"{marker} {record.id:<12} {record.name:<24} {record.type:<12} {record.location:<16} {record.status}")
        print(dashboard.range_label or "No assets match.")
        stats = dashboard.stats
        print(f"By status: {stats.by_status}")
        print(f"By type: {stats.by_type}")

        asset_id = args.asset or dashboard.selected_id
        if asset_id is None or args.watch <= 0:
            return 0

        changed = asyncio.Event()
        async with AssetDetailView(client, asset_id, on_live_update=lambda _record: changed.set()) as detail:
            if detail.asset_error:
                print(detail.asset_error, file=sys.stderr)
                return 1
            print(f"\nFollowing {asset_id} for {args.watch}s")
            print(_format_telemetry(detail.telemetry, live=detail.is_live))
            loop = asyncio.get_running_loop()
            deadline = loop.time() + args.watch
            while (remaining := deadline - loop.time()) > 0:
                try:
                    await asyncio.wait_for(changed.wait(), remaining)
                except TimeoutError:
                    break
                changed.clear()
                print(_format_telemetry(detail.telemetry, live=detail.is_live))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--query", default="")
    parser.add_argument("--status", default="")
    parser.add_argument("--sort", action="append")
    parser.add_argument("--page", type=int, default=0)
    parser.add_argument("--asset")
    parser.add_argument("--watch", type=float, default=0.0)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
