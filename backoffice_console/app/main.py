from __future__ import annotations

import argparse
import asyncio
import sys

from backoffice_console.app.bootstrap import ConsoleWorkspace
from backoffice_console.app.config import AppConfig
from backoffice_console.app.domain.resources import RESOURCES
from backoffice_console.app.formatting import format_count, format_currency
from backoffice_console.app.remote_table import RemoteTableViewModel
from backoffice_console.clients.postgrest_sdk.config import ConfigError


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print one page of a back-office listing.")
    parser.add_argument("resource", choices=sorted(RESOURCES) + ["dashboard"])
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--search", default="")
    parser.add_argument("--status", default="all")
    parser.add_argument("--category", default="all")
    parser.add_argument("--sort", default=None)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=None)
    return parser.parse_args(argv)


async def _show_table(table: RemoteTableViewModel, args: argparse.Namespace) -> int:
    table.auto_fetch = False
    if args.page_size:
        table.set_page_size(args.page_size)
    if args.sort:
        table.set_sort(args.sort)
    table.set_status_filter(args.status)
    if "category" in table.descriptor.extra_filter_fields:
        table.set_category_filter(args.category)
    if args.search:
        table.set_search_text(args.search)
        table.flush_search()
    await table.mount()
    if args.page > 1:
        table.set_page(args.page)
        await table.fetch()

    snapshot = table.snapshot()
    if snapshot["error"]:
        detail = snapshot["error_detail"] or {}
        print(f"{snapshot['error']} [{detail.get('code')}] trace_id={detail.get('trace_id')}")
        return 1
    print(f"{table.descriptor.label.title()} - {snapshot['range_label']} (page {snapshot['page']}/{snapshot['page_count']})")
    headers = [column.label for column in table.descriptor.columns]
    print(" | ".join(headers))
    for row in snapshot["display_rows"]:
        print(" | ".join(row[column.key] for column in table.descriptor.columns))
    if not snapshot["display_rows"]:
        print(snapshot["view_state"]["message"])
    summary = ", ".join(f"{name}={value}" for name, value in snapshot["summary"].items())
    print(f"Summary: {summary}")
    return 0


async def _show_dashboard(workspace: ConsoleWorkspace) -> int:
    dashboard = workspace.dashboard
    if not await dashboard.load():
        print(dashboard.error)
        return 1
    snapshot = dashboard.snapshot()
    kpis = snapshot["kpis"]
    print(f"Total sales: {format_currency(kpis['total_sales'], dashboard.locale)}")
    print(f"Orders: {format_count(kpis['total_orders'], dashboard.locale)}")
    print(f"Customers: {format_count(kpis['total_customers'], dashboard.locale)}")
    print(f"Active orders: {format_count(kpis['active_orders'], dashboard.locale)}")
    print(snapshot["chart"]["caption"])
    print(snapshot["chart"]["total_label"])
    for order in snapshot["recent_orders"]:
        print(f"  {order.order_number} {order.customer_name} {format_currency(order.order_total, dashboard.locale)} {order.status}")
    return 0


async def run(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        config = AppConfig.from_env(args.env_file)
        workspace = ConsoleWorkspace(config)
    except ConfigError as error:
        print(f"Configuration error: {error}", file=sys.stderr)
        return 2
    async with workspace:
        if args.resource == "dashboard":
            return await _show_dashboard(workspace)
        return await _show_table(workspace.table(args.resource), args)


def cli() -> int:
    return asyncio.run(run())


if __name__ == "__main__":
    raise SystemExit(cli())
