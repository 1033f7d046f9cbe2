"""CLI entry point for the receipt tracker."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path

import httpx
from dotenv import load_dotenv

from .api import ApiClient, ApiError, create_transport
from .auth import StaticTokenProvider
from .config import TrackerConfig, load_config
from .models import MonthlySummary, format_currency
from .periods import TimeFilter, build_period


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="receipt-tracker",
        description="Receipt tracker: upload receipts and browse your spending",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument(
        "--mock", action="store_true", help="Serve responses from built-in fixtures"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_parser = sub.add_parser("serve", help="Run the web UI")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--debug", action="store_true")

    # upload
    upload_parser = sub.add_parser("upload", help="Upload a receipt or document")
    upload_parser.add_argument("file", type=str)
    upload_parser.add_argument(
        "--type", dest="doc_type", type=str, default="receipt",
        help="Document type (receipt, letter, or any custom type)",
    )
    upload_parser.add_argument("--json", action="store_true", help="Print JSON")

    # purchases
    purchases_parser = sub.add_parser("purchases", help="Show the week around a date")
    purchases_parser.add_argument("--date", type=str, default=None, help="YYYY-MM-DD")
    purchases_parser.add_argument("--json", action="store_true", help="Print JSON")

    # summary
    summary_parser = sub.add_parser("summary", help="Yearly or monthly summary")
    summary_parser.add_argument("--year", type=int, default=None)
    summary_parser.add_argument("--month", type=int, default=None)
    summary_parser.add_argument(
        "--calendar", action="store_true", help="Show a month as a calendar grid"
    )
    summary_parser.add_argument("--json", action="store_true", help="Print JSON")

    # stats
    stats_parser = sub.add_parser("stats", help="Spending statistics")
    stats_parser.add_argument(
        "view", choices=["summary", "items", "categories", "global"]
    )
    stats_parser.add_argument(
        "--filter", type=str, default=TimeFilter.CURRENT_YEAR.value,
        choices=[f.value for f in TimeFilter],
    )
    stats_parser.add_argument("--year", type=int, default=None)
    stats_parser.add_argument("--month", type=int, default=None)
    stats_parser.add_argument("--months", type=int, default=None)
    stats_parser.add_argument("--limit", type=int, default=None, help="Page size")
    stats_parser.add_argument(
        "--all", action="store_true", help="Follow pagination to the last page"
    )
    stats_parser.add_argument("--category", type=str, default=None)
    stats_parser.add_argument("--name", type=str, default=None, help="Item name")
    stats_parser.add_argument("--json", action="store_true", help="Print JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    config = load_config(args.config)
    if args.mock:
        config.api.mock = True

    try:
        match args.command:
            case "serve":
                _cmd_serve(config, args)
            case "upload":
                asyncio.run(_cmd_upload(config, args))
            case "purchases":
                asyncio.run(_cmd_purchases(config, args))
            case "summary":
                asyncio.run(_cmd_summary(config, args))
            case "stats":
                asyncio.run(_cmd_stats(config, args))
    except ApiError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"Error: could not reach the backend: {e}", file=sys.stderr)
        sys.exit(1)


def _client(config: TrackerConfig) -> ApiClient:
    tokens = StaticTokenProvider(config.api.id_token)
    return ApiClient(create_transport(config, tokens))


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _cmd_serve(config: TrackerConfig, args) -> None:
    from .web import create_app

    app = create_app(config)
    app.run(
        host=args.host or config.web.host,
        port=args.port or config.web.port,
        debug=args.debug,
    )


async def _cmd_upload(config: TrackerConfig, args) -> None:
    path = Path(args.file)
    if not path.is_file():
        raise ValueError(f"no such file: {path}")

    async with _client(config) as api:
        result = await api.upload_document(path, args.doc_type)

    if args.json:
        _print_json(asdict(result))
        return
    print(f"{result.merchant}  {result.purchase_date} {result.purchase_time}".rstrip())
    for item in result.items:
        print(f"  {item.item_name:<30} {format_currency(item.item_cost):>10}")
    if result.total_cost is not None:
        print(f"  {'Total':<30} {format_currency(result.total_cost):>10}")


async def _cmd_purchases(config: TrackerConfig, args) -> None:
    async with _client(config) as api:
        week = await api.get_purchases(args.date or date.today().isoformat())

    if args.json:
        _print_json(week.to_dict())
        return
    print(week.display())


async def _cmd_summary(config: TrackerConfig, args) -> None:
    from .controllers import SummaryController

    async with _client(config) as api:
        page = SummaryController(api, args.year, args.month)
        await page.load()
    if page.error:
        print(f"Error: {page.error}", file=sys.stderr)
        sys.exit(1)

    data = page.data
    if args.json:
        _print_json(asdict(data))
        return

    print(page.title)
    if isinstance(data, MonthlySummary):
        if args.calendar:
            _print_month_calendar(page.month_calendar())
            return
        for d in data.daily_summaries:
            print(
                f"  {d.date} {d.day_name:<9} {format_currency(d.total_amount):>10}"
                f"  {d.receipt_count} receipts, {d.item_count} items"
            )
    else:
        for m in data.summaries:
            print(
                f"  {m.month_name:<9} {format_currency(m.total_amount):>10}"
                f"  {m.receipt_count} receipts, {m.item_count} items"
            )


def _print_month_calendar(cells) -> None:
    print("   Sun    Mon    Tue    Wed    Thu    Fri    Sat")
    row: list[str] = []
    for cell in cells:
        if cell.day is None:
            row.append(" " * 6)
        else:
            mark = "*" if cell.has_purchases else " "
            row.append(f"{cell.day:>5}{mark}")
        if len(row) == 7:
            print(" ".join(row))
            row = []
    if row:
        print(" ".join(row))


async def _cmd_stats(config: TrackerConfig, args) -> None:
    period = build_period(
        args.filter, year=args.year, month=args.month, last_months=args.months
    )
    limit = args.limit or config.api.page_size

    async with _client(config) as api:
        match args.view:
            case "summary":
                data = await api.get_user_summary_stats()
                if args.json:
                    _print_json(asdict(data))
                    return
                print(f"Total spent:     {format_currency(data.total_spent)}")
                print(f"Unique items:    {data.total_unique_items}")
                print(f"Avg per item:    {format_currency(data.avg_spent_per_item)}")
                for item in data.top_items:
                    print(f"  {item.short_label:<24} {format_currency(item.total_spent):>10}")
            case "categories":
                data = await api.get_user_category_stats(period)
                if args.json:
                    _print_json(asdict(data))
                    return
                for cat in data.categories:
                    print(
                        f"  {cat.category:<20} {format_currency(cat.total_spent):>10}"
                        f"  {cat.item_count} items"
                    )
            case "items":
                if args.all:
                    items = [
                        item
                        async for item in api.iter_user_item_stats(
                            limit, period=period, category=args.category
                        )
                    ]
                else:
                    page = await api.get_user_item_stats(
                        limit, period=period, category=args.category
                    )
                    items = page.items
                if args.json:
                    _print_json([asdict(i) for i in items])
                    return
                for item in items:
                    print(
                        f"  {item.short_label:<24} {item.category:<14}"
                        f" {format_currency(item.total_spent):>10}  x{item.purchase_count}"
                    )
            case "global":
                if not args.name or not args.name.strip():
                    raise ValueError("--name is required for global stats")
                data = await api.get_global_item_stats(args.name.strip())
                if args.json:
                    _print_json(asdict(data))
                    return
                print(f"{data.item_name}")
                print(f"  Total spent:  {format_currency(data.total_spent)}")
                print(f"  Purchases:    {data.total_purchases}")
                print(f"  Average cost: {format_currency(data.avg_cost)}")
