"""CLI entry point for web-scout."""

import argparse
import asyncio
import logging
import sys

from web_scout.events import get_event_bus
from web_scout.tools import ToolResult, WebResearchTools
from web_scout.utils.logger import get_logger

log = get_logger(__name__)


def print_result(result: ToolResult) -> int:
    """Print a tool result and return the process exit code."""
    if result.is_error:
        print(f"\nError [{result.error_kind}]: {result.text}\n")
        return 1
    print(f"\n{result.text}\n")
    summary = result.details.get("usage_summary")
    if summary:
        print(f"({summary})\n")
    return 0


async def run_command(args: argparse.Namespace) -> int:
    tools = WebResearchTools(bus=get_event_bus())
    await tools.start(".")

    if args.command == "providers":
        print(tools.search_providers())
        return 0

    if args.command == "fetch":
        result = await tools.fetch_url(
            args.url,
            selector=args.selector,
            max_length=args.max_length,
            include_links=args.include_links,
        )
    elif args.command == "search":
        result = await tools.web_search(
            args.query,
            provider=args.provider,
            count=args.count,
            freshness=args.freshness,
            country=args.country,
        )
    else:
        cancel_event = asyncio.Event()
        print(f"\nTask: {args.task}")
        print("Processing...\n")
        try:
            result = await tools.web_research(
                args.task,
                urls=args.url,
                query=args.query,
                provider=args.provider,
                model=args.model,
                cancel_event=cancel_event,
                on_update=lambda text: print(f"  ... {text.splitlines()[0] if text else ''}"),
            )
        except asyncio.CancelledError:
            cancel_event.set()
            raise
    return print_result(result)


def main() -> None:
    parser = argparse.ArgumentParser(description="Web fetching, search and research scouts")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable DEBUG logging")
    sub = parser.add_subparsers(dest="command")

    p_fetch = sub.add_parser("fetch", help="Fetch a URL as clean markdown")
    p_fetch.add_argument("url")
    p_fetch.add_argument("--selector", help="CSS selector to narrow extraction")
    p_fetch.add_argument("--max-length", type=int, help="Truncate content to N chars")
    p_fetch.add_argument("--include-links", action="store_true",
                         help="Keep hyperlinks in the markdown")

    p_search = sub.add_parser("search", help="Search the web")
    p_search.add_argument("query")
    p_search.add_argument("--provider", help="Search provider name")
    p_search.add_argument("--count", type=int, help="Number of results")
    p_search.add_argument("--freshness", choices=["pd", "pw", "pm", "py"])
    p_search.add_argument("--country", help="Two-letter country code")

    p_research = sub.add_parser("research", help="Delegate research to a scout")
    p_research.add_argument("task")
    p_research.add_argument("--url", action="append", default=[],
                            help="URL to read (repeatable)")
    p_research.add_argument("--query", help="Search query for the scout")
    p_research.add_argument("--provider", help="Search provider name")
    p_research.add_argument("--model", help="Scout model override")

    sub.add_parser("providers", help="List search providers")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        code = asyncio.run(run_command(args))
    except KeyboardInterrupt:
        print("\nCancelled.")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
