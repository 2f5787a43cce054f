#!/usr/bin/env python3
"""
Command-line interface for short link administration.

Usage:
    python shortlinks_cli.py create <title> <url> [--slug SLUG]
    python shortlinks_cli.py list [--order-by COLUMN] [--direction ASC|DESC]
    python shortlinks_cli.py get <short_code>
    python shortlinks_cli.py delete <id>
    python shortlinks_cli.py stats
    python shortlinks_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import load_config
from shortlinks.bootstrap import create_admin, create_cache, create_store
from shortlinks.common.logging_config import setup_logging
from shortlinks.errors import ShortLinkError


def _print(payload: dict, error: bool = False) -> None:
    print(json.dumps(payload, indent=2, default=str), file=sys.stderr if error else sys.stdout)


class ShortLinksCLI:
    """Command-line interface over LinkAdminService."""

    def __init__(self, database_url: Optional[str] = None, redis_url: Optional[str] = None, verbose: bool = False):
        self.config = load_config()
        if database_url:
            self.config.database_url = database_url
        if redis_url:
            self.config.redis_url = redis_url
        # Short-lived process: an in-process cache would only ever be cold.
        self.config.memory_cache_enabled = False
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.admin = None

    async def initialize(self):
        store = create_store(self.config, logger=self.logger)
        await store.initialize()
        cache = await create_cache(self.config, logger=self.logger)
        self.admin = create_admin(store, cache, logger=self.logger)

    async def cleanup(self):
        if self.admin:
            await self.admin.close()

    async def create(self, title: str, url: str, slug: Optional[str] = None) -> int:
        try:
            link = await self.admin.create(title, url, slug)
        except ShortLinkError as e:
            _print({"success": False, "code": e.code, "error": e.message}, error=True)
            return 1

        _print({"success": True, "link": link.to_dict()})
        return 0

    async def list_links(self, order_by: Optional[str], direction: Optional[str]) -> int:
        try:
            links = await self.admin.list(order_by, direction)
        except ShortLinkError as e:
            _print({"success": False, "code": e.code, "error": e.message}, error=True)
            return 1

        _print({"success": True, "count": len(links), "links": [link.to_dict() for link in links]})
        return 0

    async def get(self, short_code: str) -> int:
        try:
            link = await self.admin.get(short_code)
        except ShortLinkError as e:
            _print({"success": False, "code": e.code, "error": e.message}, error=True)
            return 1

        if link is None:
            _print({"success": False, "code": "not_found", "error": f"Short code '{short_code}' not found"}, error=True)
            return 1
        _print({"success": True, "link": link.to_dict()})
        return 0

    async def delete(self, link_id: int) -> int:
        try:
            deleted = await self.admin.delete(link_id)
        except ShortLinkError as e:
            _print({"success": False, "code": e.code, "error": e.message}, error=True)
            return 1

        _print({"success": True, "id": link_id, "deleted": deleted})
        return 0

    async def stats(self) -> int:
        try:
            stats = await self.admin.statistics()
        except ShortLinkError as e:
            _print({"success": False, "code": e.code, "error": e.message}, error=True)
            return 1

        _print({"success": True, "statistics": stats})
        return 0

    async def health(self) -> int:
        health_status = await self.admin.health_check()
        _print({"success": health_status["overall"], "health": health_status})
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Short link administration CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s create "Spring campaign" https://example.com/spring --slug spring
  %(prog)s list --order-by clicks --direction DESC
  %(prog)s get spring
  %(prog)s delete 42
        """
    )
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    parser.add_argument("--redis-url", default=None, help="Override REDIS_URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Create a link")
    create_parser.add_argument("title", help="Link title")
    create_parser.add_argument("url", help="Target URL")
    create_parser.add_argument("--slug", help="Explicit short code")

    list_parser = subparsers.add_parser("list", help="List links")
    list_parser.add_argument("--order-by", default="created_at", help="Sort column")
    list_parser.add_argument("--direction", default="DESC", help="ASC or DESC")

    get_parser = subparsers.add_parser("get", help="Show a link")
    get_parser.add_argument("short_code", help="Short code to look up")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("id", type=int, help="Link id")

    subparsers.add_parser("stats", help="Show statistics")
    subparsers.add_parser("health", help="Check store and cache health")

    return parser


async def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortLinksCLI(database_url=args.database_url, redis_url=args.redis_url, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "create":
            return await cli.create(args.title, args.url, args.slug)
        elif args.command == "list":
            return await cli.list_links(args.order_by, args.direction)
        elif args.command == "get":
            return await cli.get(args.short_code)
        elif args.command == "delete":
            return await cli.delete(args.id)
        elif args.command == "stats":
            return await cli.stats()
        elif args.command == "health":
            return await cli.health()
        parser.print_help()
        return 1
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
