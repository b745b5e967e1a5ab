from __future__ import annotations
import argparse
import json
import sys

from jobhub.core.config import settings
from jobhub.core.logging import configure_logging
from jobhub.crawlers.errors import UnknownSourceError
from jobhub.db.database import SessionLocal
from jobhub.db.init_db import init_db
from jobhub.schemas.search import SearchOptions, SearchPreferences
from jobhub.services.aggregator import JobAggregator
from jobhub.services.storage import SqlStorage


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Search every configured job board and print the merged results.")
    p.add_argument("--query", required=True, help="Search keywords.")
    p.add_argument("--location", default="", help="Location passed to each source.")
    p.add_argument("--sources", default="", help="Comma separated sources (default: all, in priority order).")
    p.add_argument("--concurrent", type=int, default=None, help="Sources queried in parallel per batch.")
    p.add_argument("--limit", type=int, default=None, help="Results requested from each source.")
    p.add_argument("--smart", action="store_true", help="Filter and rank with --skills.")
    p.add_argument("--skills", default="", help="Comma separated skills for --smart.")
    return p.parse_args(argv)


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(settings.log_level)
    init_db()

    sources = _split(args.sources) or None
    with JobAggregator(settings, SqlStorage(SessionLocal)) as aggregator:
        try:
            if args.smart:
                prefs = SearchPreferences(location=args.location or "remote", skills=_split(args.skills), sources=sources)
                result = aggregator.smart_search(args.query, prefs)
            else:
                options = SearchOptions(sources=sources, concurrent=args.concurrent, limit=args.limit)
                result = aggregator.search_jobs(args.query, args.location, options)
        except UnknownSourceError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
