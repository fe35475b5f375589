from __future__ import annotations

import argparse
import logging
import secrets
import sys
from dataclasses import replace
from pathlib import Path

from .config import Settings
from .notify.errors import NotificationError
from .pipeline.submit import PipelineResult, run_indexing_api, run_indexnow_submission
from .reporting.summary import format_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Notify search engines about new or changed URLs."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_url_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--url",
            dest="urls",
            action="append",
            default=[],
            help="URL to submit. May be repeated; overrides SUBMIT_URLS.",
        )
        sub.add_argument(
            "--urls-file",
            type=Path,
            help="File with one URL per line. Overrides URLS_FILE.",
        )
        sub.add_argument(
            "--delay",
            type=float,
            help="Seconds to wait between requests. Overrides REQUEST_DELAY.",
        )

    indexnow = subparsers.add_parser("indexnow", help="Submit URLs via IndexNow.")
    add_url_options(indexnow)
    indexnow.add_argument(
        "--endpoint",
        dest="endpoints",
        action="append",
        default=[],
        help="IndexNow endpoint host. May be repeated; overrides INDEXNOW_ENDPOINTS.",
    )

    google = subparsers.add_parser("google", help="Use the Google Indexing API.")
    google.add_argument(
        "action",
        nargs="?",
        default="submit",
        choices=["submit", "status", "delete"],
        help="submit (default), status or delete.",
    )
    add_url_options(google)

    subparsers.add_parser("keygen", help="Print a new random IndexNow key.")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.urls:
        settings = replace(settings, urls=tuple(args.urls))
    if args.urls_file:
        settings = replace(settings, urls_file=args.urls_file.expanduser().resolve())
    if args.delay is not None:
        settings = replace(settings, delay=args.delay)
    if getattr(args, "endpoints", None):
        settings = replace(settings, endpoints=tuple(args.endpoints))
    return settings


def log_result(result: PipelineResult) -> None:
    for report in result.reports:
        for line in format_report(report):
            logging.info("%s", line)
    logging.info(
        "Started %s; %d URL(s); %d of %d request(s) succeeded.",
        result.started_at.to_iso8601_string(),
        result.urls,
        result.success_count,
        result.attempted,
    )


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)

    if args.command == "keygen":
        key = secrets.token_hex(16)
        print(key)
        logging.info("Host this key at <site>/%s.txt and set INDEXNOW_KEY.", key)
        return 0

    try:
        settings = apply_overrides(Settings.from_env(), args)
        if args.command == "indexnow":
            result = run_indexnow_submission(settings)
        else:
            result = run_indexing_api(settings, action=args.action)
    except (RuntimeError, ValueError, NotificationError) as exc:
        logging.error("%s", exc)
        return 1

    log_result(result)
    if result.success_count == 0:
        logging.warning("All submissions failed. Check the key, credentials and network.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
