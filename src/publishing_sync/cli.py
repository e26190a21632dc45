"""Command-line entry point for publishing-sync.

Commands:
    redirect       Publish a redirect synchronously.
    check-config   Print the resolved configuration.
"""

import argparse
import json
import logging
import sys

from . import __version__
from .bootstrap import build_runtime, resolve_config
from .config import Config
from .errors import DeliveryError
from .logger import setup_logging
from .models import Redirect, RouteEntry

logger = logging.getLogger(__name__)


def _mask(value: str) -> str:
    if not value:
        return "(not set)"
    return value[:4] + "..." if len(value) > 8 else "****"


def _describe_config(config: Config) -> dict:
    return {
        "publishing_api_url": config.publishing_api_url,
        "bearer_token": _mask(config.bearer_token),
        "insecure": config.insecure,
        "debug": config.debug,
        "default_queue": config.default_queue,
        "max_attempts": config.max_attempts,
        "backoff_base": config.backoff_base,
        "max_parallel_jobs": config.max_parallel_jobs,
        "publishing_app": config.publishing_app,
        "rendering_app": config.rendering_app,
        "served_locally_formats": list(config.served_locally_formats),
    }


def cmd_check_config(config: Config, args: argparse.Namespace) -> int:
    print(json.dumps(_describe_config(config), indent=2))
    return 0


def cmd_redirect(config: Config, args: argparse.Namespace) -> int:
    redirect = Redirect(
        base_path=args.base_path,
        redirects=[
            RouteEntry(
                path=args.base_path,
                type="prefix" if args.prefix else "exact",
                destination=args.destination,
            )
        ],
    )
    runtime = build_runtime(config)
    try:
        runtime.publishing_api.publish_redirect(redirect)
    except (DeliveryError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Redirected {args.base_path} -> {args.destination}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="publishing-sync",
        description="Publishing sync - push content changes to the publishing API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the configuration resolved from CLI, env, .env and config.yml
  publishing-sync check-config

  # Redirect a retired page
  publishing-sync redirect /government/people/old-name /government/people/new-name

  # Redirect a whole subtree against a local publishing API
  publishing-sync --url http://localhost:3093 redirect /government/topics /topics --prefix
        """,
    )
    parser.add_argument(
        "--url",
        help="Override publishing API URL (takes precedence over PUBLISHING_API_URL)",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip SSL certificate verification (use only for development)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--log-file", help="Also write logs to this file"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"publishing-sync version {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    redirect_parser = subparsers.add_parser(
        "redirect", help="Publish a redirect synchronously"
    )
    redirect_parser.add_argument("base_path", help="Path to redirect from")
    redirect_parser.add_argument("destination", help="Path to redirect to")
    redirect_parser.add_argument(
        "--prefix",
        action="store_true",
        help="Redirect every path under base_path, not just the exact path",
    )
    redirect_parser.set_defaults(handler=cmd_redirect)

    check_parser = subparsers.add_parser(
        "check-config", help="Print the resolved configuration"
    )
    check_parser.set_defaults(handler=cmd_check_config)

    return parser


def run(argv: list[str] | None = None) -> None:
    """Entry point that handles errors gracefully and parses CLI arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_overrides = {}
    if args.url:
        config_overrides["url"] = args.url
    if args.insecure:
        config_overrides["insecure"] = True
    if args.debug:
        config_overrides["debug"] = True

    try:
        config = resolve_config(config_overrides)
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)

    # the logging section of config.yml only applies once config is resolved
    setup_logging(
        mode="cli",
        debug=args.debug or config.debug,
        log_file=args.log_file or config.log_file,
        level=config.log_level,
    )

    try:
        sys.exit(args.handler(config, args))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
