"""CLI entry point — Serve the API or run index maintenance."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="orderindex",
        description="orderindex — Incremental order indexing for hosted search",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"orderindex {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")

    reindex = commands.add_parser("reindex", help="Clear the orders index and re-index every order")
    reindex.add_argument("--batch-size", type=_positive_int, default=100, help="Orders per page")

    commands.add_parser("push-settings", help="Push index settings and synonyms")

    args = parser.parse_args(argv)

    from orderindex.config.settings import Settings
    from orderindex.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level
    setup_logging(settings.observability)

    if args.command == "serve":
        return _serve(settings, args)
    return _maintain(settings, args)


def _serve(settings, args: argparse.Namespace) -> int:
    import uvicorn

    from orderindex.api.app import create_app

    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.observability.log_level.lower(),
    )
    return 0


def _maintain(settings, args: argparse.Namespace) -> int:
    from orderindex.adapters.base.exceptions import AdapterError
    from orderindex.core.plugin import OrdersSearchPlugin

    plugin = OrdersSearchPlugin(settings)
    try:
        plugin.load()
        index = plugin.require_orders_index()
        if args.command == "reindex":
            report = index.re_index_all(batch_size=args.batch_size)
            print(
                f"Re-indexed {report.processed}/{report.total_items} orders "
                f"({report.failed} failed, {report.pages} page(s))"
            )
            return 1 if report.failed else 0

        index.push_settings()
        print(f"Pushed settings to {index.remote.index_name}")
        return 0
    except (AdapterError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        plugin.shutdown()


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _get_version() -> str:
    """Get the package version."""
    try:
        from orderindex import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
