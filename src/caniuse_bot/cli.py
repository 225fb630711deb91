"""CLI entry point: ``caniuse-bot serve`` and ``caniuse-bot lookup``."""

from __future__ import annotations

from caniuse_bot.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402

from caniuse_bot import __version__  # noqa: E402
from caniuse_bot.cache import create_cache_store  # noqa: E402
from caniuse_bot.config import Settings  # noqa: E402
from caniuse_bot.dataset.cache import DatasetCache, FetchError  # noqa: E402
from caniuse_bot.matching.resolver import (  # noqa: E402
    Ambiguous,
    FeatureResolver,
    NotFound,
    Resolved,
)
from caniuse_bot.messages.attachment import AttachmentBuilder  # noqa: E402
from caniuse_bot.messages.replies import (  # noqa: E402
    ambiguous_text,
    not_found_text,
)


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"caniuse-bot {__version__}")
        return

    if args.command == "serve":
        _run_serve(args)
    elif args.command == "lookup":
        sys.exit(asyncio.run(_run_lookup(args.keyword, Settings())))
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="caniuse-bot",
        description=(
            "Chat webhook relay answering keywords with"
            " caniuse browser-support cards."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the webhook server")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind address (default: HOST setting)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port (default: PORT setting)",
    )

    lookup = sub.add_parser(
        "lookup",
        help="Resolve a keyword and print the result",
    )
    lookup.add_argument("keyword", help="Feature keyword, e.g. flexbox")

    return parser


def _run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "caniuse_bot.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )


async def _run_lookup(keyword: str, settings: Settings) -> int:
    """Resolve keyword against the live dataset; 1 if nothing matched."""
    store = create_cache_store(settings)
    dataset_cache = DatasetCache(store, settings)
    try:
        result = await FeatureResolver(dataset_cache).resolve(keyword)
        match result:
            case Resolved(key=key, feature=feature):
                attachment = await AttachmentBuilder(dataset_cache).build(
                    key, feature
                )
                print(json.dumps(attachment.model_dump(), indent=2))
                return 0
            case Ambiguous(keys=keys):
                print(ambiguous_text(keys))
                return 0
            case NotFound(keyword=normalized):
                print(not_found_text(normalized), file=sys.stderr)
                return 1
    except FetchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    finally:
        await store.close()
    return 1
