from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import uvicorn

from streamhop.domain.exceptions import ProviderNotFoundError
from streamhop.infrastructure.config import AppConfig, load_config
from streamhop.infrastructure.logging.setup import configure_logging
from streamhop.interfaces.composition import open_runtime
from streamhop.interfaces.main import build_app


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="streamhop")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=None, help="Bind host (overrides HOST env).")
    serve.add_argument("--port", default=None, type=int, help="Bind port (overrides PORT env).")
    _add_config_flags(serve)

    streams = sub.add_parser("streams", help="Resolve a catalog link and print streams as JSON.")
    streams.add_argument("provider")
    streams.add_argument("link")
    streams.add_argument("--type", dest="content_type", default="movie", choices=["movie", "series"])
    _add_config_flags(streams)

    episodes = sub.add_parser("episodes", help="List a title's episodes as JSON.")
    episodes.add_argument("provider")
    episodes.add_argument("url")
    _add_config_flags(episodes)

    return parser.parse_args(list(argv) if argv is not None else None)


def _load(args: argparse.Namespace) -> AppConfig:
    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    return load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=cli_overrides,
    )


async def _run_streams(config: AppConfig, provider: str, link: str, content_type: str) -> list[dict]:
    async with open_runtime(config) as runtime:
        streams = await runtime.resolve_streams_uc.execute(provider, link, content_type)
    return [stream.to_dict() for stream in streams]


async def _run_episodes(config: AppConfig, provider: str, url: str) -> list[dict]:
    async with open_runtime(config) as runtime:
        links = await runtime.list_episodes_uc.execute(provider, url)
    return [link.to_dict() for link in links]


def _serve(args: argparse.Namespace, config: AppConfig) -> int:
    configure_logging(config)
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "7980"))
    uvicorn.run(build_app(config), host=host, port=port, log_config=None)
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """Process entrypoint: load config once, then dispatch the subcommand."""
    args = _parse_args(argv)
    config = _load(args)

    if args.command == "serve":
        return _serve(args, config)

    # stdout carries the JSON result
    configure_logging(config, stderr_only=True)
    try:
        if args.command == "streams":
            result = asyncio.run(_run_streams(config, args.provider, args.link, args.content_type))
        else:
            result = asyncio.run(_run_episodes(config, args.provider, args.url))
    except ProviderNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    json.dump(result, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
