"""CLI entry point for the Weather Now page."""

import argparse
import asyncio
import json
import logging

from pydantic import ValidationError

from weathernow.config.loader import (
    ConfigError,
    get_config_value,
    load_config,
    redacted_dict,
    redacted_json,
)
from weathernow.dashboard import build_session, run
from weathernow.ingest.openweather_client import OpenWeatherClient
from weathernow.models.ui_state import Success
from weathernow.reporting.formatters import format_session_json, render_text


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weathernow",
        description="Current conditions and forecast for a place",
    )
    parser.add_argument("--config", default=None, help="Config YAML path")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # search
    search_p = sub.add_parser("search", help="Look up a place")
    search_p.add_argument("place", nargs="+", help="City name")
    search_p.add_argument(
        "--json", action="store_true", help="Print the JSON view model"
    )

    # serve
    serve_p = sub.add_parser("serve", help="Serve the web page")
    serve_p.add_argument("--host", default=None)
    serve_p.add_argument("--port", type=int, default=None)

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    show_p = config_sub.add_parser("show", help="Display current config")
    show_p.add_argument(
        "key", nargs="?", default=None, help="Dotted key, e.g. display.max_days"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except (ConfigError, ValidationError) as e:
        print(f"Error: {e}")
        return 1

    if args.command == "search":
        return _cmd_search(config, args)
    elif args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_search(config, args) -> int:
    try:
        session = build_session(config, OpenWeatherClient.from_config(config.provider))
    except ConfigError as e:
        print(f"Error: {e}")
        return 1
    if asyncio.run(session.submit(" ".join(args.place))) is None:
        print("Error: place must not be blank")
        return 1
    if args.json:
        print(format_session_json(session))
    else:
        print(render_text(session))
    return 0 if isinstance(session.state, Success) else 1


def _cmd_serve(config, args) -> int:
    server = config.server.model_copy(
        update={
            k: v for k, v in (("host", args.host), ("port", args.port)) if v is not None
        }
    )
    try:
        run(config.model_copy(update={"server": server}))
    except ConfigError as e:
        print(f"Error: {e}")
        return 1
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        if args.key is None:
            print(redacted_json(config))
            return 0
        try:
            value = get_config_value(redacted_dict(config), args.key)
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            return 1
        print(json.dumps(value, indent=2) if isinstance(value, dict) else value)
        return 0
    print("Use: config show")
    return 1
