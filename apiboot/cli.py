"""
Command line interface.

Usage:
    python -m apiboot serve [--host H] [--port P] [--base-path /api]
    python -m apiboot show-config

Options not given on the command line fall back to ``APIBOOT_*``
environment variables and then to the built-in defaults.
"""

import argparse
import json
from typing import Any

from apiboot.core.config import ServerConfig
from apiboot.interfaces.health import register_health


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Build a ServerConfig from the options the user actually passed."""
    overrides: dict[str, Any] = {
        name: getattr(args, name)
        for name in (
            "host",
            "port",
            "base_path",
            "log_level",
            "access_log",
            "enable_validation",
            "enable_default_binder",
            "enable_error_handler",
        )
        if getattr(args, name, None) is not None
    }
    return ServerConfig(route_hooks=(register_health,), **overrides)


def cmd_serve(args: argparse.Namespace) -> None:
    """Serve the health route until interrupted."""
    from apiboot.main import start_with

    start_with(build_config(args))


def cmd_show_config(args: argparse.Namespace) -> None:
    """Print the effective configuration as JSON."""
    config = build_config(args)
    payload = config.model_dump(exclude={"init_hook", "route_hooks", "auth"})
    payload["address"] = config.address()
    payload["auth"] = config.auth is not None
    print(json.dumps(payload, indent=2, sort_keys=True))


def _add_server_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default=None, help="Interface to bind (default: all)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default 1323)")
    parser.add_argument(
        "--base-path", default=None, dest="base_path",
        help="Prefix for every route, e.g. /api/v1",
    )
    parser.add_argument(
        "--log-level", default=None, dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument(
        "--no-validation", action="store_false", default=None,
        dest="enable_validation", help="Do not install the validator",
    )
    parser.add_argument(
        "--no-default-binder", action="store_false", default=None,
        dest="enable_default_binder", help="Do not install the default-value binder",
    )
    parser.add_argument(
        "--no-error-handler", action="store_false", default=None,
        dest="enable_error_handler", help="Keep the framework's default error responses",
    )
    parser.add_argument(
        "--no-access-log", action="store_false", default=None,
        dest="access_log", help="Do not log one line per request",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="apiboot", description="Configuration-driven FastAPI server bootstrap"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the server")
    _add_server_options(serve_parser)
    serve_parser.set_defaults(func=cmd_serve)

    show_parser = subparsers.add_parser(
        "show-config", help="Print the effective configuration"
    )
    _add_server_options(show_parser)
    show_parser.set_defaults(func=cmd_show_config)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
