#!/usr/bin/env python3

import os
import sys
import argparse
import logging.config

import uvicorn

from restapis_core import settings as _settings
from restapis_core.api.api import create_app


def get_parser(program: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=program)

    commands = parser.add_subparsers(
        description="Available sub-commands: init, run",
        dest="command",
        required=True,
        metavar="<command>",
        help="the sub-command to be executed"
    )

    parser_init = commands.add_parser(
        "init",
        description="Initialize the project by creating a config file with default values"
    )
    parser_run = commands.add_parser(
        "run",
        description="Run 'uvicorn' ASGI server to serve the REST API"
    )

    parser_init.add_argument(
        "--config",
        type=str,
        metavar="config",
        default="config.json",
        help="Path of the newly created config file (defaults to 'config.json')"
    )
    parser_init.add_argument(
        "--force",
        action="store_true",
        help="Allow overwriting an existing config file"
    )

    parser_run.add_argument(
        "--host",
        type=str,
        metavar="host",
        help="Bind TCP socket to this host (overwrite config)"
    )
    parser_run.add_argument(
        "--port",
        type=int,
        metavar="port",
        help="Bind TCP socket to this port (overwrite config)"
    )
    parser_run.add_argument(
        "--config",
        type=str,
        metavar="config",
        default="config.json",
        help="Overwrite the config file (defaults to 'config.json')"
    )
    parser_run.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging and tracebacks in the console"
    )
    parser_run.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload"
    )
    parser_run.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="n",
        help="Number of worker processes (not valid with --reload)",
    )
    parser_run.add_argument(
        "--no-access-log",
        action="store_true",
        help="Disable access logs"
    )
    parser_run.add_argument(
        "--root-path",
        type=str,
        default="",
        metavar="p",
        help="Sub-mount the application below the given path"
    )

    return parser


def init_project(args: argparse.Namespace) -> int:
    if os.path.exists(args.config) and not args.force:
        print(f"File {args.config!r} already exists. Use '--force' to overwrite it. Aborting!", file=sys.stderr)
        return 1

    _settings.store_configuration(path=args.config)
    print(f"Successfully created the new config file {args.config!r}.")
    return 0


def run_server(args: argparse.Namespace) -> int:
    if args.debug:
        print("Do not start the server this way during production!", file=sys.stderr)
    if args.reload and args.workers:
        print("The options '--reload' and '--workers' can't be used together.", file=sys.stderr)
        return 1

    # worker and reloader processes import the app on their own and rely on the env variables
    _settings.CONFIG_PATHS.insert(0, args.config)
    os.environ["CONFIG_PATH"] = args.config
    if args.debug:
        os.environ["SERVER__DEBUG"] = "true"
    try:
        settings = _settings.Settings()
    except ValueError:
        print("Ensure that the configuration file is valid. Please correct any errors.", file=sys.stderr)
        raise

    if settings.server.debug:
        settings.logging.enable_debug()

    port = args.port
    if port is None:
        port = settings.server.port
    host = args.host
    if host is None:
        host = settings.server.host

    if args.reload or args.workers:
        app = "restapis_core.api.api:api.app"
        logging.config.dictConfig(settings.logging.model_dump())
    else:
        app = create_app(settings=settings)

    logging.getLogger("restapis_core").info(f"Server running at host {host} port {port}")
    uvicorn.run(
        app,
        port=port,
        host=host,
        reload=args.reload,
        workers=args.workers,
        log_level="debug" if settings.server.debug else "info",
        log_config=settings.logging.model_dump(),
        access_log=not args.no_access_log,
        proxy_headers=True,
        root_path=args.root_path
    )
    return 0


if __name__ == '__main__':
    program_name = sys.argv[0] if not sys.argv[0].endswith("__main__.py") else "restapis_core"
    namespace = get_parser(program_name).parse_args(sys.argv[1:])

    command_functions = {
        "init": init_project,
        "run": run_server
    }
    exit(command_functions[namespace.command](namespace))
