"""Entry point — python -m airgraph, or a symlink named airos_<host>."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2

logger = logging.getLogger("airgraph")


def main(argv: list[str] | None = None, prog: str | None = None) -> int:
    prog = prog or sys.argv[0]
    parser = argparse.ArgumentParser(
        prog=os.path.basename(prog),
        description="Munin multigraph plugin for AirOS wireless devices",
    )
    parser.add_argument(
        "mode", nargs="?", default="fetch",
        help="'config' prints the graph schema; anything else polls the device",
    )
    parser.add_argument(
        "--config-file",
        help="Path to a YAML configuration file (default: $AIRGRAPH_CONFIG)",
        default=None,
    )
    args, _ = parser.parse_known_args(argv)

    from airgraph.app import Application, setup_logging
    from airgraph.config.settings import load_config, resolve_host
    from airgraph.errors import ConfigurationError

    setup_logging(os.environ.get("AIRGRAPH_LOG_LEVEL", "WARNING"))

    try:
        settings = load_config(args.config_file)
        logging.root.setLevel(settings.log_level)
        host = resolve_host(settings, prog)
        app = Application(settings, host)
        if args.mode == "config":
            output = app.config()
        else:
            output = asyncio.run(app.fetch())
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    sys.stdout.write(output)
    sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
