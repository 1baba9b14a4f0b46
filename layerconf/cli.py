"""Command line tool that layers configuration sources and prints the result."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .coding import CodingType
from .config import Config
from .errors import ConfigError

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layerconf",
        description=(
            "Merge configuration files, URLs, environment variables and --key=value "
            "arguments (in that order) and print the result."
        ),
        epilog="Unrecognised --key=value arguments are merged last as key-value pairs.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--file",
        action="append",
        dest="files",
        default=[],
        metavar="PATH",
        help="JSON or plist configuration file; repeat to layer several.",
    )
    parser.add_argument(
        "--url",
        action="append",
        dest="urls",
        default=[],
        help="Remote configuration document; repeat to layer several.",
    )
    parser.add_argument(
        "--env-prefix",
        help="Merge environment variables whose names start with this prefix.",
    )
    parser.add_argument(
        "--format",
        choices=[coding.value for coding in CodingType],
        default=CodingType.JSON.value,
        help="Output encoding.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Log verbosity level.",
    )
    return parser


def build_config(args: argparse.Namespace, overrides: Sequence[str]) -> Config:
    """Layer the sources named by parsed ``args``; ``overrides`` are merged last."""

    config = Config()
    for path in args.files:
        config.load_from_file(path)
    for url in args.urls:
        config.load_from_url(url)
    if args.env_prefix:
        prefix = args.env_prefix
        config.load_from_environment(lambda key: key.startswith(prefix))
    config.load_from_command_line(overrides)
    return config


def main(argv: Sequence[str] | None = None) -> int:
    args, overrides = build_parser().parse_known_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        config = build_config(args, overrides)
    except ConfigError as exc:
        LOG.debug("Configuration load failed", exc_info=True)
        print(f"layerconf: {exc}", file=sys.stderr)
        return 1
    output = config.dumps(CodingType(args.format)).decode("utf-8")
    sys.stdout.write(output if output.endswith("\n") else output + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
