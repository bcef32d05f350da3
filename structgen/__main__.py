"""Entry point: python -m structgen [-json config.json]

Reads column metadata from the database catalog and prints (or writes) one
Go struct per table.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Sequence, TextIO

from .catalog import ENV_KEYS, get_catalog
from .codegen import generate, write_output
from .errors import StructGenError
from .loader import load_config, override_by_env

logger = logging.getLogger("structgen")

PROG = "structgen"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, add_help=False)
    parser.add_argument("-json", dest="json_file", default="", help="Config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-h", "--help", action="store_true", help="Show usage")
    return parser


def usage(env_names: Mapping[str, str], out: TextIO) -> None:
    """Print the config flag and the environment variables that replace it."""
    print(f"Usage of {PROG}:\n  -json <JSON file>", file=out)
    print("  or use these environmental variables.", file=out)
    for key in ENV_KEYS:
        print(env_names[key], file=out)


def run(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run the generator and return the process exit status."""
    out = stdout or sys.stdout
    args = build_parser().parse_args(argv)
    environ = os.environ if environ is None else environ

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(Path(args.json_file) if args.json_file else None)
        catalog = get_catalog(config.db_type)
        config = override_by_env(config, catalog.env_names(), environ)

        if args.help or not config.db_host:
            usage(catalog.env_names(), out)
            return 0

        columns = catalog.read_schema(config)
        source = generate(config, catalog, columns)
        write_output(config, source, stdout=out)
    except StructGenError as exc:
        logger.error("fatal: %s", exc)
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
