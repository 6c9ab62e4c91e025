#!/usr/bin/env python3
"""
Command-line front end for phpcore.

Usage:
    python -m phpcore FILE
    python -m phpcore -f FILE
    python -m phpcore -r 'echo "Hello World";'
    python -m phpcore -l FILE
    python -m phpcore -d display_errors=0 -c settings.yaml FILE

Examples:
    # Run a script
    python -m phpcore examples/hello.php

    # Run inline code (the code needs no open tag)
    python -m phpcore -r 'echo "Hello World";'

    # Check brace/paren balance only
    python -m phpcore -l examples/hello.php
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from . import __version__
from .config import load_config
from .runtime import Engine, OutputSink, PHP_VERSION, ZEND_VERSION


logger = logging.getLogger("phpcore")


def version_banner() -> str:
    return (
        f"PHP {PHP_VERSION} (phpcore)\n"
        f"Zend Engine v{ZEND_VERSION}, with phpcore v{__version__}"
    )


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m phpcore',
        description='phpcore script runner',
    )
    parser.add_argument('file', nargs='?', help='Script file to execute')
    parser.add_argument('-f', dest='script', metavar='FILE',
                        help='Parse and execute FILE')
    parser.add_argument('-r', '-e', dest='code', metavar='CODE',
                        help='Run CODE given on the command line')
    parser.add_argument('-l', dest='lint', action='store_true',
                        help='Syntax check only')
    parser.add_argument('-d', dest='define', action='append', metavar='KEY=VALUE',
                        help='Set a php.ini style directive (can be repeated)')
    parser.add_argument('-c', dest='config', metavar='FILE',
                        help='YAML configuration file')
    parser.add_argument('-v', '--version', action='store_true',
                        help='Show version information')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser


def cmd_syntax_check(engine: Engine, path: str) -> int:
    """Check a script for balanced braces and parentheses."""
    if not engine.syntax_check(path):
        print(engine.diagnostics.format_all(), file=sys.stderr)
        print(f"Syntax error in {path}", file=sys.stderr)
        return 1
    print(f"No syntax errors detected in {path}")
    return 0


def cmd_run_code(engine: Engine, code: str) -> int:
    """Execute code given on the command line."""
    if not engine.execute(code):
        print("Failed to execute code", file=sys.stderr)
        return 1
    return 0


def cmd_run_file(engine: Engine, path: str) -> int:
    """Execute a script file."""
    if not engine.execute_file(path):
        print(f"Failed to execute {path}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.debug)

    if args.version:
        print(version_banner())
        return 0

    try:
        config = load_config(args.config, args.define or [])
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    script = args.script or args.file
    if args.code is None and script is None:
        parser.print_usage(sys.stderr)
        return 1

    sys.stdout.flush()
    sink = OutputSink(sys.stdout.buffer, sys.stderr.buffer, config.output_encoding)
    engine = Engine(config=config, sink=sink)
    if not engine.init():
        print("Failed to initialize PHP engine", file=sys.stderr)
        return 1

    try:
        if args.code is not None:
            return cmd_run_code(engine, args.code)
        if args.lint:
            return cmd_syntax_check(engine, script)
        return cmd_run_file(engine, script)
    finally:
        engine.cleanup()
        logger.debug("exiting")


if __name__ == '__main__':
    sys.exit(main())
