# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the Perspectives command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from perspectives.compiler.artifact import serialize
from perspectives.compiler.build import CompilerError, compile_files, find_sources
from perspectives.compiler.parser import ParseError, parse
from perspectives.compiler.sources import SourceError, fetch_remote_sources, load_source
from perspectives.validation.checks import validate
from perspectives.workspace.config import (
    WORKSPACE_CONFIG_FILENAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    render_workspace_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the Perspectives CLI."""
    parser = argparse.ArgumentParser(
        prog="psp",
        description="Perspectives - parse and check context/role sources",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new Perspectives workspace",
        description=f"Create a {WORKSPACE_CONFIG_FILENAME} file in a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize the workspace in (default: current directory)",
    )

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse one source and print the result as JSON",
        description="Parse a .psp file or URL and print the entity collection.",
    )
    parse_parser.add_argument("source", help="Path or http(s) URL of a .psp source")
    parse_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation; 0 prints compact JSON (default: 2)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Parse and check every source in the workspace",
        description="Compile all .psp files in the workspace and run consistency checks.",
    )
    check_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the Perspectives workspace (default: current directory)",
    )

    # fetch subcommand
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Download configured remote sources",
        description="Download the remote sources listed in the workspace configuration.",
    )
    fetch_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the Perspectives workspace (default: current directory)",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_DEFAULT_BUILD_DIR = ".psp-build"


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "parse":
        return _cmd_parse(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "fetch":
        return _cmd_fetch(args)
    return 0


def _load_config(directory: Path) -> WorkspaceConfig | None:
    """Load the workspace config in *directory*, printing the error and returning None on failure."""
    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    workspace_file = directory / WORKSPACE_CONFIG_FILENAME
    if not workspace_file.exists():
        print(
            f"Error: no Perspectives workspace found at '{directory}'. Run 'psp init' to initialize a workspace.",
            file=sys.stderr,
        )
        return None

    try:
        return load_workspace_config(workspace_file)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    workspace_file = directory / WORKSPACE_CONFIG_FILENAME

    if workspace_file.exists():
        print(
            f"Error: workspace already exists at '{workspace_file}'.",
            file=sys.stderr,
        )
        return 1

    content = "# Perspectives Workspace Configuration\n" + render_workspace_config(
        WorkspaceConfig(build_directory=_DEFAULT_BUILD_DIR)
    )
    workspace_file.write_text(content, encoding="utf-8")
    print(f"Initialized Perspectives workspace at '{workspace_file}'.")
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse subcommand."""
    try:
        text = load_source(args.source)
    except SourceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        collection = parse(text)
    except ParseError as exc:
        print(f"Error: {args.source}: {exc}", file=sys.stderr)
        return 1

    print(serialize(collection, indent=args.indent or None))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1

    build_dir = directory / config.build_directory
    psp_files = find_sources(directory, exclude=[build_dir])
    if not psp_files:
        print("No .psp files found in the workspace.")
        return 0

    print(f"Checking {len(psp_files)} source file(s)...")
    try:
        compiled = compile_files(psp_files, build_dir, directory)
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    has_errors = False
    for key, collection in compiled.items():
        result = validate(collection)
        for warning in result.warnings:
            print(f"Warning: {key}: {warning.message}")
        for error in result.errors:
            print(f"Error: {key}: {error.message}", file=sys.stderr)
            has_errors = True

    if has_errors:
        return 1

    print("No issues found.")
    return 0


def _cmd_fetch(args: argparse.Namespace) -> int:
    """Handle the fetch subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1

    if not config.remote_sources:
        print("No remote sources configured. Nothing to fetch.")
        return 0

    sync_dir = directory / config.remote_sync_directory
    try:
        written = fetch_remote_sources(config.remote_sources, sync_dir)
    except SourceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for path in written:
        print(f"  {path.relative_to(directory)}")
    print(f"Fetched {len(written)} source(s) into '{sync_dir}'.")
    return 0
