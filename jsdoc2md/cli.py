#!/usr/bin/env python3
"""
Command-line interface.

Usage:
    jsdoc2md lib/*.js > api.md
    jsdoc2md src/**/*.js --heading-depth 3 --separators
    jsdoc2md --source "$(cat index.js)" --json
    cat index.js | jsdoc2md --namepaths

Defaults are read from ``.jsdoc2md.json`` and the ``jsdoc2md`` key of
``package.json`` in the working directory. Command-line values win.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

from jinja2 import TemplateError

from . import __version__
from .api import create
from .jsdoc import JsdocError
from .options import normalize_keys

_MODES = ("json", "jsdoc", "namepaths", "clear", "config", "verbose")


def load_config(cwd):
    config = {}
    pkg = os.path.join(cwd, "package.json")
    if os.path.isfile(pkg):
        with open(pkg, "r", encoding="utf-8") as f:
            config.update(normalize_keys(json.load(f).get("jsdoc2md")))
    rc = os.path.join(cwd, ".jsdoc2md.json")
    if os.path.isfile(rc):
        with open(rc, "r", encoding="utf-8") as f:
            config.update(normalize_keys(json.load(f)))
    return config


def build_parser():
    p = argparse.ArgumentParser(
        prog="jsdoc2md",
        description="Generate markdown API documentation from jsdoc-annotated source code",
        argument_default=argparse.SUPPRESS,
    )
    p.add_argument("files", nargs="*", default=None, help="Source files or globs (** supported)")

    src = p.add_argument_group("source")
    src.add_argument("--source", help="Source code to document, instead of files")
    src.add_argument("-c", "--configure", help="Path to a jsdoc configuration file")
    src.add_argument("--html", action="store_true", help="Document .html files (experimental)")
    src.add_argument(
        "--no-cache", dest="cache", action="store_false", help="Disable the memoisation cache"
    )

    out = p.add_argument_group("output")
    out.add_argument("-t", "--template", help="Template file to render instead of the default")
    out.add_argument("-d", "--heading-depth", type=int, help="Initial heading depth (default: 2)")
    out.add_argument("--example-lang", help="Default language for @example blocks")
    out.add_argument("--plugin", nargs="+", help="Importable modules providing partials/helpers")
    out.add_argument("--helper", nargs="+", help="Python files defining template helpers")
    out.add_argument("--partial", nargs="+", help="Template files overriding default partials")
    out.add_argument("--name-format", action="store_true", help="Format names as code")
    out.add_argument("--no-gfm", action="store_true", help="Avoid GitHub-flavoured markdown")
    out.add_argument("--separators", action="store_true", help="Put breaks between identifiers")
    for name, choices in (
        ("module-index-format", ["none", "grouped", "table", "dl"]),
        ("global-index-format", ["none", "grouped", "table", "dl"]),
        ("param-list-format", ["list", "table"]),
        ("property-list-format", ["list", "table"]),
        ("member-index-format", ["grouped", "list"]),
    ):
        out.add_argument(f"--{name}", choices=choices)
    out.add_argument("--sort-by", nargs="+", help="Template data sort fields, or 'none'")

    mode = p.add_argument_group("mode")
    mode.add_argument("--json", action="store_true", default=False, help="Print template data")
    mode.add_argument("--jsdoc", action="store_true", default=False, help="Print raw jsdoc data")
    mode.add_argument(
        "--namepaths", action="store_true", default=False, help="Print namepaths by kind"
    )
    mode.add_argument("--clear", action="store_true", default=False, help="Clear the caches")
    mode.add_argument(
        "--config", action="store_true", default=False, help="Print the merged configuration"
    )
    mode.add_argument("-v", "--verbose", action="store_true", default=False, help="Debug logging")
    mode.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def merge_options(args, config, stdin=None):
    """Layer command-line values over the config-file ``config``."""
    options = dict(config)
    for key, value in vars(args).items():
        if key in _MODES or (key == "files" and not value):
            continue
        options[key] = value
    if options.get("sort_by") == ["none"]:
        options["sort_by"] = "none"
    if "template" in options and os.path.isfile(options["template"]):
        with open(options["template"], "r", encoding="utf-8") as f:
            options["template"] = f.read()
    if not options.get("files") and not options.get("source") and stdin is not None:
        if not stdin.isatty():
            options["source"] = stdin.read()
    return options


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    jsdoc2md = create()
    try:
        if args.clear:
            asyncio.run(jsdoc2md.clear())
            return 0

        options = merge_options(args, load_config(os.getcwd()), stdin=sys.stdin)
        if args.config:
            print(json.dumps(options, indent=2, sort_keys=True))
        elif args.jsdoc:
            print(json.dumps(jsdoc2md.get_jsdoc_data_sync(options), indent=2))
        elif args.json:
            print(json.dumps(jsdoc2md.get_template_data_sync(options), indent=2))
        elif args.namepaths:
            print(json.dumps(asyncio.run(jsdoc2md.get_namepaths(options)), indent=2))
        else:
            sys.stdout.write(jsdoc2md.render_sync(options))
    except (JsdocError, TemplateError, ImportError, OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
