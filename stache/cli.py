from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import DEFAULT_CFG_FILE, RenderOptions, load_config, load_data
from .context import ContextStack
from .engine import Mustache
from .errors import StacheUserError
from .partials import DirectoryPartialLoader, PartialLoader
from .version import tool_version


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("STACHE_DEBUG") else logging.WARNING
    log = logging.getLogger("stache")
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stache",
        description="Mustache-style template renderer",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="render a template to stdout")
    sp_render.add_argument("template", type=Path, help="template file")
    sp_render.add_argument("--data", type=Path, help="YAML or JSON data file")
    sp_render.add_argument(
        "--config",
        type=Path,
        help=f"options file (default: ./{DEFAULT_CFG_FILE} if present)",
    )
    sp_render.add_argument("--partials", type=Path, metavar="DIR", help="directory with partial templates")
    sp_render.add_argument("--no-escape", action="store_true", help="do not HTML-escape {{name}} values")

    sp_print = sub.add_parser("print", help="print the parsed node tree")
    sp_print.add_argument("template", type=Path, help="template file")

    sp_check = sub.add_parser("check", help="exit 0 if the template parses, 1 otherwise")
    sp_check.add_argument("template", type=Path, help="template file")

    return p


def _options(ns: argparse.Namespace) -> RenderOptions:
    cfg_path = ns.config if ns.config is not None else Path.cwd() / DEFAULT_CFG_FILE
    opts = load_config(cfg_path)
    if ns.partials is not None:
        opts = replace(opts, partials_dir=ns.partials)
    if ns.no_escape:
        opts = replace(opts, escape=False)
    return opts


def _partials(opts: RenderOptions) -> Optional[PartialLoader]:
    if opts.partials_dir is None:
        return None
    return DirectoryPartialLoader(opts.partials_dir, opts.partials_suffix)


def _load_template(path: Path, opts: Optional[RenderOptions] = None) -> Mustache:
    if not path.is_file():
        raise StacheUserError(f"Template not found: {path}")
    opts = opts or RenderOptions()
    return Mustache.from_file(path, opts, _partials(opts))


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        if ns.cmd == "render":
            opts = _options(ns)
            template = _load_template(ns.template, opts)
            data = load_data(ns.data) if ns.data is not None else {}
            sys.stdout.write(template.render_to_string(ContextStack(data)))
            return 0

        if ns.cmd == "print":
            _load_template(ns.template).print(sys.stdout)
            return 0

        if ns.cmd == "check":
            template = _load_template(ns.template)
            if not template.is_valid():
                sys.stderr.write(f"{ns.template}: {template.error_message()}\n")
                return 1
            return 0

        raise ValueError(f"Unknown command: {ns.cmd}")

    except StacheUserError as e:
        # user-facing errors: message only, no traceback
        sys.stderr.write(f"Error: {e}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
