from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .config import DEFAULT_OPTIONS, RenderOptions, load_context, load_options
from .errors import TemplateError
from .template import CompiledTemplate, compile_template
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dottpl",
        description="Render {{ }} templates against YAML/JSON data",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument(
        "--verbose",
        action="store_true",
        help="debug logging to stderr (same as DOTTPL_DEBUG=1)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="render a template to stdout or a file")
    sp_render.add_argument("template", type=Path, help="template file")
    sp_render.add_argument(
        "--data",
        type=Path,
        required=True,
        metavar="FILE",
        help="context document (YAML or JSON)",
    )
    sp_render.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="render options (YAML)",
    )
    sp_render.add_argument(
        "-o", "--output",
        type=Path,
        metavar="FILE",
        help="write the result to FILE instead of stdout",
    )

    sp_check = sub.add_parser("check", help="compile a template and print its declaration tree")
    sp_check.add_argument("template", type=Path, help="template file")

    return p


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if (verbose or os.environ.get("DOTTPL_DEBUG")) else logging.WARNING
    logger = logging.getLogger("dottpl")
    logger.setLevel(level)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)


def _compile_file(path: Path) -> CompiledTemplate:
    return compile_template(path.read_text(encoding="utf-8"))


def _options(config: Optional[Path]) -> RenderOptions:
    if config is None:
        return DEFAULT_OPTIONS
    return load_options(config)


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(ns.verbose))

    try:
        if ns.cmd == "render":
            template = _compile_file(ns.template)
            options = _options(ns.config)
            context = load_context(ns.data)
            if ns.output is None:
                template.render(context, sys.stdout, options)
            else:
                # Render fully before touching the output file
                ns.output.write_text(template.render_to_string(context, options), encoding="utf-8")
            return 0

        if ns.cmd == "check":
            template = _compile_file(ns.template)
            tree = template.format_tree()
            sys.stdout.write((tree + "\n") if tree else "(no directives)\n")
            return 0

    except TemplateError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except OSError as e:
        sys.stderr.write(f"{e}\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
