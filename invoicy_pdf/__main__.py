"""Command line entrypoint: run the render service or render a JSON file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import HOST, LOG_LEVEL, PORT
from .server import DependencyError, load_render_jobs, run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="invoicy_pdf")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="run the HTTP render service")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)

    render = sub.add_parser("render", help="render a {document, companyInfo} JSON file")
    render.add_argument("input", type=Path)
    render.add_argument("-o", "--output", type=Path, default=None)
    return parser


def render_file(source: Path, output: Optional[Path]) -> Path:
    payload = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{source}: JSON root must be an object")

    render_document_job = load_render_jobs()["document"]
    result = render_document_job(payload)
    target = output or source.with_name(result["filename"])
    target.write_bytes(result["content"])
    return target


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    level = logging.getLevelName(LOG_LEVEL)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "render":
            target = render_file(args.input, args.output)
            print(target)
        elif args.command == "serve":
            run(args.host, args.port)
        else:
            run(HOST, PORT)
    except DependencyError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
