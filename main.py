# -*- coding: utf-8 -*-
"""
main.py

Command-line entry point.

1. One-shot analysis of a local file (no HTTP server involved)
   python main.py analyze --mode email message.txt
   python main.py analyze --mode tally --image tally_scan.jpg
   python main.py analyze --mode tally - < report.txt

   Prints the same JSON body /api/analyze would return and exits with 0 on
   success / raw fallback, 1 on failure.

2. API server
   python main.py serve --port 8000
"""

import argparse
import asyncio
import base64
import json
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from core.config import get_api_key
from extraction import run_extraction
from extraction.schemas import AnalyzeRequest, ParseMode


def _read_text(path: Optional[str]) -> Optional[str]:
    if path is None:
        return None
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _read_image(path: str):
    raw = Path(path).read_bytes()
    mime_type, _ = mimetypes.guess_type(path)
    return base64.b64encode(raw).decode("ascii"), mime_type


def build_request(args: argparse.Namespace) -> AnalyzeRequest:
    image_base64 = mime_type = None
    if args.image:
        image_base64, mime_type = _read_image(args.image)

    return AnalyzeRequest(
        parse_type=args.mode,
        content=_read_text(args.file),
        image_base64=image_base64,
        mime_type=mime_type,
        existing_ships=args.ship or None,
        current_year=args.year,
    )


def run_analyze(args: argparse.Namespace) -> int:
    api_key = get_api_key()
    if not api_key:
        print(json.dumps({"error": "API key not configured"}), file=sys.stderr)
        return 1

    req = build_request(args)
    result = asyncio.run(run_extraction(req, api_key=api_key))
    status_code, body = result.to_response()

    print(json.dumps(body, ensure_ascii=False, indent=2))
    return 0 if status_code < 400 else 1


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("app_fastapi:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shipping message / tally report extraction")
    sub = parser.add_subparsers(dest="command", required=True)

    p_an = sub.add_parser("analyze", help="analyze one file and print the JSON result")
    p_an.add_argument("--mode", required=True, choices=[m.value for m in ParseMode])
    p_an.add_argument("file", nargs="?", help="text file, or - for stdin")
    p_an.add_argument("--image", help="image file (jpg/png/webp)")
    p_an.add_argument("--ship", action="append", help="known vessel name (repeatable)")
    p_an.add_argument("--year", type=int, help="reference year for dates without a year")
    p_an.set_defaults(func=run_analyze)

    p_sv = sub.add_parser("serve", help="run the HTTP API")
    p_sv.add_argument("--host", default="0.0.0.0")
    p_sv.add_argument("--port", type=int, default=8000)
    p_sv.add_argument("--reload", action="store_true")
    p_sv.set_defaults(func=run_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = make_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
