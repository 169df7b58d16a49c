import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

import requests


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch an SVG QR code from a running server."
    )
    parser.add_argument("data", help="Text to encode.")
    parser.add_argument(
        "--color",
        help="Module color as a 6 digit hex code, with or without '#'.",
    )
    parser.add_argument(
        "--shape",
        choices=("square", "circle", "diamond"),
        help="Module shape (server default: square).",
    )
    parser.add_argument(
        "--host",
        default="http://127.0.0.1:5000",
        help="Server host (default: http://127.0.0.1:5000).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("qr_code.svg"),
        help="Path to save the SVG (default: qr_code.svg).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the request URL instead of sending the request.",
    )
    return parser.parse_args(argv)


def build_params(args: argparse.Namespace) -> Dict[str, str]:
    params = {"data": args.data}
    if args.color:
        params["color"] = args.color
    if args.shape:
        params["shape"] = args.shape
    return params


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    url = f"{args.host.rstrip('/')}/"
    params = build_params(args)

    if args.dry_run:
        print(requests.Request("GET", url, params=params).prepare().url)
        return 0

    response = requests.get(url, params=params, timeout=10)
    print(f"Status: {response.status_code}")
    if not response.ok:
        try:
            message = response.json().get("message", response.text)
        except ValueError:
            message = response.text
        print(f"Error: {message}")
        return 1

    args.output.write_text(response.text, encoding="utf-8")
    print(f"Saved QR code to {args.output.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
