"""Blockmark CLI entry point.

Allows running via `python -m blockmark` and provides the console script
defined in `pyproject.toml`.

Usage:
    blockmark --version
    blockmark new
    blockmark normalize FILE
    blockmark text FILE
    blockmark html FILE

FILE is a document in canonical JSON; use - for stdin. Seed text and the
id strategy come from the user settings file.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .version import get_version_string

USAGE = "usage: blockmark [--verbose] (--version | new | normalize FILE | text FILE | html FILE)"


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv: Optional[list[str]] = None) -> int:
    # Very small arg parsing; the core has no options worth a parser
    args = list(sys.argv[1:] if argv is None else argv)
    if "--verbose" in args:
        args.remove("--verbose")
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0

    # Lazy import to keep --version cheap
    from . import document
    from .errors import MalformedDocument
    from .ids import from_strategy
    from .serializer import dumps, loads, to_html, to_plain_text
    from .settings import get_settings_store

    settings = get_settings_store().load()
    ids = from_strategy(settings.id_strategy)

    if args == ["new"]:
        doc = document.new(ids, title=settings.seed_title, paragraph=settings.seed_paragraph)
        print(dumps(doc, indent=2))
        return 0

    if len(args) != 2 or args[0] not in ("normalize", "text", "html"):
        print(USAGE, file=sys.stderr)
        return 2

    command, path = args
    try:
        doc = loads(_read(path), ids)
    except OSError as e:
        print(f"Error reading {path}: {e}", file=sys.stderr)
        return 1
    except MalformedDocument as e:
        print(f"Malformed document: {e}", file=sys.stderr)
        return 1

    if command == "normalize":
        print(dumps(doc, indent=2))
    elif command == "text":
        print(to_plain_text(doc))
    else:
        print(to_html(doc))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
