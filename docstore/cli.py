"""Command line entry point: `docstore db.json --port 3000`."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

import uvicorn

from docstore import __version__
from docstore.config import Settings
from docstore.core.errors import DocStoreError
from docstore.infrastructure.adapters import adapter_for_file
from docstore.infrastructure.database import Database
from docstore.infrastructure.observability import setup_logging
from docstore.infrastructure.observer import Observer
from docstore.main import create_app

logger = logging.getLogger("docstore.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "docstore", description="Serve a JSON or JSON5 file as a REST API.",
    )
    parser.add_argument("file", help="data file (.json or .json5)")
    parser.add_argument(
        "-p", "--port", type=int, default=int(os.environ.get("PORT", 3000)),
    )
    parser.add_argument("-H", "--host", default=os.environ.get("HOST", "localhost"))
    parser.add_argument(
        "-s", "--static", action="append", default=[], metavar="DIR",
        help="static files directory (multiple allowed)",
    )
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-format", choices=("json", "text"), default="text")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def prepare_file(path: Path) -> None:
    """Refuse a missing file; turn an empty one into an empty store."""
    if not path.exists():
        raise FileNotFoundError(f"File {path} not found")
    if path.read_text(encoding="utf-8").strip() == "":
        path.write_text("{}", encoding="utf-8")


def log_routes(names: list[str], host: str, port: int, file: str) -> None:
    if not names:
        logger.info(f"No endpoints found, try adding some data to {file}")
        return
    logger.info(
        "Endpoints:\n" + "\n".join(f"http://{host}:{port}/{name}" for name in names),
    )


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings(
        data_file=args.file,
        host=args.host,
        port=args.port,
        static_dirs=args.static,
        log_level=args.log_level,
        log_format=args.log_format,
    )
    setup_logging(settings.log_level, settings.log_format)

    path = Path(settings.data_file)
    try:
        prepare_file(path)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    observer = Observer(adapter_for_file(path))
    observer.on_write_end = lambda: logger.debug(f"Saved {path}")
    db = Database(observer)
    try:
        asyncio.run(db.read())
    except DocStoreError as e:
        logger.error(f"Error loading {path}: {e.message}")
        return 1

    app = create_app(db, settings)
    logger.info(f"docstore started on http://{settings.host}:{settings.port}/")
    log_routes(list(db.data), settings.host, settings.port, str(path))
    uvicorn.run(
        app, host=settings.host, port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
