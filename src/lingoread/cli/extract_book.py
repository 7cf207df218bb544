"""CLI command that extracts paragraphs and chapters from one EPUB file."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from lingoread.content.chunking import build_chunks, normalize_limit
from lingoread.extraction.config import ExtractionSettings
from lingoread.extraction.errors import ExtractionError
from lingoread.extraction.models import ExtractOptions
from lingoread.extraction.orchestrator import extract

LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract paragraphs and chapter outline from an EPUB")
    parser.add_argument("--path", required=True, help="EPUB file to read")
    parser.add_argument("--limit", type=int, default=None, help="Stop after this many paragraphs")
    parser.add_argument("--chunks", action="store_true", help="Include paragraphs grouped into storage chunks")
    parser.add_argument("--include-text", action="store_true", help="Include every paragraph in the output")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)

    try:
        settings = ExtractionSettings.from_env()
    except ValueError as exc:
        print(json.dumps({"error": str(exc)}, ensure_ascii=False, indent=2))
        return 2

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    source_path = Path(args.path)
    limit = normalize_limit(args.limit, settings.preview_limit_cap) if args.limit is not None else settings.max_paragraphs

    payload: dict[str, object] = {"path": str(source_path)}
    try:
        raw = source_path.read_bytes()
        result = asyncio.run(
            extract(raw, ExtractOptions(max_paragraphs=limit), settings=settings.resolver, source=str(source_path))
        )
    except (OSError, ExtractionError) as exc:
        LOGGER.error("Extraction failed for %s: %s", source_path, exc)
        payload["error"] = str(exc)
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 1

    payload["paragraph_count"] = result.paragraph_count
    payload["has_more"] = result.truncated
    payload["chapters"] = [chapter.to_dict() for chapter in result.chapters]
    if args.chunks:
        payload["chunks"] = [chunk.to_dict() for chunk in build_chunks(result.paragraphs, settings.chunk_size)]
    if args.include_text:
        payload["paragraphs"] = [{"id": paragraph.id, "text": paragraph.text} for paragraph in result.paragraphs]

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
