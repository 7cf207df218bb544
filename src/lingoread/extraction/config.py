"""Runtime configuration for extraction and content chunking."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping

from lingoread.extraction.resolver import (
    DEFAULT_SHORT_PARAGRAPH_SLACK,
    DEFAULT_TEXT_MATCH_MIN_ENTRIES,
    DEFAULT_TEXT_MATCH_RATIO,
    ResolverSettings,
)

DEFAULT_CHUNK_SIZE = 50
DEFAULT_PREVIEW_LIMIT_CAP = 1000
DEFAULT_LOG_LEVEL = "INFO"


def _parse_int(*, name: str, raw_value: str, minimum: int) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_ratio(*, name: str, raw_value: str) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if not 0.0 < value <= 1.0:
        raise ValueError(f"{name} must be in (0, 1]")
    return value


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    """Validated extraction settings."""

    max_paragraphs: int | None = None
    text_match_ratio: float = DEFAULT_TEXT_MATCH_RATIO
    text_match_min_entries: int = DEFAULT_TEXT_MATCH_MIN_ENTRIES
    short_paragraph_slack: int = DEFAULT_SHORT_PARAGRAPH_SLACK
    chunk_size: int = DEFAULT_CHUNK_SIZE
    preview_limit_cap: int = DEFAULT_PREVIEW_LIMIT_CAP
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def resolver(self) -> ResolverSettings:
        return ResolverSettings(
            text_match_ratio=self.text_match_ratio,
            text_match_min_entries=self.text_match_min_entries,
            short_paragraph_slack=self.short_paragraph_slack,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExtractionSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        max_paragraphs_raw = source.get("LINGOREAD_MAX_PARAGRAPHS", "").strip()
        ratio_raw = source.get("LINGOREAD_TEXT_MATCH_RATIO", str(DEFAULT_TEXT_MATCH_RATIO)).strip()
        min_entries_raw = source.get(
            "LINGOREAD_TEXT_MATCH_MIN_ENTRIES", str(DEFAULT_TEXT_MATCH_MIN_ENTRIES)
        ).strip()
        slack_raw = source.get("LINGOREAD_SHORT_PARAGRAPH_SLACK", str(DEFAULT_SHORT_PARAGRAPH_SLACK)).strip()
        chunk_size_raw = source.get("LINGOREAD_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE)).strip()
        preview_cap_raw = source.get("LINGOREAD_PREVIEW_LIMIT_CAP", str(DEFAULT_PREVIEW_LIMIT_CAP)).strip()
        log_level = source.get("LINGOREAD_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()

        if not log_level:
            raise ValueError("LINGOREAD_LOG_LEVEL cannot be empty")
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"LINGOREAD_LOG_LEVEL is not a logging level: {log_level}")

        max_paragraphs: int | None = None
        if max_paragraphs_raw:
            max_paragraphs = _parse_int(name="LINGOREAD_MAX_PARAGRAPHS", raw_value=max_paragraphs_raw, minimum=1)

        return cls(
            max_paragraphs=max_paragraphs,
            text_match_ratio=_parse_ratio(name="LINGOREAD_TEXT_MATCH_RATIO", raw_value=ratio_raw),
            text_match_min_entries=_parse_int(
                name="LINGOREAD_TEXT_MATCH_MIN_ENTRIES",
                raw_value=min_entries_raw,
                minimum=0,
            ),
            short_paragraph_slack=_parse_int(
                name="LINGOREAD_SHORT_PARAGRAPH_SLACK",
                raw_value=slack_raw,
                minimum=0,
            ),
            chunk_size=_parse_int(name="LINGOREAD_CHUNK_SIZE", raw_value=chunk_size_raw, minimum=1),
            preview_limit_cap=_parse_int(
                name="LINGOREAD_PREVIEW_LIMIT_CAP",
                raw_value=preview_cap_raw,
                minimum=1,
            ),
            log_level=log_level,
        )
