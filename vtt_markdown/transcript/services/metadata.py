"""Front matter derivation: title, keywords, document id, date and participants.

Everything here is a pure function of the source path, the conversion
options and the conversion date, independent of cue parsing.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
import json
from pathlib import Path
import re
from typing import Any

import structlog

from vtt_markdown.shared.config import BASE_KEYWORDS, ERROR_MESSAGES
from vtt_markdown.shared.utils.files import sanitize_identifier
from vtt_markdown.transcript.models import (
    ConversionOptions,
    DocumentMetadata,
    TranscriptResult,
)

logger = structlog.get_logger(__name__)

# "azureArcDemo" -> "azure Arc Demo", "HTTPServer" -> "HTTP Server"
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_TOKEN_SPLIT = re.compile(r"[^A-Za-z0-9]+")


def split_words(text: str) -> list[str]:
    """Split on underscores, dashes, whitespace and camelCase boundaries."""
    spaced = text.replace("_", " ").replace("-", " ")
    spaced = _CAMEL_BOUNDARY.sub(" ", spaced)
    return spaced.split()


def capitalize_word(word: str) -> str:
    """Upper-case the first letter only; the rest of the word is kept as-is."""
    if len(word) == 1:
        return word.upper()
    return word[0].upper() + word[1:]


def generate_title(filename: str) -> str:
    """Human title from a filename: "team_sync-azureArcDemo.vtt" -> "Team Sync Azure Arc Demo"."""
    stem = Path(filename).stem
    words = split_words(stem)
    if not words:
        return stem
    return " ".join(capitalize_word(word) for word in words)


def _path_tokens(path: Path) -> Iterable[str]:
    segments = [*path.parent.parts, path.stem]
    for segment in segments:
        for chunk in _TOKEN_SPLIT.split(segment):
            for word in split_words(chunk):
                yield word.lower()


def extract_keywords(path: Path, vocabulary: Sequence[str]) -> str:
    """Match path segments and filename against a closed vocabulary.

    The base keywords are always appended; the result is de-duplicated
    in first-seen order.
    """
    known = {term.lower() for term in vocabulary}
    found = [token for token in _path_tokens(path) if token in known]
    ordered = dict.fromkeys([*found, *BASE_KEYWORDS])
    return ", ".join(ordered)


def normalize_keywords(keywords: str) -> str:
    """Trim and de-duplicate a caller-supplied comma-separated keyword list."""
    ordered = dict.fromkeys(k.strip() for k in keywords.split(",") if k.strip())
    return ", ".join(ordered)


def generate_document_id(filename: str, on: date) -> str:
    """``transcript-<sanitized stem>-YYYYMMDD``."""
    stem = sanitize_identifier(Path(filename).stem) or "untitled"
    return f"transcript-{stem}-{on.strftime('%Y%m%d')}"


def format_participants(speakers: Iterable[str]) -> str:
    return ", ".join(sorted(speakers))


def parse_list(value: str | None) -> list[str]:
    """Split a comma-separated CLI value into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_document_links(payload: str | None) -> dict[str, str]:
    """Parse a JSON object of link name -> target.

    Malformed payloads are dropped with a warning instead of failing the
    conversion.
    """
    if not payload:
        return {}
    try:
        parsed: Any = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning(
            ERROR_MESSAGES["invalid_document_links"],
            error=str(e),
            payload_preview=payload[:50],
        )
        return {}

    if not isinstance(parsed, dict) or not all(
        isinstance(key, str) and isinstance(value, (str, int, float))
        and not isinstance(value, bool)
        for key, value in parsed.items()
    ):
        logger.warning(
            ERROR_MESSAGES["invalid_document_links"],
            payload_type=type(parsed).__name__,
            payload_preview=payload[:50],
        )
        return {}

    return {key: str(value) for key, value in parsed.items()}


def build_metadata(
    source_path: Path,
    transcript: TranscriptResult,
    options: ConversionOptions,
    vocabulary: Sequence[str],
    default_meeting_type: str = "meeting",
    today: date | None = None,
) -> DocumentMetadata:
    """Derive the document metadata; caller-supplied values take precedence."""
    on = today or date.today()
    filename = source_path.name

    return DocumentMetadata(
        title=options.title or generate_title(filename),
        date=on.isoformat(),
        meeting_type=options.meeting_type or default_meeting_type,
        keywords=(
            normalize_keywords(options.keywords)
            if options.keywords
            else extract_keywords(source_path, vocabulary)
        ),
        source_file=filename,
        document_id=options.document_id or generate_document_id(filename, on),
        related_documents=list(options.related_documents),
        document_links=dict(options.document_links),
        participants=format_participants(transcript.speakers),
    )
