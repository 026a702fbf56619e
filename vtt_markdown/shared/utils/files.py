"""File handling utilities."""

from __future__ import annotations

from pathlib import Path
import re

from vtt_markdown.shared.config import FILE_CONSTRAINTS


def is_vtt_file(path: Path) -> bool:
    """Check the extension against allowed constraints."""
    return path.suffix.lower() in FILE_CONSTRAINTS.allowed_extensions


def read_vtt_lines(path: Path, encoding: str = "utf-8-sig") -> list[str]:
    """Read a VTT file as an ordered list of lines.

    ``utf-8-sig`` drops a leading BOM so the ``WEBVTT`` header still matches.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path.read_text(encoding=encoding).splitlines()


def discover_vtt_files(
    source_dir: Path, pattern: str = "*.vtt", recursive: bool = False
) -> list[Path]:
    """Return matching files under ``source_dir`` in a stable, sorted order."""
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")
    matches = source_dir.rglob(pattern) if recursive else source_dir.glob(pattern)
    return sorted(p for p in matches if p.is_file())


def output_path_for(input_path: Path, output_dir: Path | None = None) -> Path:
    """``<output_dir>/<input-basename>.md``, defaulting to the input's directory."""
    target_dir = output_dir if output_dir is not None else input_path.parent
    return target_dir / f"{input_path.stem}{FILE_CONSTRAINTS.output_extension}"


def write_markdown(output_path: Path, content: str) -> Path:
    """Write content, creating the target directory if absent."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    return output_path


def sanitize_identifier(value: str) -> str:
    """Replace characters outside [A-Za-z0-9_-] with dashes and collapse repeats."""

    sanitized = re.sub(r"[^A-Za-z0-9_-]", "-", value)
    sanitized = re.sub(r"-{2,}", "-", sanitized)
    return sanitized.strip("-")
