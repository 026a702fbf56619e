"""Shared test configuration and fixtures for all tests."""

from datetime import date
from pathlib import Path

import pytest

from vtt_markdown.config import Settings
from vtt_markdown.transcript.services.conversion_service import ConversionService

FIXED_DATE = date(2024, 3, 15)


@pytest.fixture
def sample_vtt_content() -> str:
    """Sample VTT content for testing."""
    return """WEBVTT

00:00:01.000 --> 00:00:05.000
<v John>Hello everyone.

00:00:05.000 --> 00:00:10.000
<v Sarah>Hi John."""


@pytest.fixture
def teams_vtt_content() -> str:
    """Teams-style export with UUID cue identifiers and split cues."""
    return """WEBVTT

d700e97e-1c7f-4753-9597-54e5e43b4642/18-0
00:00:00.000 --> 00:00:02.500
<v Joon Kang>OK. Yeah.</v>

d700e97e-1c7f-4753-9597-54e5e43b4642/18-1
00:00:02.500 --> 00:00:04.000
<v Joon Kang>Let's get started.</v>

3b2a1f90-0d4e-4c55-9a1b-2f6c8e7d9a01/4-0
00:00:04.000 --> 00:00:07.000
<v Priya Natarajan>Sounds good to me.</v>

d700e97e-1c7f-4753-9597-54e5e43b4642/19-0
00:00:07.000 --> 00:00:09.000
<v Joon Kang>First item is the budget.</v>
"""


@pytest.fixture
def sample_vtt_file(tmp_path: Path, sample_vtt_content: str) -> Path:
    """Write the sample VTT content to a temporary file."""
    path = tmp_path / "weekly_sync.vtt"
    path.write_text(sample_vtt_content, encoding="utf-8")
    return path


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        log_level="INFO",
        keyword_vocabulary=["meeting", "transcript", "discussion", "demo", "azure", "arc", "sync"],
    )


@pytest.fixture
def service(test_settings: Settings) -> ConversionService:
    """Conversion service pinned to a fixed date."""
    return ConversionService(settings=test_settings, today=FIXED_DATE)
