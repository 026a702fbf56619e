"""Transcript models - VTT line classification, utterances, and conversion results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class LineKind(str, Enum):
    """Classification of a single VTT line, in precedence order."""

    DISCARD = "discard"
    SPEAKER_TAGGED = "speaker_tagged"
    CONTINUATION = "continuation"
    SPEAKER_COLON = "speaker_colon"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ClassifiedLine:
    """Result of classifying one raw line."""

    kind: LineKind
    speaker: str | None = None  # only for SPEAKER_TAGGED / SPEAKER_COLON
    text: str = ""  # cleaned text, e.g. "OK. Yeah."

    @property
    def opens_turn(self) -> bool:
        return self.kind in (LineKind.SPEAKER_TAGGED, LineKind.SPEAKER_COLON)


@dataclass
class Utterance:
    """One speaker-attributed paragraph of merged cue text."""

    speaker: str  # e.g., "Joon Kang" or "P1"
    text: str  # e.g., "OK. Yeah. Let's start."

    def to_markdown(self) -> str:
        """Format as a bold-speaker paragraph.
        Example:
            **Joon Kang:** OK. Yeah.
        """
        return f"**{self.speaker}:** {self.text}"


@dataclass
class TranscriptResult:
    """Ordered utterances plus every speaker label seen while parsing."""

    utterances: list[Utterance] = field(default_factory=list)
    speakers: set[str] = field(default_factory=set)
    anonymized_labels: set[str] = field(default_factory=set)

    @property
    def participants(self) -> list[str]:
        return sorted(self.speakers)

    def to_transcript_text(self) -> str:
        """Format utterances as Markdown paragraphs separated by blank lines."""
        return "\n\n".join(u.to_markdown() for u in self.utterances)


class DocumentMetadata(BaseModel):
    """Front matter values derived once per converted file."""

    model_config = ConfigDict(frozen=True)

    title: str
    date: str  # YYYY-MM-DD
    meeting_type: str = "meeting"
    keywords: str
    source_file: str
    document_id: str
    related_documents: list[str] = Field(default_factory=list)
    document_links: dict[str, str] = Field(default_factory=dict)
    participants: str = ""


class ConversionOptions(BaseModel):
    """Per-run conversion knobs shared by single-file and batch mode."""

    output_dir: Path | None = None
    title: str | None = None
    keywords: str | None = None
    meeting_type: str | None = None
    document_id: str | None = None
    related_documents: list[str] = Field(default_factory=list)
    document_links: dict[str, str] = Field(default_factory=dict)
    anonymize_names: bool = True
    use_participant_ids: bool = True
    no_anonymization: bool = False

    @property
    def anonymization_enabled(self) -> bool:
        """no_anonymization always wins over anonymize_names."""
        return self.anonymize_names and not self.no_anonymization


@dataclass
class ConversionResult:
    """Outcome of converting one VTT file."""

    source_path: Path
    output_path: Path
    utterance_count: int
    participant_count: int


@dataclass
class BatchResult:
    """Aggregate outcome of a directory conversion."""

    succeeded: int = 0
    failed: int = 0
    results: list[ConversionResult] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed
