import html
import re
import time
from collections.abc import Iterable

import structlog

from vtt_markdown.transcript.models import (
    ClassifiedLine,
    LineKind,
    TranscriptResult,
    Utterance,
)
from vtt_markdown.transcript.services.anonymizer import SpeakerAnonymizer

logger = structlog.get_logger(__name__)

_DISCARD = ClassifiedLine(LineKind.DISCARD)
_UNRECOGNIZED = ClassifiedLine(LineKind.UNRECOGNIZED)


class VTTProcessor:
    """Parse VTT lines into speaker-attributed utterances."""

    ## Regex patterns for VTT parsing
    # Timing ranges such as "00:00:00.000 --> 00:00:01.000 align:start"
    TIMESTAMP_PATTERN = re.compile(
        r"^(?:\d{2,}:)?\d{2}:\d{2}\.\d{3}\s+-->\s+(?:\d{2,}:)?\d{2}:\d{2}\.\d{3}(?:\s.*)?$"
    )
    BARE_TIMESTAMP_PATTERN = re.compile(r"^(?:\d{2,}:)?\d{2}:\d{2}\.\d{3}$")
    # Teams cue identifiers: "d700e97e-1c7f-4753-9597-54e5e43b4642/18-0"
    UUID_FRAGMENT = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}(?:/\d+-\d+)?"
    CUE_ID_PATTERN = re.compile(rf"^{UUID_FRAGMENT}$")
    CUE_REFERENCE_PATTERN = re.compile(UUID_FRAGMENT)
    HEADER_PATTERN = re.compile(r"^WEBVTT(?:\s.*)?$")
    BLOCK_PREFIXES = ("NOTE", "STYLE")
    # Blocks whose body runs until the next blank line
    METADATA_BLOCK_PATTERN = re.compile(r"^(?:NOTE|STYLE|REGION)(?:\s|$)")
    # Speaker tags such as <v Joon Kang> or <v.loud Esme>
    SPEAKER_PATTERN = re.compile(r"<v(?:\.[^\s>]+)*\s+([^>]*[^\s>][^>]*)>")
    SIMPLE_SPEAKER_PATTERN = re.compile(r"^([^\W\d_]+(?: [^\W\d_]+)*)\s*:\s*(.*)$")
    CLOSING_VOICE_PATTERN = re.compile(r"</v\s*>")
    TAG_PATTERN = re.compile(r"<[^>]*>")
    WHITESPACE_PATTERN = re.compile(r"\s+")

    def __init__(
        self, anonymize: bool = False, use_participant_ids: bool = True
    ) -> None:
        self.anonymize = anonymize
        self.use_participant_ids = use_participant_ids

    def clean_text(self, text: str) -> str:
        """Strip voice/inline markup and cue references, then normalize whitespace."""
        text = self.CLOSING_VOICE_PATTERN.sub("", text)
        text = self.TAG_PATTERN.sub("", text)
        text = self.CUE_REFERENCE_PATTERN.sub("", text)
        text = html.unescape(text)
        return self.WHITESPACE_PATTERN.sub(" ", text).strip()

    def is_structural(self, line: str) -> bool:
        stripped = line.strip()
        return (
            not stripped
            or bool(self.HEADER_PATTERN.match(stripped))
            or bool(self.TIMESTAMP_PATTERN.match(stripped))
            or bool(self.BARE_TIMESTAMP_PATTERN.match(stripped))
            or bool(self.CUE_ID_PATTERN.match(stripped))
            or stripped.startswith(self.BLOCK_PREFIXES)
        )

    def classify_line(self, line: str, turn_open: bool) -> ClassifiedLine:
        """
        Classify one raw line.

        Precedence:
        1. Structural lines (header, blank, timing, cue id, NOTE/STYLE) -> DISCARD
        2. <v Speaker>text -> SPEAKER_TAGGED
        3. Any other text while a turn is open -> CONTINUATION
        4. "Name: text" while no turn is open -> SPEAKER_COLON
        5. Everything else -> UNRECOGNIZED
        """
        if self.is_structural(line):
            return _DISCARD

        stripped = line.strip()

        speaker_match = self.SPEAKER_PATTERN.search(stripped)
        if speaker_match:
            return ClassifiedLine(
                LineKind.SPEAKER_TAGGED,
                speaker=speaker_match.group(1).strip(),
                text=self.clean_text(stripped[speaker_match.end():]),
            )

        cleaned = self.clean_text(stripped)

        if turn_open:
            if cleaned:
                return ClassifiedLine(LineKind.CONTINUATION, text=cleaned)
            return _UNRECOGNIZED

        simple_match = self.SIMPLE_SPEAKER_PATTERN.match(cleaned)
        if simple_match:
            return ClassifiedLine(
                LineKind.SPEAKER_COLON,
                speaker=simple_match.group(1).strip(),
                text=simple_match.group(2).strip(),
            )

        return _UNRECOGNIZED

    def parse_vtt(self, content: str) -> TranscriptResult:
        """Parse whole-file VTT text."""
        # Normalize BOM and line endings (Unix, Windows, old Mac)
        if content.startswith("\ufeff"):
            content = content[1:]
        return self.parse_lines(content.splitlines())

    def parse_lines(self, lines: Iterable[str]) -> TranscriptResult:
        """
        Rebuild speaker turns from an ordered line sequence.

        Algorithm:
        1. Skip header/NOTE/STYLE/REGION blocks and cue identifiers preceding a timing line
        2. Classify each remaining line
        3. Speaker lines resolve the speaker (anonymized when enabled) and
           flush the open turn if the speaker changed
        4. Continuation lines extend the open turn
        5. Flush the open turn at end of input

        A fresh anonymizer is created for every call.
        """
        start_time = time.time()
        lines = list(lines)
        logger.info("Starting VTT parsing", total_lines=len(lines))

        anonymizer = (
            SpeakerAnonymizer(use_participant_ids=self.use_participant_ids)
            if self.anonymize
            else None
        )
        turn = _TurnState()
        result = TranscriptResult()
        counts = {kind: 0 for kind in LineKind}
        in_metadata_block = False

        for index, line in enumerate(lines):
            stripped = line.strip()
            block_start = index == 0 or not lines[index - 1].strip()

            if in_metadata_block:
                # Blocks end at a blank line, or early at a timing line
                if stripped and not self.TIMESTAMP_PATTERN.match(stripped):
                    counts[LineKind.DISCARD] += 1
                    continue
                in_metadata_block = False
            # Header ("Kind: captions", "Language: en"), NOTE, STYLE and REGION blocks
            if block_start and (
                self.HEADER_PATTERN.match(stripped)
                or self.METADATA_BLOCK_PATTERN.match(stripped)
            ):
                in_metadata_block = True
                counts[LineKind.DISCARD] += 1
                continue
            # Any cue identifier ("1", "intro") sits right above its timing line
            if (
                block_start
                and stripped
                and index + 1 < len(lines)
                and self.TIMESTAMP_PATTERN.match(lines[index + 1].strip())
                and not self.TIMESTAMP_PATTERN.match(stripped)
                and not self.SPEAKER_PATTERN.search(stripped)
            ):
                counts[LineKind.DISCARD] += 1
                continue

            classified = self.classify_line(line, turn_open=turn.is_open)
            counts[classified.kind] += 1

            if classified.opens_turn:
                speaker = (
                    anonymizer.anonymize(classified.speaker)
                    if anonymizer
                    else classified.speaker
                )
                if turn.is_open and turn.speaker != speaker:
                    self._flush(turn, result)
                turn.speaker = speaker
                result.speakers.add(speaker)
                turn.append(classified.text)
            elif classified.kind is LineKind.CONTINUATION:
                turn.append(classified.text)

        self._flush(turn, result)

        if anonymizer:
            result.anonymized_labels = set(anonymizer.labels)

        processing_time = time.time() - start_time
        logger.info(
            "VTT parsing completed",
            processing_time_ms=int(processing_time * 1000),
            total_utterances=len(result.utterances),
            unique_speakers=len(result.speakers),
            anonymized=bool(anonymizer),
            discarded_lines=counts[LineKind.DISCARD],
            unrecognized_lines=counts[LineKind.UNRECOGNIZED],
        )

        return result

    def _flush(self, turn: "_TurnState", result: TranscriptResult) -> None:
        text = turn.buffer.strip()
        if turn.is_open and text:
            result.utterances.append(Utterance(speaker=turn.speaker, text=text))
        turn.buffer = ""


class _TurnState:
    """NoOpenTurn while speaker is None, otherwise OpenTurn{speaker, buffer}."""

    def __init__(self) -> None:
        self.speaker: str | None = None
        self.buffer = ""

    @property
    def is_open(self) -> bool:
        return self.speaker is not None

    def append(self, text: str) -> None:
        if text:
            self.buffer += text + " "
