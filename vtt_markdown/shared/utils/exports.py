"""Markdown + YAML front matter rendering for converted transcripts."""

from __future__ import annotations

import json

from vtt_markdown.transcript.models import DocumentMetadata, TranscriptResult


def _quote(value: str) -> str:
    """Double-quoted scalar; JSON string escaping is valid YAML."""
    return json.dumps(value, ensure_ascii=False)


def format_front_matter(metadata: DocumentMetadata) -> str:
    """Format metadata as a YAML front matter block."""
    lines = ["---"]
    lines.append(f"title: {_quote(metadata.title)}")
    lines.append(f"date: {metadata.date}")
    lines.append(f"type: {_quote(metadata.meeting_type)}")
    lines.append(f"keywords: {_quote(metadata.keywords)}")
    lines.append(f"source_file: {_quote(metadata.source_file)}")
    lines.append(f"document_id: {_quote(metadata.document_id)}")

    if metadata.related_documents:
        lines.append("related_documents:")
        for document in metadata.related_documents:
            lines.append(f"  - {_quote(document)}")

    if metadata.document_links:
        lines.append("document_links:")
        for key, target in metadata.document_links.items():
            lines.append(f"  {_quote(key)}: {_quote(target)}")

    lines.append(f"participants: {_quote(metadata.participants)}")
    lines.append("---")
    return "\n".join(lines)


def format_note(source_file: str, anonymized: bool) -> str:
    note = (
        f"> **Note:** This transcript was automatically generated from "
        f"`{source_file}`."
    )
    if anonymized:
        note += " Speaker names have been anonymized."
    return note


def render_markdown(
    transcript: TranscriptResult, metadata: DocumentMetadata, anonymized: bool
) -> str:
    """Render the full Markdown document.

    Sections after the note banner are omitted when empty, so a transcript
    without any recognized speaker turns is front matter, heading and note only.
    """
    lines: list[str] = []
    lines.append(format_front_matter(metadata))
    lines.append("")
    lines.append(f"# {metadata.title}")
    lines.append("")
    lines.append(format_note(metadata.source_file, anonymized))

    participants = transcript.participants
    if participants:
        lines.append("")
        lines.append("## Participants")
        lines.append("")
        for label in participants:
            if label in transcript.anonymized_labels:
                lines.append(f"- {label} (anonymized)")
            else:
                lines.append(f"- {label}")

    if transcript.utterances:
        lines.append("")
        lines.append("## Transcript")
        lines.append("")
        lines.append(transcript.to_transcript_text())

    return "\n".join(lines) + "\n"
