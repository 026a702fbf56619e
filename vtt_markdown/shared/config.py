"""Shared application constants."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FileConstraints:
    """Input file constraints."""

    allowed_extensions: tuple[str, ...] = (".vtt",)
    output_extension: str = ".md"


FILE_CONSTRAINTS = FileConstraints()


# Keywords appended to every document, after any vocabulary matches
BASE_KEYWORDS = ("meeting", "transcript", "discussion")

ERROR_MESSAGES = {
    "input_not_found": "Input file not found.",
    "source_not_found": "Source directory not found.",
    "invalid_document_links": "Ignoring document links: expected a JSON object of strings.",
    "conversion_failed": "Conversion failed.",
    "output_collision": "Output name already used in this batch:",
}
