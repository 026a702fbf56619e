"""Transcript conversion services."""

from vtt_markdown.transcript.services.anonymizer import SpeakerAnonymizer
from vtt_markdown.transcript.services.conversion_service import ConversionService
from vtt_markdown.transcript.services.vtt_processor import VTTProcessor

__all__ = [
    "ConversionService",
    "SpeakerAnonymizer",
    "VTTProcessor",
]
