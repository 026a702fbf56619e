"""
Command line entry point for the VTT to Markdown converter.

Usage:
    vtt2md convert meeting.vtt -o notes/
    vtt2md batch transcripts/ -o notes/ --recursive --initials
"""

import argparse
from pathlib import Path
import sys

import structlog

from vtt_markdown import __version__
from vtt_markdown.config import configure_structlog, settings
from vtt_markdown.shared.config import ERROR_MESSAGES
from vtt_markdown.transcript.models import ConversionOptions
from vtt_markdown.transcript.services.conversion_service import ConversionService
from vtt_markdown.transcript.services.metadata import (
    parse_document_links,
    parse_list,
)

logger = structlog.get_logger(__name__)


def _add_shared_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--output-dir", type=Path, default=None,
                        help="Directory for the Markdown output (created if absent)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    metadata_group = parser.add_argument_group("metadata")
    metadata_group.add_argument("--keywords",
                                help="Comma-separated keywords (default: derived from the path)")
    metadata_group.add_argument("--type", dest="meeting_type", default=None,
                                help=f"Meeting type for the front matter (default: {settings.default_meeting_type})")
    metadata_group.add_argument("--related-documents",
                                help="Comma-separated related document IDs")
    metadata_group.add_argument("--document-links",
                                help='JSON object of link name to document, e.g. \'{"agenda": "doc-42"}\'')

    anon_group = parser.add_argument_group("anonymization")
    anon_group.add_argument("--anonymize-names", action=argparse.BooleanOptionalAction, default=True,
                            help="Replace speaker names with anonymized labels (default: on)")
    anon_group.add_argument("--participant-ids", dest="use_participant_ids", action="store_true", default=True,
                            help="Label speakers P1, P2, ... in order of appearance (default)")
    anon_group.add_argument("--initials", dest="use_participant_ids", action="store_false",
                            help="Label speakers by initials instead of participant IDs")
    anon_group.add_argument("--no-anonymization", action="store_true",
                            help="Keep real speaker names; overrides --anonymize-names")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vtt2md",
        description="Convert WebVTT transcripts into Markdown with YAML front matter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s convert meeting.vtt
  %(prog)s convert meeting.vtt -o notes --title "Weekly Sync" --no-anonymization
  %(prog)s batch transcripts -o notes --recursive --initials
        """
    )
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- convert ---
    convert_parser = subparsers.add_parser("convert", help="Convert a single VTT file")
    convert_parser.add_argument("input", type=Path, help="Path to the .vtt file")
    convert_parser.add_argument("--title", help="Document title (default: derived from the filename)")
    convert_parser.add_argument("--document-id",
                                help="Document ID (default: transcript-<name>-<YYYYMMDD>)")
    _add_shared_arguments(convert_parser)

    # --- batch ---
    batch_parser = subparsers.add_parser("batch", help="Convert every VTT file in a directory")
    batch_parser.add_argument("source_dir", type=Path, help="Directory containing .vtt files")
    batch_parser.add_argument("--filter", dest="file_filter", default=settings.file_filter,
                              help=f"Filename glob (default: {settings.file_filter})")
    batch_parser.add_argument("-r", "--recursive", action="store_true",
                              help="Include subdirectories")
    _add_shared_arguments(batch_parser)

    return parser


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    return ConversionOptions(
        output_dir=args.output_dir,
        title=getattr(args, "title", None),
        keywords=args.keywords,
        meeting_type=args.meeting_type,
        document_id=getattr(args, "document_id", None),
        related_documents=parse_list(args.related_documents),
        document_links=parse_document_links(args.document_links),
        anonymize_names=args.anonymize_names,
        use_participant_ids=args.use_participant_ids,
        no_anonymization=args.no_anonymization,
    )


def _print_progress(progress: float, message: str) -> None:
    print(f"[{progress:6.1%}] {message}", file=sys.stderr)


def run_convert(args: argparse.Namespace, service: ConversionService) -> int:
    try:
        result = service.convert_file(args.input, options_from_args(args))
    except FileNotFoundError as e:
        logger.error(ERROR_MESSAGES["input_not_found"], path=str(args.input), error=str(e))
        return 1
    except (OSError, UnicodeDecodeError) as e:
        logger.error(ERROR_MESSAGES["conversion_failed"], path=str(args.input), error=str(e))
        return 1

    print(result.output_path)
    return 0


def run_batch(args: argparse.Namespace, service: ConversionService) -> int:
    try:
        batch = service.convert_directory(
            args.source_dir,
            options_from_args(args),
            file_filter=args.file_filter,
            recursive=args.recursive,
            progress_callback=_print_progress,
        )
    except FileNotFoundError as e:
        logger.error(ERROR_MESSAGES["source_not_found"], path=str(args.source_dir), error=str(e))
        return 1

    print(f"Converted {batch.succeeded} of {batch.total} file(s); {batch.failed} failed")
    return 1 if batch.failed else 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_structlog(log_level="DEBUG" if args.verbose else None)

    service = ConversionService()
    if args.command == "convert":
        return run_convert(args, service)
    return run_batch(args, service)


if __name__ == "__main__":
    sys.exit(main())
