"""Conversion service: VTT file(s) in, Markdown file(s) out, strictly one file at a time."""

from datetime import date
from pathlib import Path
import time

import structlog

from vtt_markdown.config import Settings, settings as default_settings
from vtt_markdown.shared.config import ERROR_MESSAGES
from vtt_markdown.shared.types import ProgressCallback
from vtt_markdown.shared.utils.exports import render_markdown
from vtt_markdown.shared.utils.files import (
    discover_vtt_files,
    is_vtt_file,
    output_path_for,
    read_vtt_lines,
    write_markdown,
)
from vtt_markdown.transcript.models import (
    BatchResult,
    ConversionOptions,
    ConversionResult,
)
from vtt_markdown.transcript.services.metadata import build_metadata
from vtt_markdown.transcript.services.vtt_processor import VTTProcessor

logger = structlog.get_logger(__name__)


class ConversionService:
    """Orchestrate read -> parse -> derive metadata -> render -> write."""

    def __init__(self, settings: Settings | None = None, today: date | None = None):
        """
        Initialize service with settings and an optional fixed conversion date.
        """
        self.settings = settings or default_settings
        self.today = today

    def _processor(self, options: ConversionOptions) -> VTTProcessor:
        # Each parse builds its own anonymizer, so mappings never cross files
        return VTTProcessor(
            anonymize=options.anonymization_enabled,
            use_participant_ids=options.use_participant_ids,
        )

    def convert_text(
        self, content: str, source_path: Path, options: ConversionOptions
    ) -> tuple[str, int, int]:
        """
        Convert VTT text without touching the filesystem.

        Returns:
        (markdown, utterance_count, participant_count)
        """
        return self._convert_lines(
            content.lstrip("\ufeff").splitlines(), source_path, options
        )

    def _convert_lines(
        self, lines: list[str], source_path: Path, options: ConversionOptions
    ) -> tuple[str, int, int]:
        transcript = self._processor(options).parse_lines(lines)
        metadata = build_metadata(
            source_path,
            transcript,
            options,
            vocabulary=self.settings.keyword_vocabulary,
            default_meeting_type=self.settings.default_meeting_type,
            today=self.today,
        )
        markdown = render_markdown(
            transcript, metadata, anonymized=options.anonymization_enabled
        )
        return markdown, len(transcript.utterances), len(transcript.speakers)

    def convert_file(
        self, input_path: Path, options: ConversionOptions
    ) -> ConversionResult:
        """
        Convert one VTT file into ``<output_dir>/<stem>.md``.

        Raises FileNotFoundError for a missing input; write errors propagate.
        """
        start_time = time.time()
        input_path = Path(input_path)

        if not is_vtt_file(input_path):
            logger.warning("Input does not have a .vtt extension", path=str(input_path))

        lines = read_vtt_lines(input_path, encoding=self.settings.encoding)
        logger.info(
            "Converting VTT file",
            path=str(input_path),
            size_bytes=input_path.stat().st_size,
            anonymize=options.anonymization_enabled,
        )

        markdown, utterance_count, participant_count = self._convert_lines(
            lines, input_path, options
        )
        output_path = write_markdown(
            output_path_for(input_path, options.output_dir), markdown
        )

        logger.info(
            "VTT file converted",
            path=str(input_path),
            output=str(output_path),
            utterances=utterance_count,
            participants=participant_count,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )

        return ConversionResult(
            source_path=input_path,
            output_path=output_path,
            utterance_count=utterance_count,
            participant_count=participant_count,
        )

    def convert_directory(
        self,
        source_dir: Path,
        options: ConversionOptions,
        file_filter: str | None = None,
        recursive: bool = False,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        """
        Convert every matching file under ``source_dir`` in sorted order.

        Per-file failures are logged and counted; they never stop the batch.
        A missing source directory raises FileNotFoundError.
        """
        start_time = time.time()
        source_dir = Path(source_dir)
        pattern = file_filter or self.settings.file_filter
        files = discover_vtt_files(source_dir, pattern=pattern, recursive=recursive)

        if options.output_dir is None:
            options = options.model_copy(update={"output_dir": source_dir})

        logger.info(
            "Starting batch conversion",
            source_dir=str(source_dir),
            output_dir=str(options.output_dir),
            file_filter=pattern,
            recursive=recursive,
            total_files=len(files),
        )

        batch = BatchResult()
        # Output path -> input that produced it; outputs are flat, so stems can collide
        claimed: dict[Path, Path] = {}
        for index, path in enumerate(files, start=1):
            try:
                target = output_path_for(path, options.output_dir)
                if target in claimed:
                    raise FileExistsError(
                        f"{ERROR_MESSAGES['output_collision']} {target} already written from {claimed[target]}"
                    )
                batch.results.append(self.convert_file(path, options))
                claimed[target] = path
                batch.succeeded += 1
                status = f"Converted {path.name}"
            except Exception as e:
                batch.failed += 1
                batch.errors[str(path)] = str(e)
                status = f"Failed {path.name}"
                logger.error(
                    "File conversion failed",
                    path=str(path),
                    error=str(e),
                    error_type=type(e).__name__,
                )

            if progress_callback:
                progress_callback(index / len(files), status)

        logger.info(
            "Batch conversion completed",
            processing_time_ms=int((time.time() - start_time) * 1000),
            total_files=batch.total,
            succeeded=batch.succeeded,
            failed=batch.failed,
        )

        return batch
