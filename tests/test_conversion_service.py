"""
Tests for single-file and batch conversion.
"""

from pathlib import Path

import pytest

from vtt_markdown.transcript.models import ConversionOptions

SCENARIO = """WEBVTT

00:00:01.000 --> 00:00:05.000
<v John>Hello everyone.

00:00:05.000 --> 00:00:10.000
<v Sarah>Hi John."""


def _dialogue(markdown: str) -> str:
    return markdown.split("## Transcript\n\n", 1)[1] if "## Transcript" in markdown else ""


class TestConvertText:
    """Scenarios that never touch the filesystem."""

    def test_names_kept_when_anonymization_disabled(self, service):
        markdown, utterances, participants = service.convert_text(
            SCENARIO, Path("weekly_sync.vtt"), ConversionOptions(no_anonymization=True)
        )

        assert utterances == 2
        assert participants == 2
        assert _dialogue(markdown) == "**John:** Hello everyone.\n\n**Sarah:** Hi John.\n"
        assert 'participants: "John, Sarah"' in markdown

    def test_participant_ids_by_default(self, service):
        markdown, _, _ = service.convert_text(
            SCENARIO, Path("weekly_sync.vtt"), ConversionOptions()
        )

        assert _dialogue(markdown) == "**P1:** Hello everyone.\n\n**P2:** Hi John.\n"
        assert 'participants: "P1, P2"' in markdown
        assert "- P1 (anonymized)" in markdown

    def test_no_anonymization_overrides_anonymize_names(self, service):
        options = ConversionOptions(anonymize_names=True, no_anonymization=True)

        markdown, _, _ = service.convert_text(SCENARIO, Path("a.vtt"), options)

        assert "**John:**" in markdown
        assert "P1" not in markdown

    def test_anonymize_names_off(self, service):
        markdown, _, _ = service.convert_text(
            SCENARIO, Path("a.vtt"), ConversionOptions(anonymize_names=False)
        )

        assert "**Sarah:** Hi John." in markdown

    def test_repeat_conversion_is_byte_identical(self, service):
        options = ConversionOptions(no_anonymization=True)

        first, _, _ = service.convert_text(SCENARIO, Path("a.vtt"), options)
        second, _, _ = service.convert_text(SCENARIO, Path("a.vtt"), options)

        assert first == second

    def test_front_matter_uses_fixed_date(self, service):
        markdown, _, _ = service.convert_text(
            SCENARIO, Path("weekly_sync.vtt"), ConversionOptions()
        )

        assert "date: 2024-03-15\n" in markdown
        assert 'document_id: "transcript-weekly_sync-20240315"' in markdown
        assert 'keywords: "sync, meeting, transcript, discussion"' in markdown
        assert 'title: "Weekly Sync"' in markdown

    def test_only_structure_produces_front_matter_only(self, service):
        content = "WEBVTT\n\n00:00:01.000 --> 00:00:05.000\n\n00:00:05.000 --> 00:00:10.000\n"

        markdown, utterances, participants = service.convert_text(
            content, Path("empty.vtt"), ConversionOptions()
        )

        assert (utterances, participants) == (0, 0)
        assert 'participants: ""' in markdown
        assert "> **Note:**" in markdown
        assert "**" not in _dialogue(markdown)


class TestConvertFile:
    def test_writes_markdown_next_to_input(self, service, sample_vtt_file):
        result = service.convert_file(sample_vtt_file, ConversionOptions())

        assert result.output_path == sample_vtt_file.with_suffix(".md")
        assert result.output_path.read_text(encoding="utf-8").startswith("---\n")
        assert result.utterance_count == 2
        assert result.participant_count == 2

    def test_creates_missing_output_dir(self, service, sample_vtt_file, tmp_path):
        output_dir = tmp_path / "out" / "nested"

        result = service.convert_file(
            sample_vtt_file, ConversionOptions(output_dir=output_dir)
        )

        assert result.output_path == output_dir / "weekly_sync.md"
        assert result.output_path.exists()

    def test_missing_input_raises(self, service, tmp_path):
        with pytest.raises(FileNotFoundError):
            service.convert_file(tmp_path / "missing.vtt", ConversionOptions())

    def test_bom_prefixed_file(self, service, tmp_path):
        path = tmp_path / "bom.vtt"
        path.write_text("\ufeff" + SCENARIO, encoding="utf-8")

        result = service.convert_file(path, ConversionOptions(no_anonymization=True))

        assert result.utterance_count == 2


class TestConvertDirectory:
    def _write(self, directory: Path, name: str, content: str = SCENARIO) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_converts_matching_files_in_order(self, service, tmp_path):
        source = tmp_path / "src"
        self._write(source, "b.vtt")
        self._write(source, "a.vtt")
        self._write(source, "notes.txt", "not a transcript")
        progress = []

        batch = service.convert_directory(
            source,
            ConversionOptions(output_dir=tmp_path / "out"),
            progress_callback=lambda pct, msg: progress.append((pct, msg)),
        )

        assert (batch.succeeded, batch.failed) == (2, 0)
        assert [r.source_path.name for r in batch.results] == ["a.vtt", "b.vtt"]
        assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["a.md", "b.md"]
        assert progress == [(0.5, "Converted a.vtt"), (1.0, "Converted b.vtt")]

    def test_output_defaults_to_source_dir(self, service, tmp_path):
        source = tmp_path / "src"
        self._write(source, "a.vtt")

        service.convert_directory(source, ConversionOptions())

        assert (source / "a.md").exists()

    def test_recursive_and_filter(self, service, tmp_path):
        source = tmp_path / "src"
        self._write(source, "standup.vtt")
        self._write(source / "2024", "standup-jan.vtt")
        self._write(source / "2024", "review.vtt")
        out = tmp_path / "out"

        flat = service.convert_directory(
            source, ConversionOptions(output_dir=out), file_filter="standup*.vtt"
        )
        deep = service.convert_directory(
            source, ConversionOptions(output_dir=out), file_filter="standup*.vtt", recursive=True
        )

        assert flat.succeeded == 1
        assert deep.succeeded == 2
        assert (out / "standup-jan.md").exists()
        assert not (out / "review.md").exists()

    def test_failures_are_isolated(self, service, tmp_path):
        source = tmp_path / "src"
        self._write(source, "a.vtt")
        bad = source / "b.vtt"
        bad.write_bytes(b"WEBVTT\n\n\xff\xfe\xfa invalid utf-8\n")
        self._write(source, "c.vtt")

        batch = service.convert_directory(source, ConversionOptions(output_dir=tmp_path / "out"))

        assert (batch.succeeded, batch.failed, batch.total) == (2, 1, 3)
        assert str(bad) in batch.errors
        assert (tmp_path / "out" / "c.md").exists()

    def test_mapping_restarts_for_each_file(self, service, tmp_path):
        source = tmp_path / "src"
        self._write(source, "a.vtt")
        self._write(
            source,
            "b.vtt",
            "WEBVTT\n\n00:00:01.000 --> 00:00:05.000\n<v Sarah>Second file.\n",
        )

        service.convert_directory(source, ConversionOptions())

        second = (source / "b.md").read_text(encoding="utf-8")
        assert "**P1:** Second file." in second

    def test_missing_source_dir_raises(self, service, tmp_path):
        with pytest.raises(FileNotFoundError):
            service.convert_directory(tmp_path / "nope", ConversionOptions())

    def test_same_basename_in_subdirectories_is_not_overwritten(self, service, tmp_path):
        source = tmp_path / "src"
        self._write(
            source / "a", "sync.vtt", "WEBVTT\n\n00:00:01.000 --> 00:00:05.000\n<v Alice>From a.\n"
        )
        self._write(
            source / "b", "sync.vtt", "WEBVTT\n\n00:00:01.000 --> 00:00:05.000\n<v Bob>From b.\n"
        )
        out = tmp_path / "out"

        batch = service.convert_directory(
            source, ConversionOptions(output_dir=out, no_anonymization=True), recursive=True
        )

        assert (batch.succeeded, batch.failed) == (1, 1)
        assert str(source / "b" / "sync.vtt") in batch.errors
        assert [p.name for p in out.iterdir()] == ["sync.md"]
        assert "**Alice:** From a." in (out / "sync.md").read_text(encoding="utf-8")

    def test_write_failure_is_isolated(self, service, tmp_path):
        source = tmp_path / "src"
        for name in ("a.vtt", "b.vtt", "c.vtt"):
            self._write(source, name)
        out = tmp_path / "out"
        # A directory squatting on the output name makes that one write fail
        (out / "b.md").mkdir(parents=True)

        batch = service.convert_directory(source, ConversionOptions(output_dir=out))

        assert (batch.succeeded, batch.failed) == (2, 1)
        assert str(source / "b.vtt") in batch.errors
        assert (out / "a.md").is_file()
        assert (out / "c.md").is_file()

    def test_output_dir_that_is_a_file_raises(self, service, sample_vtt_file, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(OSError):
            service.convert_file(sample_vtt_file, ConversionOptions(output_dir=blocker))
