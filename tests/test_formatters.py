"""Unit tests for all formatter modules.

WHY: Each formatter turns the aligned transcript into a file another
tool consumes: a SubRip file for players and the speech-synthesis step,
plain text for review and voicing, and the request JSON for the
grouping service. A malformed file breaks the next step silently.

HOW: Tests run each formatter against the aligned_transcript fixture:
  - SRT: one block per sentence, valid timing lines
  - Plain text: paragraphs, translation file only when translations exist
  - Grouping request: schema validation with jsonschema
  - Registry: every key resolves to a working formatter

RULES:
- All tests use fixtures from conftest.py
"""

import json
import re

import jsonschema
import pytest

from subtitle_aligner.core.aligner import parse
from subtitle_aligner.core.ir import AlignedTranscript, Sentence
from subtitle_aligner.formatters import FORMATTERS
from subtitle_aligner.formatters.base import BaseFormatter, FormatterOutput
from subtitle_aligner.formatters.grouping_request import GroupingRequestFormatter
from subtitle_aligner.formatters.plain_text import PlainTextFormatter
from subtitle_aligner.formatters.srt_captions import SRTCaptionFormatter

SEGMENTS_SCHEMA = {
    "type": "object",
    "required": ["segments", "text"],
    "additionalProperties": False,
    "properties": {
        "text": {"type": "string"},
        "segments": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "start", "end", "text"],
                "additionalProperties": False,
                "properties": {
                    "id": {"type": "integer", "minimum": 1},
                    "start": {"type": "string", "pattern": r"^\d{2}:\d{2}:\d{2},\d{3}$"},
                    "end": {"type": "string", "pattern": r"^\d{2}:\d{2}:\d{2},\d{3}$"},
                    "text": {"type": "string", "minLength": 1},
                },
            },
        },
    },
}

TIMING_RE = re.compile(r"^\d{2}:\d{2}:\d{2},\d{3} --> \d{2}:\d{2}:\d{2},\d{3}$")


def _transcript(sentences, cues=None):
    return AlignedTranscript(cues=cues or [], sentences=sentences, source_filename="clip.srt")


class TestSRTCaptionFormatter:

    def test_single_output(self, aligned_transcript):
        outputs = SRTCaptionFormatter().format(aligned_transcript)
        assert len(outputs) == 1
        assert outputs[0].suffix == "-aligned.srt"
        assert outputs[0].media_type == "application/x-subrip"

    def test_one_block_per_sentence(self, aligned_transcript):
        content = SRTCaptionFormatter().format(aligned_transcript)[0].content
        blocks = [b for b in content.split("\n\n") if b.strip()]
        assert len(blocks) == len(aligned_transcript.sentences)
        for number, block in enumerate(blocks, 1):
            lines = block.strip().split("\n")
            assert lines[0] == str(number)
            assert TIMING_RE.match(lines[1])

    def test_output_parses_back(self, aligned_transcript):
        content = SRTCaptionFormatter().format(aligned_transcript)[0].content
        assert [c.text for c in parse(content)] == [s.text for s in aligned_transcript.sentences]

    def test_untimed_sentences_still_valid(self):
        content = SRTCaptionFormatter().format(
            _transcript([Sentence(index=1, text="Hand written.")])
        )[0].content
        assert content.splitlines()[1] == "00:00:02,000 --> 00:00:04,000"

    def test_does_not_modify_transcript(self, aligned_transcript):
        before = [(s.index, s.text, s.start_time) for s in aligned_transcript.sentences]
        SRTCaptionFormatter().format(aligned_transcript)
        assert [(s.index, s.text, s.start_time) for s in aligned_transcript.sentences] == before


class TestPlainTextFormatter:

    def test_sentences_and_translation(self, aligned_transcript):
        outputs = PlainTextFormatter().format(aligned_transcript)
        assert [o.suffix for o in outputs] == ["-sentences.txt", "-translation.txt"]
        assert outputs[0].content == (
            "So today we are going to talk about alignment.\n\n"
            "It works pretty well.\n"
        )
        assert outputs[1].content == "오늘은 정렬에 대해 이야기하겠습니다.\n\n꽤 잘 작동합니다.\n"

    def test_no_translation_file_without_translations(self):
        outputs = PlainTextFormatter().format(_transcript([Sentence(index=1, text="Only text.")]))
        assert len(outputs) == 1
        assert outputs[0].content == "Only text.\n"

    def test_missing_translations_are_left_out(self):
        sentences = [
            Sentence(index=1, text="One.", translation="하나."),
            Sentence(index=2, text="Two."),
        ]
        outputs = PlainTextFormatter().format(_transcript(sentences))
        assert outputs[1].content == "하나.\n"

    def test_empty_sentences_skipped_and_whitespace_collapsed(self):
        sentences = [
            Sentence(index=1, text="  spaced   out\ntext "),
            Sentence(index=2, text="   "),
            Sentence(index=3, text="end."),
        ]
        content = PlainTextFormatter().format(_transcript(sentences))[0].content
        assert content == "spaced out text\n\nend.\n"
        assert all(line == line.rstrip() for line in content.splitlines())

    def test_empty_transcript(self):
        outputs = PlainTextFormatter().format(_transcript([]))
        assert outputs == [FormatterOutput(suffix="-sentences.txt", content="", media_type="text/plain")]


class TestGroupingRequestFormatter:

    def test_schema_valid(self, aligned_transcript):
        output = GroupingRequestFormatter().format(aligned_transcript)[0]
        assert output.suffix == "-segments.json"
        assert output.media_type == "application/json"
        jsonschema.validate(json.loads(output.content), SEGMENTS_SCHEMA)

    def test_ids_match_parse_ids(self, aligned_transcript):
        data = json.loads(GroupingRequestFormatter().format(aligned_transcript)[0].content)
        assert [s["id"] for s in data["segments"]] == [c.id for c in aligned_transcript.cues]

    def test_non_ascii_kept_readable(self, clean_srt):
        cues = parse(clean_srt.replace("pretty well.", "아주 좋아요."))
        content = GroupingRequestFormatter().format(_transcript([], cues))[0].content
        assert "아주 좋아요." in content

    def test_empty_cues_still_valid(self):
        output = GroupingRequestFormatter().format(_transcript([]))[0]
        jsonschema.validate(json.loads(output.content), SEGMENTS_SCHEMA)


class TestFormatterRegistry:

    def test_registered_keys(self):
        assert set(FORMATTERS) == {"srt_captions", "plain_text", "grouping_request"}

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_every_formatter_produces_outputs(self, key, aligned_transcript):
        formatter = FORMATTERS[key]()
        assert isinstance(formatter, BaseFormatter)
        assert formatter.name
        outputs = formatter.format(aligned_transcript)
        assert outputs
        for output in outputs:
            assert isinstance(output, FormatterOutput)
            assert output.suffix.startswith("-")
            assert isinstance(output.content, str)
