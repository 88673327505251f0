"""Shared test fixtures for the subtitle_aligner test suite.

WHY: The cleaner, aligner, formatter and CLI tests all need the same
small caption files: a raw "rolling" auto-caption file as downloaded,
and a clean SubRip file whose cues the grouping service regroups.
Centralizing them keeps every module tested against the same material.

HOW: Module-level constants hold the caption texts and the expected
cleaned output. Fixtures return parsed cues, grouping proposals and an
aligned transcript built from them.

RULES:
- ROLLING_SRT repeats each previous line above the new one, like real
  auto-captions, and has one block that adds no new text
- CLEAN_SRT has four cues with ids 1..4 in file order
- Fixtures return fresh objects so tests may mutate them
"""

from typing import Any, Dict, List

import pytest

from subtitle_aligner.core.aligner import align, parse
from subtitle_aligner.core.ir import AlignedTranscript, SentenceProposal


# ---------------------------------------------------------------------------
# Raw rolling auto-captions
# ---------------------------------------------------------------------------

ROLLING_SRT = (
    "1\n"
    "00:00:00,000 --> 00:00:02,000\n"
    "hello there\n"
    "\n"
    "2\n"
    "00:00:02,000 --> 00:00:04,000\n"
    "hello there\n"
    "how are you\n"
    "\n"
    "3\n"
    "00:00:04,000 --> 00:00:04,010\n"
    "how are you\n"
    "\n"
    "4\n"
    "00:00:04,010 --> 00:00:06,000\n"
    "how are you\n"
    "doing today\n"
)

ROLLING_SRT_CLEANED = (
    "1\n"
    "00:00:00,000 --> 00:00:02,000\n"
    "hello there\n"
    "\n"
    "2\n"
    "00:00:02,000 --> 00:00:04,000\n"
    "how are you\n"
    "\n"
    "3\n"
    "00:00:04,010 --> 00:00:06,000\n"
    "doing today\n"
)


# ---------------------------------------------------------------------------
# Clean captions and a grouping response for them
# ---------------------------------------------------------------------------

CLEAN_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:02,500\n"
    "So today we are\n"
    "\n"
    "2\n"
    "00:00:02,500 --> 00:00:04,000\n"
    "going to talk about\n"
    "\n"
    "3\n"
    "00:00:04,000 --> 00:00:05,200\n"
    "alignment. It works\n"
    "\n"
    "4\n"
    "00:00:05,200 --> 00:00:07,000\n"
    "pretty well.\n"
)

GROUPING_RESPONSE: List[Dict[str, Any]] = [
    {
        "index": 1,
        "text": "So today we are going to talk about alignment.",
        "segmentIds": [1, 2, 3],
        "translation": "오늘은 정렬에 대해 이야기하겠습니다.",
    },
    {
        "index": 2,
        "text": "It works pretty well.",
        "segmentIds": [4],
        "translation": "꽤 잘 작동합니다.",
    },
]


@pytest.fixture
def rolling_srt():
    """Raw rolling auto-caption text, as downloaded."""
    return ROLLING_SRT


@pytest.fixture
def clean_srt():
    """Clean SubRip text with four cues."""
    return CLEAN_SRT


@pytest.fixture
def cues():
    """Cues parsed from CLEAN_SRT (ids 1..4)."""
    return parse(CLEAN_SRT)


@pytest.fixture
def grouping_response():
    """Decoded grouping-service answer for CLEAN_SRT."""
    return [dict(item) for item in GROUPING_RESPONSE]


@pytest.fixture
def proposals():
    """SentenceProposal records matching GROUPING_RESPONSE."""
    return [
        SentenceProposal(
            text=item["text"],
            segment_ids=list(item["segmentIds"]),
            index=item["index"],
            translation=item["translation"],
        )
        for item in GROUPING_RESPONSE
    ]


@pytest.fixture
def aligned_transcript(cues, proposals):
    """AlignedTranscript built from the clean cues and the proposals."""
    return AlignedTranscript(
        cues=cues,
        sentences=align(cues, proposals),
        source_filename="video.srt",
    )


@pytest.fixture
def rolling_srt_cleaned():
    """Expected clean_caption_text() output for ROLLING_SRT."""
    return ROLLING_SRT_CLEANED
