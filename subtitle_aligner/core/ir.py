"""Intermediate representation dataclasses for cleaned and aligned captions.

WHY: Caption files, the external grouping service and the output
formatters all describe the same material in different shapes. The IR
gives every stage one well-typed vocabulary: cues as originally timed,
sentences as regrouped by the grouping service, and the small records
the cleaner uses to decide what to keep.

HOW: Dataclasses in three groups:
  Cue, Sentence, SentenceProposal : the alignment model
  RawCueBlock, CleanedCue          : the rolling-caption dedupe model
  VariantKind, CaptionVariant,
  VariantPlan                      : the variant-file collapse model
AlignedTranscript bundles cues and sentences for the formatters.

RULES:
- Cue is frozen: created once per parse, never mutated
- Cue ids are dense, 1-based, in file order
- Sentence is mutable; its timing is never recomputed after alignment
- All times are integer milliseconds internally; display strings use
  HH:MM:SS,fff
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional

from subtitle_aligner.core.timecode import ms_to_timestamp, timestamp_to_ms


# ---------------------------------------------------------------------------
# Alignment model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Cue:
    """One caption entry as originally timed.

    RULES:
    - id: sequence-assigned, unrelated to the index printed in the file
    - start_ms / end_ms: non-negative millisecond offsets
    - text: single line, inner line breaks collapsed to one space
    """

    id: int
    start_ms: int
    end_ms: int
    text: str

    @property
    def start(self) -> str:
        return ms_to_timestamp(self.start_ms)

    @property
    def end(self) -> str:
        return ms_to_timestamp(self.end_ms)


@dataclass
class Sentence:
    """A merged semantic unit spanning zero or more cues.

    WHY: The grouping service merges rolling fragments into readable
    sentences. Each sentence needs its own timing so it can be voiced or
    exported, and the user may edit, insert or delete sentences before
    export.

    HOW: Created by aligner.align(). Editing helpers in the aligner
    return re-numbered copies.

    RULES:
    - index: 1-based position in the current list, not a stable key
    - segment_ids: cue ids that contributed timing (may be empty)
    - start_time / end_time: display timestamps, None when untimed
    - end_time is strictly after start_time once both are set
    - translation: optional text supplied by the grouping service
    """

    index: int
    text: str
    segment_ids: List[int] = field(default_factory=list)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    translation: Optional[str] = None

    @property
    def start_ms(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return timestamp_to_ms(self.start_time)

    @property
    def end_ms(self) -> Optional[int]:
        if self.end_time is None:
            return None
        return timestamp_to_ms(self.end_time)

    @property
    def is_timed(self) -> bool:
        return self.start_time is not None and self.end_time is not None


@dataclass
class SentenceProposal:
    """One sentence as proposed by the external grouping service.

    Treated as untrusted: segment_ids may be empty, unknown, duplicated
    or overlapping with other proposals. index is whatever the service
    sent and is not used for ordering.
    """

    text: str
    segment_ids: List[int] = field(default_factory=list)
    index: Optional[int] = None
    translation: Optional[str] = None


@dataclass
class AlignedTranscript:
    """Everything a formatter needs: parsed cues plus aligned sentences."""

    cues: List[Cue]
    sentences: List[Sentence]
    source_filename: str


# ---------------------------------------------------------------------------
# Rolling-caption dedupe model
# ---------------------------------------------------------------------------


@dataclass
class RawCueBlock:
    """A cue block exactly as found in a raw caption file.

    index_marker is the line directly above the timing line (it should
    be a bare number). text_lines keeps every body line, blank ones
    included, so the cleaner can pick the last non-blank line.
    """

    index_marker: str
    timing_line: str
    text_lines: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CleanedCue:
    """A cue that survived rolling-caption dedupe, re-numbered from 1."""

    index: int
    timing_line: str
    text: str


# ---------------------------------------------------------------------------
# Variant-file collapse model
# ---------------------------------------------------------------------------


class VariantKind(str, enum.Enum):
    """Kind of language-variant caption file.

    ORIGINAL  : "<base>.en-orig.srt", the track as authored/spoken
    DEFAULT   : "<base>.en.srt", the default (often machine) track
    DUPLICATE : "<base>.en-en.srt", a mirror of the default track
    UNRECOGNIZED : anything else; never compared, always kept
    """

    ORIGINAL = "original"
    DEFAULT = "default"
    DUPLICATE = "duplicate"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class CaptionVariant:
    """Classification of one caption file, resolved once at ingestion.

    RULES:
    - source: the caller's original item (str or Path), returned untouched
    - name: the file name the classification was made from
    - base_name: name with the language/variant suffix and extension
      stripped; the grouping key
    - language: the language code found in the name ("" when unrecognized)
    """

    source: Any
    name: str
    base_name: str
    language: str
    kind: VariantKind


@dataclass
class VariantPlan:
    """Which caption files to keep and which to delete.

    Both lists hold the caller's original items in input order. The plan
    is advisory: applying it is the storage layer's job.
    """

    keep: List[Any] = field(default_factory=list)
    delete: List[Any] = field(default_factory=list)
