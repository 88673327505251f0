"""Segment aligner: cue parsing, sentence timing, and SubRip serialization.

WHY: The grouping service turns rolling cue fragments into full
sentences and reports which cue ids it merged, but it is a language
model, so ids go missing, point at nothing, or overlap. Every sentence
still needs a usable start and end time, and an edited sentence list
must go back out as valid SubRip.

HOW: parse() turns canonical caption text into dense-id Cue records.
align() resolves each proposal's ids, falling back to sequential
consumption through an explicit cursor and finally to the cue at the
same ordinal position, then takes min start / max end. serialize()
writes sentences as four-line blocks, synthesizing timing where none
exists.

RULES:
- Proposals are processed in the order supplied (the cursor depends on it)
- An id claimed by an earlier sentence is unresolved for later ones
- The fallback cursor skips cues that are already claimed
- The positional last resort ignores claims
- end <= start is clamped to start + MIN_DURATION_MS
- Nothing here raises on bad input; empty input gives empty output
"""

import dataclasses
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from subtitle_aligner.config import FALLBACK_SLOT_MS, MIN_DURATION_MS
from subtitle_aligner.core.ir import Cue, Sentence, SentenceProposal
from subtitle_aligner.core.timecode import (
    TIMING_LINE_RE,
    ms_to_timestamp,
    timestamp_to_ms,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Parsing
# =============================================================================


def parse(caption_text: str) -> List[Cue]:
    """Parse SubRip text into an ordered list of cues.

    WHY: Alignment works on cue ids and millisecond offsets. The ids the
    grouping service sees must be the ones assigned here, not whatever
    numbers happen to be printed in the file.

    HOW: Walks the lines. A block is a numeric index line, a timing line
    with two timestamps, and text lines up to the next blank line. Text
    lines are trimmed and joined with single spaces.

    RULES:
    - Non-numeric lines outside a block are skipped
    - A block whose timing line does not match is skipped
    - A timed block with no text becomes a cue with text ""
    - Ids are 1..n in parse order
    - "." or "," fraction separators are both accepted

    Args:
        caption_text: Canonical caption file contents.

    Returns:
        Cues in file order (empty for empty or unusable input).
    """
    if not caption_text:
        return []

    lines = caption_text.lstrip("\ufeff").replace("\r", "").split("\n")
    cues: List[Cue] = []
    i = 0
    total = len(lines)

    while i < total:
        index_line = lines[i].strip()
        if not index_line or not index_line.isdigit():
            i += 1
            continue
        i += 1
        if i >= total:
            break

        match = TIMING_LINE_RE.search(lines[i].strip())
        if not match:
            logger.debug("Skipping block %s: no timing on line %d", index_line, i + 1)
            i += 1
            continue
        i += 1

        text_lines: List[str] = []
        while i < total and lines[i].strip():
            text_lines.append(lines[i].strip())
            i += 1

        text = " ".join(" ".join(text_lines).split())

        cues.append(Cue(
            id=len(cues) + 1,
            start_ms=timestamp_to_ms(match.group(1)),
            end_ms=timestamp_to_ms(match.group(2)),
            text=text,
        ))

    return cues


# =============================================================================
# Alignment
# =============================================================================


def _advance_cursor(
    cues: Sequence[Cue],
    cursor: int,
    claimed: Set[int],
) -> Tuple[Optional[Cue], int]:
    """Return the next unclaimed cue at or after cursor, and the new cursor."""
    while cursor < len(cues):
        cue = cues[cursor]
        cursor += 1
        if cue.id not in claimed:
            return cue, cursor
    return None, cursor


def _resolve_ids(
    segment_ids: Sequence[int],
    cues_by_id: Dict[int, Cue],
    claimed: Set[int],
) -> List[Cue]:
    """Resolve proposed ids to cues, dropping unknown, repeated and claimed ids."""
    resolved: List[Cue] = []
    seen: Set[int] = set()
    for cue_id in segment_ids:
        if cue_id in seen:
            continue
        seen.add(cue_id)
        cue = cues_by_id.get(cue_id)
        if cue is None:
            logger.debug("Discarding unknown cue id %s", cue_id)
            continue
        if cue_id in claimed:
            logger.debug("Cue %s already claimed by an earlier sentence", cue_id)
            continue
        resolved.append(cue)
    return resolved


def _timing_for(matched: Sequence[Cue]) -> Tuple[Optional[str], Optional[str]]:
    """Span matched cues and clamp degenerate spans."""
    if not matched:
        return None, None
    start_ms = min(cue.start_ms for cue in matched)
    end_ms = max(cue.end_ms for cue in matched)
    if end_ms <= start_ms:
        end_ms = start_ms + MIN_DURATION_MS
    return ms_to_timestamp(start_ms), ms_to_timestamp(end_ms)


def align(
    cues: Sequence[Cue],
    proposals: Sequence[SentenceProposal],
) -> List[Sentence]:
    """Time each proposed sentence from the cues it was built from.

    WHY: The grouping service is unreliable: it may omit ids for
    sentences it could not attribute, cite ids that do not exist, or
    give one cue to two sentences. Alignment must never fail outright,
    only degrade to coarser timing.

    HOW: For each proposal, in order:
      1. resolve segment_ids (unknown and already-claimed ids dropped)
      2. nothing resolved → next unclaimed cue from the forward cursor
      3. still nothing → the cue at the proposal's ordinal position
      4. start = min start_ms, end = max end_ms over the resolved cues
      5. end <= start → end = start + 500
    The cursor and the claimed-id set are threaded through the loop as
    plain local values; nothing outlives the call.

    RULES:
    - Sentence.index is the 1-based position in the returned list
    - Sentence.segment_ids lists the cues that contributed timing
    - Sentences with no timing source keep start_time/end_time = None
    - Proposal text and translation are carried over unchanged

    Args:
        cues: Parsed cues, in id order.
        proposals: Sentence proposals from the grouping service.

    Returns:
        One Sentence per proposal, in the same order.
    """
    cues_by_id = {cue.id: cue for cue in cues}
    claimed: Set[int] = set()
    cursor = 0
    sentences: List[Sentence] = []

    for position, proposal in enumerate(proposals):
        matched = _resolve_ids(proposal.segment_ids or [], cues_by_id, claimed)

        if not matched:
            fallback, cursor = _advance_cursor(cues, cursor, claimed)
            if fallback is not None:
                matched = [fallback]

        if not matched and position < len(cues):
            logger.debug("Sentence %d: using cue at the same position", position + 1)
            matched = [cues[position]]

        claimed.update(cue.id for cue in matched)
        start_time, end_time = _timing_for(matched)

        sentences.append(Sentence(
            index=position + 1,
            text=proposal.text,
            segment_ids=[cue.id for cue in matched],
            start_time=start_time,
            end_time=end_time,
            translation=proposal.translation,
        ))

    return sentences


# =============================================================================
# Serialization
# =============================================================================


def serialize(sentences: Sequence[Sentence]) -> str:
    """Write sentences as SubRip text.

    WHY: Edited sentence lists are exported for players, editors and the
    speech-synthesis step, all of which need every block timed, even
    sentences the user inserted by hand.

    HOW: Numbers blocks 1..n in list order. Missing starts become
    n * 2000 ms, missing ends become start + 2000 ms, and any end not
    after its start is forced to start + 500 ms.

    RULES:
    - Real timestamps pass through normalized to "," separators
    - Text is collapsed to a single line
    - Each block is index, timing, text, blank line
    - parse(serialize(s)) reproduces the timing of every timed sentence

    Args:
        sentences: Sentences in final order.

    Returns:
        SubRip file contents ("" for an empty list).
    """
    lines: List[str] = []

    for number, sentence in enumerate(sentences, 1):
        if sentence.start_time:
            start_ms = timestamp_to_ms(sentence.start_time)
        else:
            start_ms = number * FALLBACK_SLOT_MS

        if sentence.end_time:
            end_ms = timestamp_to_ms(sentence.end_time)
        else:
            end_ms = start_ms + FALLBACK_SLOT_MS

        if end_ms <= start_ms:
            end_ms = start_ms + MIN_DURATION_MS

        lines.append(str(number))
        lines.append("{} --> {}".format(ms_to_timestamp(start_ms), ms_to_timestamp(end_ms)))
        lines.append(" ".join(sentence.text.split()))
        lines.append("")

    return "\n".join(lines)


# =============================================================================
# Sentence editing
# =============================================================================


def reindex(sentences: Sequence[Sentence]) -> List[Sentence]:
    """Return copies of the sentences numbered 1..n in list order."""
    return [
        dataclasses.replace(sentence, index=number)
        for number, sentence in enumerate(sentences, 1)
    ]


def insert_sentence(
    sentences: Sequence[Sentence],
    after_index: Optional[int] = None,
    text: str = "",
) -> List[Sentence]:
    """Insert an untimed sentence and renumber.

    The new sentence goes right after the sentence whose index is
    after_index, or at the end when after_index is None or unknown. It
    has no segment ids and no timing; serialize() synthesizes both.
    """
    new_sentence = Sentence(index=0, text=text)
    items = list(sentences)

    insert_at = len(items)
    if after_index is not None:
        for pos, sentence in enumerate(items):
            if sentence.index == after_index:
                insert_at = pos + 1
                break

    items.insert(insert_at, new_sentence)
    return reindex(items)


def remove_sentence(sentences: Sequence[Sentence], index: int) -> List[Sentence]:
    """Drop the sentence with the given index and renumber the rest."""
    return reindex([s for s in sentences if s.index != index])


def edit_sentence(sentences: Sequence[Sentence], index: int, text: str) -> List[Sentence]:
    """Replace one sentence's text. Timing and segment ids are left alone."""
    return [
        dataclasses.replace(s, text=text) if s.index == index else s
        for s in sentences
    ]
