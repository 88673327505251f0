"""Boundary with the external sentence-grouping service.

WHY: The grouping service (a language model behind an HTTP endpoint)
receives cue ids, timestamps and text, and answers with sentence
objects that cite the ids they merged. Its answer is untrusted text:
it may be wrapped in markdown fences or prose, ids may be strings,
"segmentIds" may be missing or not a list. This module builds the
request payload and turns whatever comes back into clean
SentenceProposal records for the aligner.

HOW: build_grouping_request() and plain_text_reference() serialize
cues. parse_grouping_response() recovers the JSON array, then validates
each item with a pydantic model whose validators coerce the loose
fields instead of rejecting the item.

RULES:
- Request items: {"id", "start", "end", "text"}
- Response items: {"index", "text", "segmentIds", "translation"};
  "korean" is accepted as an alias of "translation"
- Non-list segmentIds → []; non-integer ids are dropped
- Non-object items are skipped with a warning
- GroupingResponseError only when no JSON array can be recovered
- Python 3.9+ compatible (use Optional/List from typing)
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from subtitle_aligner.core.ir import Cue, SentenceProposal

logger = logging.getLogger(__name__)

_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)
_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?|\n?```\s*$")


class GroupingResponseError(ValueError):
    """The grouping service answered with something that holds no sentence list."""


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------


def build_grouping_request(cues: Sequence[Cue]) -> List[Dict[str, Any]]:
    """Serialize cues into the segment list the grouping service expects.

    RULES:
    - One dict per cue, in cue order
    - start/end are display timestamps ("HH:MM:SS,fff")
    - id is the dense parse id the aligner will resolve against
    """
    return [
        {"id": cue.id, "start": cue.start, "end": cue.end, "text": cue.text}
        for cue in cues
    ]


def plain_text_reference(cues: Sequence[Cue]) -> str:
    """Cue texts joined by newlines, sent alongside the segment list."""
    return "\n".join(cue.text for cue in cues)


# ---------------------------------------------------------------------------
# Response side
# ---------------------------------------------------------------------------


def _integral_id(value: Any) -> Optional[int]:
    """Return value as an int only when it names a whole number.

    Accepts ints, integral floats (4.0) and strings holding either.
    Fractional values ("3.5", 2.7), booleans and anything else give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class ProposalItem(BaseModel):
    """One sentence object as returned by the grouping service.

    WHY: Field names and types vary between model runs. Validation here
    normalizes them once so the aligner only ever sees clean values.

    RULES:
    - text defaults to "" and is coerced to str
    - segment_ids reads "segmentIds" or "segment_ids"
    - translation reads "translation" or "korean"
    - index is optional and informational only
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    index: Optional[int] = Field(default=None, description="Position the service assigned.")
    text: str = Field(default="", description="Sentence text.")
    segment_ids: List[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("segmentIds", "segment_ids"),
        description="Cue ids merged into this sentence.",
    )
    translation: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("translation", "korean"),
        description="Optional translated sentence.",
    )

    @field_validator("index", mode="before")
    @classmethod
    def _loose_index(cls, value: Any) -> Optional[int]:
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @field_validator("text", mode="before")
    @classmethod
    def _loose_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("segment_ids", mode="before")
    @classmethod
    def _loose_ids(cls, value: Any) -> List[int]:
        if not isinstance(value, (list, tuple)):
            return []
        ids: List[int] = []
        for item in value:
            cue_id = _integral_id(item)
            if cue_id is None:
                logger.debug("Dropping non-integer segment id %r", item)
                continue
            ids.append(cue_id)
        return ids

    @field_validator("translation", mode="before")
    @classmethod
    def _loose_translation(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def to_proposal(self) -> SentenceProposal:
        return SentenceProposal(
            text=self.text,
            segment_ids=list(self.segment_ids),
            index=self.index,
            translation=self.translation,
        )


def _extract_array(raw: str) -> List[Any]:
    """Recover a JSON array from raw model output.

    HOW: Strip markdown fences, try a direct parse, then fall back to
    the outermost "[ ... ]" span. A top-level {"sentences": [...]}
    object is unwrapped.
    """
    text = _FENCE_RE.sub("", raw.strip()).strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = _ARRAY_RE.search(text)
        if not match:
            raise GroupingResponseError("No JSON array found in grouping response")
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise GroupingResponseError("Could not parse grouping response: {}".format(e))

    return _unwrap(data)


def _unwrap(data: Any) -> List[Any]:
    if isinstance(data, dict) and isinstance(data.get("sentences"), list):
        return data["sentences"]
    if isinstance(data, list):
        return data
    raise GroupingResponseError(
        "Grouping response must be a list of sentences, got {}".format(type(data).__name__)
    )


def parse_grouping_response(raw: Any) -> List[SentenceProposal]:
    """Turn a grouping-service answer into SentenceProposal records.

    WHY: The aligner tolerates partial groupings, but it needs typed
    input. This is the single place where loose service output is
    checked and normalized.

    HOW: Accepts an already-decoded list, a {"sentences": [...]} dict,
    or raw text. Each item is validated with ProposalItem; invalid items
    are skipped with a warning.

    Args:
        raw: Decoded JSON (list/dict) or the raw response text.

    Returns:
        Proposals in the order the service returned them.

    Raises:
        GroupingResponseError: If no sentence list can be recovered.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        items = _extract_array(raw)
    else:
        items = _unwrap(raw)

    proposals: List[SentenceProposal] = []
    for position, item in enumerate(items, 1):
        if not isinstance(item, dict):
            logger.warning("Skipping grouping item %d: not an object (%r)", position, item)
            continue
        try:
            proposals.append(ProposalItem.model_validate(item).to_proposal())
        except ValidationError as e:
            logger.warning("Skipping grouping item %d: %s", position, e)

    return proposals
