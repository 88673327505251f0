"""Grouping request formatter: cue list for the sentence-grouping service.

WHY: The grouping service needs the cleaned cues with their parse ids,
so the ids it cites in its answer line up with the ids align() resolves.
Writing the payload to disk lets it be sent by any client (or pasted
into a chat model) and replayed later.

HOW: Serializes {"segments": [...], "text": "..."} where segments come
from grouping.build_grouping_request() and text is the plain-text
reference.

RULES:
- Output suffix: "-segments.json"
- Media type: "application/json"
- UTF-8 text, ensure_ascii=False, indented for review
"""

import json
from typing import List

from subtitle_aligner.core.grouping import build_grouping_request, plain_text_reference
from subtitle_aligner.core.ir import AlignedTranscript
from subtitle_aligner.formatters.base import BaseFormatter, FormatterOutput


class GroupingRequestFormatter(BaseFormatter):
    """Formatter that writes the grouping service request payload."""

    @property
    def name(self) -> str:
        return "Grouping Request JSON"

    def format(self, transcript: AlignedTranscript) -> List[FormatterOutput]:
        payload = {
            "segments": build_grouping_request(transcript.cues),
            "text": plain_text_reference(transcript.cues),
        }
        return [
            FormatterOutput(
                suffix="-segments.json",
                content=json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
                media_type="application/json",
            )
        ]
