"""SRT caption formatter: aligned sentences back to SubRip.

WHY: The aligned, possibly hand-edited sentence list is what players,
editors and the speech-synthesis step consume, and all of them want a
SubRip file with one sentence per cue.

HOW: Delegates to aligner.serialize(), which numbers blocks, keeps real
timing and synthesizes timing for untimed sentences.

RULES:
- Produces ONE file: {stem}-aligned.srt
- Registered as "srt_captions" in the FORMATTERS dict
- Media type: "application/x-subrip"
- Never modifies the transcript
"""

from typing import List

from subtitle_aligner.core.aligner import serialize
from subtitle_aligner.core.ir import AlignedTranscript
from subtitle_aligner.formatters.base import BaseFormatter, FormatterOutput


class SRTCaptionFormatter(BaseFormatter):
    """Formatter that writes one SubRip cue per aligned sentence."""

    @property
    def name(self) -> str:
        return "SRT Captions"

    def format(self, transcript: AlignedTranscript) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix="-aligned.srt",
                content=serialize(transcript.sentences),
                media_type="application/x-subrip",
            ),
        ]
