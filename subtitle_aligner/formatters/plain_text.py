"""Plain text formatter: one sentence per paragraph, plus translations.

WHY: The aligned sentences are read aloud by a speech-synthesis service
and reviewed by people, neither of which wants timecodes. When the
grouping service also returned translations, those are handed on as a
separate text so they can be voiced on their own.

HOW: Sentence texts (whitespace-collapsed, empty ones skipped) are
joined with blank lines. If at least one sentence carries a
translation, a second output is produced the same way from the
translations.

RULES:
- Double newline between paragraphs
- No trailing whitespace on any line; file ends with one newline
- Output suffixes: "-sentences.txt" and, when present, "-translation.txt"
- Sentences without a translation are left out of the translation file
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from subtitle_aligner.core.ir import AlignedTranscript
from subtitle_aligner.formatters.base import BaseFormatter, FormatterOutput


def _paragraphs(texts: Iterable[Optional[str]]) -> str:
    """Join non-empty texts as blank-line separated paragraphs."""
    parts = [" ".join(text.split()) for text in texts if text and text.strip()]
    content = "\n\n".join(parts)
    if content:
        content += "\n"
    return content


class PlainTextFormatter(BaseFormatter):
    """Formatter that writes sentence (and translation) paragraphs."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, transcript: AlignedTranscript) -> List[FormatterOutput]:
        """Convert aligned sentences into plain text.

        Returns:
            One output for the sentences, and a second one for the
            translations when any sentence has a translation.
        """
        outputs = [
            FormatterOutput(
                suffix="-sentences.txt",
                content=_paragraphs(s.text for s in transcript.sentences),
                media_type="text/plain",
            )
        ]

        if any(s.translation for s in transcript.sentences):
            outputs.append(FormatterOutput(
                suffix="-translation.txt",
                content=_paragraphs(s.translation for s in transcript.sentences),
                media_type="text/plain",
            ))

        return outputs
