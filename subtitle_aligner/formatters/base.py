"""Formatter interface and the file record every formatter returns.

WHY: The SubRip, plain-text and grouping-request outputs all start from
one AlignedTranscript. A shared interface lets the CLI loop over the
registry without knowing which files a formatter writes.

HOW: BaseFormatter declares a ``name`` property and ``format()``.
FormatterOutput pairs a file suffix with the text to write and its
MIME type.

RULES:
- ``format()`` always returns a list; plain text may yield two files
- ``suffix`` begins with "-" and includes the extension ("-aligned.srt")
- Formatters never write files; the CLI joins stem + suffix and saves
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from subtitle_aligner.core.ir import AlignedTranscript


@dataclass
class FormatterOutput:
    """A single file a formatter wants written.

    Attributes:
        suffix: Appended to the caption file's stem,
                e.g. ``"-sentences.txt"`` → ``"video-sentences.txt"``.
        content: UTF-8 text to write.
        media_type: MIME type, e.g. ``"text/plain"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Interface shared by every entry in the FORMATTERS registry.

    New outputs subclass this, implement ``name`` and ``format()``, and
    add one line to ``subtitle_aligner/formatters/__init__.py``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name used in CLI status lines, e.g. 'Plain Text'."""

    @abstractmethod
    def format(self, transcript: AlignedTranscript) -> list[FormatterOutput]:
        """Render the transcript as one or more files.

        Args:
            transcript: Parsed cues, aligned sentences and source name.

        Returns:
            FormatterOutput records, in the order they should be saved.
        """
