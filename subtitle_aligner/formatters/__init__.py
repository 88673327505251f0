"""Output formatter registry: pluggable format hub.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the
formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt_captions"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from subtitle_aligner.formatters.grouping_request import GroupingRequestFormatter
from subtitle_aligner.formatters.plain_text import PlainTextFormatter
from subtitle_aligner.formatters.srt_captions import SRTCaptionFormatter

if TYPE_CHECKING:
    from subtitle_aligner.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt_captions": SRTCaptionFormatter,
    "plain_text": PlainTextFormatter,
    "grouping_request": GroupingRequestFormatter,
}
