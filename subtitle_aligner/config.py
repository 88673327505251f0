"""Configuration constants, timing defaults, and .env loading.

WHY: Centralizes the values that shape cleaning and alignment so they
are easy to find and override: which caption language the variant
collapse looks for, the synthetic timing slots used for untimed
sentences, and the logging level of the CLI.

HOW: python-dotenv loads the .env file on import. Constants are defined
at module level. configure_logging() applies the root logger settings
once for command-line runs.

RULES:
- DEFAULT_CAPTION_LANGUAGE comes from CAPTION_LANGUAGE (default "en")
- Timing constants are milliseconds
- MIN_DURATION_MS is the clamp applied whenever end <= start
- Only the CLI calls configure_logging(); library code just logs
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Caption files
# ---------------------------------------------------------------------------

DEFAULT_CAPTION_LANGUAGE = os.getenv("CAPTION_LANGUAGE", "en").strip().lower() or "en"
"""Language code whose variant files (orig / default / duplicate) are collapsed."""

CAPTION_EXTENSION = ".srt"
"""Extension of caption files produced by the downloader (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Timing defaults
# ---------------------------------------------------------------------------

FALLBACK_SLOT_MS = 2000
"""Spacing of synthetic starts, and default length, for untimed sentences."""

MIN_DURATION_MS = 500
"""Length forced onto any cue or sentence whose end is not after its start."""

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("SUBTITLE_ALIGNER_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger for command-line use.

    WHY: Core modules report skipped blocks and discarded ids through
    module loggers. Nothing is shown unless the entry point opts in.

    HOW: logging.basicConfig with the shared format string. Unknown
    level names fall back to WARNING.

    RULES:
    - level overrides SUBTITLE_ALIGNER_LOG_LEVEL when given
    - Safe to call more than once (basicConfig is a no-op after the first)
    """
    name = (level or LOG_LEVEL).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
