"""Caption cleaner: variant-file collapse and rolling-caption dedupe.

WHY: The downloader asks for "<lang>-orig" and "<lang>" captions with
auto-captions enabled, which routinely leaves two or three files per
video ("video.en-orig.srt", "video.en.srt", "video.en-en.srt"). Auto
captions are also "rolling": each cue repeats the previous cue's line
above the newly spoken one, so the same words appear two or three times
in a row. Both kinds of noise must go before any timing is trusted.

HOW: collapse_variants() classifies every file name once into a
VariantKind, groups by base name, and decides which files to drop.
split_raw_blocks() cuts raw SubRip text into blocks; dedupe_cue_text()
keeps only the last text line of each block and drops exact repeats.
clean_caption_text() chains split → dedupe → render.

RULES:
- A DUPLICATE variant is dropped whenever its base name has company
- DEFAULT is dropped when an ORIGINAL exists for the same base name
- A base name with a single file keeps it unconditionally
- Files with different base names are never compared
- Cue text = last non-blank line of the block, trimmed
- A cue equal to the previous *kept* cue is dropped
- Malformed blocks (bad index marker, bad timing line, no text) are
  skipped with a debug log, never an exception
- Nothing here touches the filesystem
"""

import logging
import re
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from subtitle_aligner.config import CAPTION_EXTENSION, DEFAULT_CAPTION_LANGUAGE
from subtitle_aligner.core.ir import (
    CaptionVariant,
    CleanedCue,
    RawCueBlock,
    VariantKind,
    VariantPlan,
)
from subtitle_aligner.core.timecode import parse_timing_line

logger = logging.getLogger(__name__)

# "<base>.<tag><ext>": tag is "en", "en-orig", "en-en", ...
_VARIANT_NAME_RE = re.compile(
    r"^(?P<base>.+)\.(?P<tag>[^.]+){ext}$".format(ext=re.escape(CAPTION_EXTENSION)),
    re.IGNORECASE,
)

_ORIGINAL_SUFFIX = "orig"


# =============================================================================
# Variant collapse
# =============================================================================


def classify_variant(file_name: Any, language: Optional[str] = None) -> CaptionVariant:
    """Resolve one caption file name into a tagged CaptionVariant.

    WHY: The variant convention is baked into file names. Matching
    suffix strings at every decision point is fragile, so each name is
    classified exactly once and the rest of the cleaner works with the
    VariantKind enum.

    HOW: Splits "<base>.<tag>.srt". With language "en":
      tag "en-orig" → ORIGINAL
      tag "en"      → DEFAULT
      tag "en-en"   → DUPLICATE
    Anything else (other language, other extension, no tag) is
    UNRECOGNIZED.

    Args:
        file_name: File name or path (str or PathLike). Only the final
                   path component is inspected.
        language: Caption language code. Defaults to the configured
                  DEFAULT_CAPTION_LANGUAGE.

    Returns:
        CaptionVariant carrying the caller's original item as ``source``.
    """
    lang = (language or DEFAULT_CAPTION_LANGUAGE).strip().lower()
    name = PurePath(str(file_name)).name

    match = _VARIANT_NAME_RE.match(name)
    if match:
        base = match.group("base")
        tag = match.group("tag").lower()
        if tag == lang:
            kind = VariantKind.DEFAULT
        elif tag == "{}-{}".format(lang, _ORIGINAL_SUFFIX):
            kind = VariantKind.ORIGINAL
        elif tag == "{}-{}".format(lang, lang):
            kind = VariantKind.DUPLICATE
        else:
            kind = VariantKind.UNRECOGNIZED
        if kind is not VariantKind.UNRECOGNIZED:
            return CaptionVariant(
                source=file_name,
                name=name,
                base_name=base,
                language=lang,
                kind=kind,
            )

    return CaptionVariant(
        source=file_name,
        name=name,
        base_name=name,
        language="",
        kind=VariantKind.UNRECOGNIZED,
    )


def collapse_variants(
    file_list: Iterable[Any],
    language: Optional[str] = None,
) -> VariantPlan:
    """Decide which language-variant caption files to keep and delete.

    WHY: Downstream stages expect one canonical caption file per video.
    The authored "orig" track beats the default track, and the
    "<lang>-<lang>" mirror never adds anything.

    HOW: Classify every name, group recognized variants by base name,
    then apply the drop rules inside each group of two or more files.

    RULES:
    - DUPLICATE in a multi-file group → delete
    - DEFAULT in a group that also has ORIGINAL → delete
    - Single-file groups and UNRECOGNIZED files → keep
    - keep/delete preserve input order and the caller's item types

    Args:
        file_list: File names or paths describing candidate caption files.
        language: Caption language code (default: configured language).

    Returns:
        VariantPlan with the items to keep and to delete.
    """
    variants = [classify_variant(item, language) for item in file_list]

    groups: Dict[str, List[int]] = {}
    for pos, variant in enumerate(variants):
        if variant.kind is VariantKind.UNRECOGNIZED:
            continue
        groups.setdefault(variant.base_name, []).append(pos)

    dropped: Set[int] = set()
    for base_name, positions in groups.items():
        if len(positions) <= 1:
            continue
        kinds = {variants[p].kind for p in positions}
        has_original = VariantKind.ORIGINAL in kinds
        for pos in positions:
            kind = variants[pos].kind
            if kind is VariantKind.DUPLICATE:
                dropped.add(pos)
                logger.info("Dropping %s (duplicate of default track)", variants[pos].name)
            elif kind is VariantKind.DEFAULT and has_original:
                dropped.add(pos)
                logger.info("Dropping %s (keeping original track for %s)",
                            variants[pos].name, base_name)

    plan = VariantPlan()
    for pos, variant in enumerate(variants):
        if pos in dropped:
            plan.delete.append(variant.source)
        else:
            plan.keep.append(variant.source)
    return plan


# =============================================================================
# Rolling-caption dedupe
# =============================================================================


def _is_blank(line: str) -> bool:
    return not line.strip()


def _trim_body(body: List[str]) -> List[str]:
    """Cut a block body where an orphaned block (number, no timing) begins."""
    for pos, line in enumerate(body):
        if _is_blank(line) and pos + 1 < len(body) and body[pos + 1].strip().isdigit():
            return body[:pos]
    return body


def split_raw_blocks(caption_text: str) -> List[RawCueBlock]:
    """Split raw SubRip text into RawCueBlock records.

    WHY: Rolling captions cannot be split on blank lines alone; some
    generators put whitespace-only lines inside a cue. The timing arrow
    is the one reliable anchor.

    HOW: Every line containing "-->" opens a block. The line directly
    above it is the block's index marker. The body runs until the
    next block's index line, or up to the next timing line itself when
    no bare number precedes it. It is cut early at a blank line followed
    by a bare number (a block that lost its timing line).

    RULES:
    - CRLF and CR line endings are normalized, a leading BOM is dropped
    - Lines before the first timing line are ignored
    - text_lines keeps blank lines; the dedupe step filters them

    Args:
        caption_text: Full contents of a raw caption file.

    Returns:
        Raw blocks in file order.
    """
    if not caption_text:
        return []

    text = caption_text.lstrip("\ufeff")
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    timing_rows = [row for row, line in enumerate(lines) if "-->" in line]

    blocks: List[RawCueBlock] = []
    for k, row in enumerate(timing_rows):
        marker = lines[row - 1].strip() if row > 0 else ""
        if k + 1 < len(timing_rows):
            stop = timing_rows[k + 1]
            if lines[stop - 1].strip().isdigit():
                stop -= 1
        else:
            stop = len(lines)
        body = lines[row + 1:max(stop, row + 1)]
        blocks.append(RawCueBlock(
            index_marker=marker,
            timing_line=lines[row].strip(),
            text_lines=_trim_body(body),
        ))
    return blocks


def dedupe_cue_text(raw_blocks: Sequence[RawCueBlock]) -> List[CleanedCue]:
    """Reduce rolling caption blocks to one new line of text per cue.

    WHY: In rolling auto-captions, block k shows block k-1's line on top
    and the newly spoken words below it. Keeping only the last line, and
    dropping blocks whose last line merely repeats the previous cue,
    leaves each spoken phrase exactly once.

    HOW: For each block: validate index marker and timing line, take the
    last non-blank text line, compare with the last kept text, keep or
    drop. Survivors are numbered from 1.

    RULES:
    - Non-numeric or missing index marker → skip
    - Timing line without two timestamps → skip
    - No non-blank text line → skip
    - Same trimmed text as the previous kept cue → skip
    - Timing line of kept cues is preserved untouched

    Args:
        raw_blocks: Blocks from split_raw_blocks() (or built by hand).

    Returns:
        Cleaned cues, re-indexed from 1.
    """
    cleaned: List[CleanedCue] = []
    previous_text: Optional[str] = None

    for block in raw_blocks:
        if not block.index_marker.strip().isdigit():
            logger.debug("Skipping block with index marker %r", block.index_marker)
            continue
        if parse_timing_line(block.timing_line) is None:
            logger.debug("Skipping block %s: bad timing line %r",
                         block.index_marker, block.timing_line)
            continue

        text = next(
            (line.strip() for line in reversed(block.text_lines) if not _is_blank(line)),
            None,
        )
        if text is None:
            logger.debug("Skipping block %s: no text", block.index_marker)
            continue
        if text == previous_text:
            continue

        cleaned.append(CleanedCue(
            index=len(cleaned) + 1,
            timing_line=block.timing_line,
            text=text,
        ))
        previous_text = text

    return cleaned


def render_cleaned(cues: Sequence[CleanedCue]) -> str:
    """Render cleaned cues as four-line SubRip blocks."""
    lines: List[str] = []
    for cue in cues:
        lines.append(str(cue.index))
        lines.append(cue.timing_line)
        lines.append(cue.text)
        lines.append("")
    return "\n".join(lines)


def clean_caption_text(caption_text: str) -> str:
    """Split, dedupe and re-render a raw caption file in one call.

    Returns an empty string when nothing survives.
    """
    return render_cleaned(dedupe_cue_text(split_raw_blocks(caption_text)))
