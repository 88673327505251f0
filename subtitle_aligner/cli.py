"""Command-line interface for the Subtitle Aligner.

WHY: The core is pure: it only decides what to keep, delete or write.
Something still has to read caption files, delete redundant variants,
hand cues to the grouping service and save the aligned output. The CLI
is that storage layer, behind three sub-commands.

HOW: argparse with sub-commands:
  clean     collapse variant files in a download folder and rewrite
            every kept caption with rolling duplicates removed
  segments  write the grouping-service request JSON for a caption file
  align     parse a caption file, align a grouping response against it,
            and save the selected formatter outputs
Status messages go to stderr; data written to stdout stays pipeable.

RULES:
- Exit codes: 0 = success, 1 = error
- Status output goes to stderr (not stdout)
- Output naming: {stem}{suffix}, numeric suffix for conflicts
  (-aligned-2.srt)
- clean --dry-run reports the plan without touching any file
- Python 3.9+ compatible, no match/case
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from subtitle_aligner.config import (
    CAPTION_EXTENSION,
    DEFAULT_CAPTION_LANGUAGE,
    configure_logging,
)
from subtitle_aligner.core.aligner import align, parse
from subtitle_aligner.core.cleaner import clean_caption_text, collapse_variants
from subtitle_aligner.core.grouping import GroupingResponseError, parse_grouping_response
from subtitle_aligner.core.ir import AlignedTranscript
from subtitle_aligner.formatters import FORMATTERS
from subtitle_aligner.formatters.base import FormatterOutput
from subtitle_aligner.formatters.grouping_request import GroupingRequestFormatter

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Pick a free output path for one formatter output.

    WHY: Alignment is usually re-run after the grouping response has
    been edited by hand. The earlier aligned file must survive.

    HOW: Try {stem}{suffix}. While that name is taken, number the
    suffix before its extension, starting at 2.

    RULES:
    - video.srt + "-aligned.srt" → video-aligned.srt
    - then video-aligned-2.srt, video-aligned-3.srt, ...

    Args:
        stem: Caption file name without extension.
        suffix: FormatterOutput.suffix, e.g. "-aligned.srt".
        output_dir: Directory the file will be written to.

    Returns:
        A path that does not exist yet.
    """
    candidate = output_dir / (stem + suffix)
    suffix_path = Path(suffix)
    label, extension = suffix_path.stem, suffix_path.suffix

    counter = 2
    while candidate.exists():
        candidate = output_dir / "{}{}-{}{}".format(stem, label, counter, extension)
        counter += 1
    return candidate


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output as UTF-8 text and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------------


def _run_clean(args: argparse.Namespace) -> None:
    """Collapse variant caption files and strip rolling duplicates.

    WHY: After a download the folder typically holds "<id>.en-orig.srt",
    "<id>.en.srt" and "<id>.en-en.srt". Only one should survive, and its
    rolling captions must be reduced to one line per spoken phrase.

    HOW: Lists the directory's caption files, applies the
    collapse_variants() plan (deleting dropped files), then rewrites
    each kept file with clean_caption_text().

    RULES:
    - Only files with the caption extension are considered
    - --dry-run prints the plan and the cue counts, writes nothing
    - A kept file whose text is unchanged is not rewritten
    """
    directory = Path(args.directory).resolve()
    if not directory.is_dir():
        _fail("Directory not found: {}".format(directory))

    caption_files = sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() == CAPTION_EXTENSION
    )
    if not caption_files:
        _status("No {} files in {}".format(CAPTION_EXTENSION, directory))
        return

    plan = collapse_variants(caption_files, language=args.language)

    for path in plan.delete:
        if args.dry_run:
            _status("Would delete: {}".format(path.name))
        else:
            path.unlink()
            _status("Deleted: {}".format(path.name))

    for path in plan.keep:
        raw = _read_text(path)
        cleaned = clean_caption_text(raw)
        count = len(parse(cleaned))
        if args.dry_run:
            _status("Would clean: {} ({} entries)".format(path.name, count))
            continue
        if cleaned != raw:
            path.write_text(cleaned, encoding="utf-8")
        _status("Cleaned {}: {} entries".format(path.name, count))


def _run_segments(args: argparse.Namespace) -> None:
    """Write the grouping-service request JSON for one caption file."""
    input_path = Path(args.caption_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    cues = parse(_read_text(input_path))
    if not cues:
        _status("Warning: no cues found in {}".format(input_path.name))

    transcript = AlignedTranscript(cues=cues, sentences=[], source_filename=input_path.name)
    output = GroupingRequestFormatter().format(transcript)[0]

    if args.output:
        out_path = Path(args.output)
        out_path.write_text(output.content, encoding="utf-8")
        _status("Wrote {} segments to {}".format(len(cues), out_path))
    else:
        sys.stdout.write(output.content)


def _run_align(args: argparse.Namespace) -> None:
    """Align a grouping response against a caption file and save outputs.

    RULES:
    - --clean runs the rolling-caption cleaner before parsing
    - Unknown format keys are rejected before any work is done
    - A grouping file holding no sentence list is an error (exit 1)
    """
    input_path = Path(args.caption_file).resolve()
    grouping_path = Path(args.grouping_file).resolve()
    for path in (input_path, grouping_path):
        if not path.is_file():
            _fail("File not found: {}".format(path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
        for key in format_keys:
            if key not in FORMATTERS:
                _fail("Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS.keys()))
                ))
    else:
        format_keys = list(FORMATTERS.keys())

    caption_text = _read_text(input_path)
    if args.clean:
        caption_text = clean_caption_text(caption_text)
    cues = parse(caption_text)
    _status("Parsed {} cues from {}".format(len(cues), input_path.name))

    try:
        proposals = parse_grouping_response(_read_text(grouping_path))
    except GroupingResponseError as e:
        _fail(str(e))
    _status("Loaded {} sentence proposals".format(len(proposals)))

    sentences = align(cues, proposals)
    untimed = sum(1 for s in sentences if not s.is_timed)
    if untimed:
        _status("  {} sentence(s) have no timing source".format(untimed))

    transcript = AlignedTranscript(
        cues=cues,
        sentences=sentences,
        source_filename=input_path.name,
    )

    written: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(transcript):
            path = _save_output(output, input_path.stem, output_dir)
            written.append(path)
            _status("  {}: {}".format(formatter.name, path.name))

    _status("Wrote {} file(s) to {}".format(len(written), output_dir))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable. Tests can inspect the parser without touching files.
    """
    parser = argparse.ArgumentParser(
        prog="subtitle_aligner",
        description="Clean downloaded captions and re-time sentence groupings.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: SUBTITLE_ALIGNER_LOG_LEVEL or WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    clean = subparsers.add_parser(
        "clean",
        help="Collapse variant caption files and remove rolling duplicates.",
    )
    clean.add_argument("directory", help="Folder holding the downloaded caption files.")
    clean.add_argument(
        "--language",
        default=DEFAULT_CAPTION_LANGUAGE,
        help="Caption language code of the variant files (default: %(default)s).",
    )
    clean.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be deleted and cleaned without changing files.",
    )
    clean.set_defaults(func=_run_clean)

    segments = subparsers.add_parser(
        "segments",
        help="Write the grouping request JSON for a caption file.",
    )
    segments.add_argument("caption_file", help="Path to a cleaned .srt file.")
    segments.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write JSON to this file instead of stdout.",
    )
    segments.set_defaults(func=_run_segments)

    align_cmd = subparsers.add_parser(
        "align",
        help="Time a grouping response against a caption file.",
    )
    align_cmd.add_argument("caption_file", help="Path to the .srt file the grouping was made from.")
    align_cmd.add_argument("grouping_file", help="Grouping service response (JSON or raw text).")
    align_cmd.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    align_cmd.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as caption file).",
    )
    align_cmd.add_argument(
        "--clean",
        action="store_true",
        help="Remove rolling-caption duplicates before parsing.",
    )
    align_cmd.set_defaults(func=_run_align)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        args.func(args)
    except OSError as e:
        logger.debug("File operation failed", exc_info=True)
        _fail(str(e))


if __name__ == "__main__":
    main()
