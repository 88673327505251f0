"""Subtitle Aligner: caption cleanup and sentence re-timing hub.

WHY: Downloaded YouTube captions are noisy. Auto-generated "rolling"
captions repeat every line two or three times, and the downloader often
leaves several language-variant files for the same video. Once an
external text service has regrouped the cues into full sentences, those
sentences still need real start/end timestamps before they can be voiced
or re-exported. This package is the pure pipeline between those steps.

HOW: Two stages share one data model (core IR):
  cleaner: collapse variant files, dedupe rolling cue text
  aligner: parse cues, align proposed sentences, serialize SubRip
Formatters turn an aligned transcript into output files; the CLI plays
the storage role and does all file I/O.

RULES:
- Core functions never touch the filesystem
- Core functions never raise on bad caption input; they degrade
- The IR is the stable contract between stages and formatters
"""

__version__ = "0.1.0"
