"""Command-line interface for Lyrics Timeline.

WHY: A quick way to inspect a synced lyrics file from the terminal: see the
parsed lines, dump the structured view, and check what the timeline would
show at a given zoom or selection.

HOW: argparse accepts a TTML file, formatter selection, an optional
pass-through score, and an optional output directory. The file is parsed
into a LyricsDocument; each formatter's output is printed to stdout or saved
next to the chosen directory. --zoom/--select drive a TimelineEngine and
report gridlines and the selected line on stderr.

RULES:
- Positional argument: input TTML file path
- --formats: comma-separated formatter keys (default: all registered)
- Without --output-dir, formatted output goes to stdout
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-parsed-2.json)
- Status output goes to stderr (not stdout)
- Missing, unreadable or non-UTF-8 input file, or unknown format key
  → message on stderr, exit 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from lyrics_timeline.config import BUTTON_ZOOM_FACTOR, LOG_LEVEL
from lyrics_timeline.core.ir import LyricsDocument
from lyrics_timeline.core.parser import build_document
from lyrics_timeline.core.timeline import TimelineEngine
from lyrics_timeline.core.timing import format_time
from lyrics_timeline.formatters import FORMATTERS
from lyrics_timeline.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. song-parsed.json)
    - Conflict: insert a counter before the extension (song-parsed-2.json)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _resolve_formats(raw: Optional[str]) -> Optional[List[str]]:
    """Split --formats into keys; None when any key is unknown."""
    if raw is None:
        return list(FORMATTERS.keys())
    keys = [k.strip() for k in raw.split(",") if k.strip()]
    unknown = [k for k in keys if k not in FORMATTERS]
    if unknown:
        _status("Error: unknown format(s): {}. Available: {}".format(
            ", ".join(unknown), ", ".join(sorted(FORMATTERS.keys()))
        ))
        return None
    return keys


def _report_timeline(document: LyricsDocument, zoom: Optional[float], select: Optional[int]) -> None:
    """Print what the timeline shows for the requested zoom/selection."""
    engine = TimelineEngine(document.lines)
    if zoom is not None and engine.total_duration > 0:
        while engine.can_zoom_in and engine.zoom * BUTTON_ZOOM_FACTOR <= zoom:
            engine.zoom_in()
    if select is not None:
        engine.select_line(select)

    _status("Timeline: {} lines, {} total, zoom {:.1f}x".format(
        len(document.lines), format_time(engine.total_duration), engine.zoom
    ))
    labels = [marker.label for marker in engine.time_markers()]
    _status("  Gridlines: {}".format(", ".join(labels) if labels else "(none)"))

    if engine.selected_line is not None:
        line = engine.lines[engine.selected_line]
        _status("  Selected line {}: {} - {} {}".format(
            engine.selected_line,
            format_time(line.begin),
            format_time(line.end),
            line.display_text,
        ))
        for word in line.words:
            _status("    {} {}{}".format(
                format_time(word.begin), word.text, " (bg)" if word.is_background else ""
            ))


def run(args: argparse.Namespace) -> int:
    """Run the CLI for parsed arguments; returns the process exit code."""
    input_path = Path(args.input_file)
    if not input_path.is_file():
        _status("Error: file not found: {}".format(input_path))
        return 1

    format_keys = _resolve_formats(args.formats)
    if format_keys is None:
        return 1

    try:
        markup = input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _status("Error: could not read {}: {}".format(input_path, exc))
        return 1
    document = build_document(markup, source_filename=input_path.name, score=args.score)
    _status("Parsed {} lines from {}".format(len(document.lines), input_path.name))
    if not document.lines:
        logger.info("No lines found in %s", input_path)

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(document):
            if output_dir is None:
                sys.stdout.write(output.content)
                if not output.content.endswith("\n"):
                    sys.stdout.write("\n")
            else:
                saved = _save_output(output, input_path.stem, output_dir)
                _status("  Saved: {}".format(saved))

    if args.zoom is not None or args.select is not None:
        _report_timeline(document, args.zoom, args.select)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lyrics_timeline",
        description="Parse syllable-synced TTML lyrics and inspect their timeline.",
    )
    parser.add_argument(
        "input_file",
        help="Path to the TTML lyrics file.",
    )
    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    parser.add_argument(
        "--score",
        type=float,
        default=None,
        help="Provider match score to pass through into the parsed view.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: print to stdout).",
    )
    parser.add_argument(
        "--zoom",
        type=float,
        default=None,
        help="Report timeline gridlines at (up to) this zoom level.",
    )
    parser.add_argument(
        "--select",
        type=int,
        default=None,
        help="Report the word timing of this line index.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m lyrics_timeline`` and the console script.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
