import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from lexdiff import __version__
from lexdiff.export import contract_title, filename_base, wrap_word_document
from lexdiff.markup import apply_highlights, render_highlight_markup
from lexdiff.models import AlignmentConfig, ChangeKind
from lexdiff.redline.composer import compose_critic_markup, compose_document_view, compose_text_view
from lexdiff.render import to_markup, to_rendered

_PREFIXES = {
    ChangeKind.UNCHANGED: "  ",
    ChangeKind.ADDED: "+ ",
    ChangeKind.REMOVED: "- ",
}


def _configure_logging(verbose: bool):
    # Payload goes to stdout; logs must stay on stderr.
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=level, force=True)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _read_text(path: Path) -> str:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _build_config(args: argparse.Namespace) -> AlignmentConfig:
    try:
        return AlignmentConfig(line_window=args.line_window, block_window=args.block_window)
    except ValueError as e:
        print(f"Error: invalid window size: {e}", file=sys.stderr)
        sys.exit(1)


def _excerpt_limit(args: argparse.Namespace) -> int:
    try:
        return AlignmentConfig(excerpt_limit=args.limit).excerpt_limit
    except ValueError as e:
        print(f"Error: invalid excerpt limit: {e}", file=sys.stderr)
        sys.exit(1)


def _load_excerpts(path: Path) -> List[str]:
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        print(f"Error parsing JSON excerpts: {e}", file=sys.stderr)
        sys.exit(1)
    if isinstance(data, dict):
        data = data.get("highlights", [])
    if not isinstance(data, list):
        print("Error: excerpts file must hold a JSON list of strings", file=sys.stderr)
        sys.exit(1)
    return [str(item) for item in data]


def handle_diff(args: argparse.Namespace) -> int:
    old_doc = _read_text(args.original)
    new_doc = _read_text(args.modified)
    config = _build_config(args)

    records = compose_text_view(old_doc, new_doc, config)
    changed = sum(1 for r in records if r.kind is not ChangeKind.UNCHANGED)

    if args.format == "text":
        output = "\n".join(_PREFIXES[r.kind] + r.value for r in records)
    elif args.format == "critic":
        output = compose_critic_markup(old_doc, new_doc, config)
    else:
        output = compose_document_view(old_doc, new_doc, config)

    if output:
        print(output)
    print(f"Found {changed} changed lines.", file=sys.stderr)
    return 1 if changed else 0


def handle_render(args: argparse.Namespace) -> int:
    text = _read_text(args.input)
    print(to_rendered(text) if args.to == "html" else to_markup(text))
    return 0


def handle_highlight(args: argparse.Namespace) -> int:
    limit = _excerpt_limit(args)
    doc = _read_text(args.input)
    excerpts = _load_excerpts(args.excerpts)
    spans = apply_highlights(doc, excerpts, limit=limit)

    sys.stdout.write(render_highlight_markup(spans))
    matched = sum(1 for s in spans if s.is_highlight)
    print(f"\nStats: {len(excerpts)} excerpts, {matched} matches.", file=sys.stderr)
    return 0


def handle_export(args: argparse.Namespace) -> int:
    new_doc = _read_text(args.modified)
    if args.clean:
        fragment = to_rendered(new_doc)
        suffix = "Final"
    else:
        if args.original is None:
            print("Error: a redlined export needs the original file (or pass --clean)", file=sys.stderr)
            sys.exit(1)
        old_doc = _read_text(args.original)
        fragment = compose_document_view(old_doc, new_doc, _build_config(args))
        suffix = "Redlined"

    title = contract_title(new_doc)
    output_path = args.output
    if not output_path:
        output_path = args.modified.with_name(f"{filename_base(title)}_{suffix}.doc")

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(wrap_word_document(fragment, title=title))

    print(f"✅ Saved to {output_path}", file=sys.stderr)
    return 0


def _add_window_options(parser: argparse.ArgumentParser):
    defaults = AlignmentConfig()
    parser.add_argument(
        "--line-window",
        type=int,
        default=defaults.line_window,
        help=f"Lookahead window for line alignment (default: {defaults.line_window})",
    )
    parser.add_argument(
        "--block-window",
        type=int,
        default=defaults.block_window,
        help=f"Lookahead window for block alignment (default: {defaults.block_window})",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lexdiff", description="lexdiff: Markdown contract redlining")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Emit debug logs on stderr")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_diff = subparsers.add_parser("diff", help="Compare two Markdown documents")
    p_diff.add_argument("original", type=Path, help="Original Markdown file")
    p_diff.add_argument("modified", type=Path, help="Modified Markdown file")
    p_diff.add_argument(
        "--format",
        choices=("text", "critic", "html"),
        default="text",
        help="text: prefixed lines; critic: CriticMarkup; html: redline fragment",
    )
    _add_window_options(p_diff)
    p_diff.set_defaults(func=handle_diff)

    p_render = subparsers.add_parser("render", help="Convert between Markdown and HTML")
    p_render.add_argument("input", type=Path, help="Input file")
    p_render.add_argument("--to", choices=("html", "markdown"), default="html", help="Target format")
    p_render.set_defaults(func=handle_render)

    p_highlight = subparsers.add_parser("highlight", help="Mark analysis excerpts with {==...==}")
    p_highlight.add_argument("input", type=Path, help="Markdown document")
    p_highlight.add_argument("excerpts", type=Path, help="JSON list of excerpts (or {'highlights': [...]})")
    p_highlight.add_argument(
        "--limit",
        type=int,
        default=AlignmentConfig().excerpt_limit,
        help="Characters of each excerpt used for matching",
    )
    p_highlight.set_defaults(func=handle_highlight)

    p_export = subparsers.add_parser("export", help="Export a Word-compatible .doc (redlined or clean)")
    p_export.add_argument("original", type=Path, nargs="?", help="Base Markdown file (not needed with --clean)")
    p_export.add_argument("modified", type=Path, help="Current Markdown file")
    p_export.add_argument("-o", "--output", type=Path, help="Output .doc path")
    p_export.add_argument("--clean", action="store_true", help="Export the final copy without redline markup")
    _add_window_options(p_export)
    p_export.set_defaults(func=handle_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
