"""
mdindex - Command line interface

Convert a Markdown file into a tree index and print or save it as JSON.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from .core.config import settings
from .observability.logging import setup_logging


async def run_convert(args: argparse.Namespace) -> int:
    """Convert one Markdown file and emit the result."""
    from .pageindex import md_file_to_tree, format_toc

    path = Path(args.file)
    if not path.exists():
        print(f"❌ File not found: {args.file}", file=sys.stderr)
        return 1

    llm = None
    if args.summary or args.description:
        from .llm.groq_client import GroqClient
        llm = GroqClient().as_llm_function(model=args.model)

    result = await md_file_to_tree(
        path,
        llm=llm,
        if_thinning=args.thinning,
        thinning_threshold=args.thinning_threshold,
        summary_token_threshold=args.summary_threshold,
        if_add_node_summary=args.summary,
        if_add_doc_description=args.description,
        if_add_node_text=args.text,
        if_add_node_id=not args.no_node_id,
    )

    if args.toc:
        output = format_toc(result.structure)
    else:
        output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"✅ Wrote {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Markdown tree index")
    parser.add_argument(
        "--log-level", type=str.upper, default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL / DEBUG from the environment",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    convert_parser = subparsers.add_parser("convert", help="Convert a Markdown file")
    convert_parser.add_argument("file", type=str, help="Path to Markdown file")
    convert_parser.add_argument("--thinning", action="store_true", help="Merge small sections")
    convert_parser.add_argument(
        "--thinning-threshold", type=int, default=settings.thinning_threshold,
        help="Token threshold for thinning",
    )
    convert_parser.add_argument(
        "--summary-threshold", type=int, default=settings.summary_token_threshold,
        help="Token threshold above which summaries are generated",
    )
    convert_parser.add_argument("--summary", action="store_true", help="Add node summaries")
    convert_parser.add_argument(
        "--description", action="store_true",
        help="Add a document description (implies --summary)",
    )
    convert_parser.add_argument("--text", action="store_true", help="Keep node text")
    convert_parser.add_argument("--no-node-id", action="store_true", help="Omit node ids")
    convert_parser.add_argument("--model", type=str, default=None, help="LLM model")
    convert_parser.add_argument("--output", "-o", type=str, default=None, help="Output path")
    convert_parser.add_argument("--toc", action="store_true", help="Print titles only")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "convert":
        if args.description:
            args.summary = True
        return asyncio.run(run_convert(args))

    parser.print_help()
    return 0
