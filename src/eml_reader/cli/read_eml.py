"""
Command-line interface for reading .eml files.

Usage:
    # Extracted result of a single file
    eml-reader input.eml

    # Raw part tree instead of the extracted result
    eml-reader input.eml --tree

    # Headers only
    eml-reader input.eml --headers-only

    # Directory batch processing
    eml-reader emails/ --output results.jsonl
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from eml_reader.charset import load_eml_bytes
from eml_reader.errors import EmlError
from eml_reader.logging_config import setup_logging
from eml_reader.models.options import EmlOptions
from eml_reader.reader import parse, read

logger = structlog.get_logger(__name__)


# ============================================================================
# CLI FUNCTIONS
# ============================================================================

def process_single_file(eml_path: Path, options: EmlOptions, tree: bool = False) -> dict:
    """
    Parse or read a single .eml file.

    Args:
        eml_path: Path to .eml file
        options: Per-call options
        tree: Return the part tree instead of the extracted result

    Returns:
        JSON-compatible dict

    Raises:
        EmlError: If the file cannot be parsed or read
    """
    if options.verbose:
        logger.info("processing_file", path=str(eml_path))

    eml_bytes = eml_path.read_bytes()
    if tree:
        # Raw bodies must stay JSON-encodable
        outcome = parse(eml_bytes.decode("utf-8", errors="replace"), options)
    else:
        outcome = read(load_eml_bytes(eml_bytes), options)
    if isinstance(outcome, EmlError):
        raise outcome

    return outcome.model_dump(mode="json", by_alias=True)


def process_directory(dir_path: Path, options: EmlOptions, tree: bool = False) -> List[dict]:
    """
    Process all .eml files in a directory.

    Files that fail are logged and skipped.

    Args:
        dir_path: Directory path
        options: Per-call options
        tree: Return part trees instead of extracted results

    Returns:
        List of results, one per successfully processed file
    """
    eml_files = sorted(dir_path.glob("**/*.eml"))

    if not eml_files:
        logger.warning("no_eml_files_found", directory=str(dir_path))
        return []

    logger.info("processing_directory", files_count=len(eml_files))

    results = []
    errors = []

    for eml_file in eml_files:
        try:
            result = process_single_file(eml_file, options, tree=tree)
            results.append({"file": str(eml_file), "result": result})
        except EmlError as e:
            logger.error(
                "file_processing_failed",
                file=str(eml_file),
                error_type=type(e).__name__,
                error=str(e),
            )
            errors.append({"file": str(eml_file), "error": str(e)})

    logger.info(
        "directory_processing_completed",
        total=len(eml_files),
        success=len(results),
        errors=len(errors),
    )

    return results


def write_output(results: List[dict], output_path: Optional[Path], format: str = "jsonl"):
    """
    Write results to a file or stdout.

    Args:
        results: List of JSON-compatible results
        output_path: Output file path (None for stdout)
        format: Output format ("json" or "jsonl")
    """
    if not output_path:
        if format == "jsonl":
            for result in results:
                print(json.dumps(result, ensure_ascii=False))
        else:
            print(json.dumps(results, ensure_ascii=False, indent=2))
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        if format == "jsonl":
            for result in results:
                f.write(json.dumps(result, ensure_ascii=False) + "\n")
        else:
            json.dump(results, f, ensure_ascii=False, indent=2)

    logger.info("output_written", path=str(output_path), count=len(results))


# ============================================================================
# MAIN CLI
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="EML reader CLI - parse .eml files into structured JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extracted text, HTML and attachments
  %(prog)s input.eml

  # Part tree
  %(prog)s input.eml --tree

  # Process directory, save to file
  %(prog)s emails/ --output results.jsonl
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Path to .eml file or directory containing .eml files",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="Output the parsed part tree instead of the extracted result",
    )
    parser.add_argument(
        "--headers-only",
        action="store_true",
        help="Stop at the end of the root header section",
    )
    parser.add_argument(
        "--unwrap-double-base64",
        action="store_true",
        help="Decode HTML bodies that were Base64-encoded twice (heuristic)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output file path (default: stdout). Format auto-detected from extension (.json or .jsonl)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        choices=["json", "jsonl"],
        default="jsonl",
        help="Output format (default: jsonl)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose parser diagnostics",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # stdout carries the JSON results
    setup_logging(
        log_level="DEBUG" if args.verbose else None, log_json=False, stream=sys.stderr
    )

    options = EmlOptions(
        headers_only=args.headers_only,
        verbose=args.verbose,
        unwrap_double_base64=args.unwrap_double_base64,
    )

    input_path = Path(args.input)

    if not input_path.exists():
        print(f"Error: Path not found: {input_path}", file=sys.stderr)
        return 1

    try:
        if input_path.is_file():
            results = [process_single_file(input_path, options, tree=args.tree)]
        elif input_path.is_dir():
            results = process_directory(input_path, options, tree=args.tree)
        else:
            print(f"Error: Invalid input path: {input_path}", file=sys.stderr)
            return 1

        output_path = Path(args.output) if args.output else None

        # Auto-detect format from file extension
        format = args.format
        if output_path and args.format == "jsonl" and output_path.suffix == ".json":
            format = "json"

        write_output(results, output_path, format)

        if args.verbose:
            print(f"\nProcessed {len(results)} emails", file=sys.stderr)

    except EmlError as e:
        logger.error("cli_failed", error_type=type(e).__name__, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
