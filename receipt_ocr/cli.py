"""Command-line interface for receipt pre-fill and CSV export.

Provides subcommands for extracting fields from a single receipt and for
processing a folder of receipts into a CSV file. Plain-text transcripts
(``.txt``) skip OCR and go straight to the field extractor.
"""

import argparse
import csv
import json
import sys
from pathlib import Path

from receipt_ocr.forms.prefill import PrefillResult, ReceiptPrefillService
from receipt_ocr.ocr.receipt_reader import SUPPORTED_EXTENSIONS
from receipt_ocr.utils.config import load_config
from receipt_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_TEXT_EXTENSION = ".txt"
_CSV_COLUMNS = [
    "filename",
    "status",
    "amount",
    "date",
    "description",
    "ocr_confidence",
    "notice",
]


def _find_receipts(input_dir: Path) -> list[Path]:
    """Find receipt images and text transcripts in a directory.

    Args:
        input_dir: Directory to scan.

    Returns:
        Sorted list of receipt file paths.
    """
    suffixes = {*SUPPORTED_EXTENSIONS, _TEXT_EXTENSION}
    return sorted(
        path
        for path in input_dir.iterdir()
        if path.is_file() and path.suffix.lower() in suffixes
    )


def _prefill_file(
    file_path: Path, service: ReceiptPrefillService, from_text: bool = False
) -> PrefillResult:
    """Pre-fill from an image, or from a transcript without running OCR.

    A transcript that cannot be read or decoded yields a failed result,
    the same as an image that OCR could not recognize.
    """
    if not from_text and file_path.suffix.lower() != _TEXT_EXTENSION:
        return service.prefill(file_path, file_path.name)

    try:
        text = file_path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as exc:
        logger.warning("Could not read transcript %s: %s", file_path.name, exc)
        return PrefillResult(
            success=False, notice=service.config.prefill.failure_notice
        )
    return service.prefill_text(text)


def process_folder(
    input_dir: Path,
    output_csv: Path,
    verbose: bool = False,
) -> dict[str, int]:
    """Pre-fill every receipt in a folder and export the fields to CSV.

    Args:
        input_dir: Directory containing receipt images or transcripts.
        output_csv: Path for the output CSV file.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    config = load_config()
    service = ReceiptPrefillService(config)

    files = _find_receipts(input_dir)
    if not files:
        logger.warning("No receipts found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d receipts to process", len(files))

    rows: list[dict[str, object]] = []
    successful = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        result = _prefill_file(file_path, service)
        fields = result.extraction.to_dict()
        rows.append(
            {
                "filename": file_path.name,
                "status": "success" if result.success else "failed",
                **fields,
                "ocr_confidence": round(result.ocr_confidence, 3),
                "notice": result.notice,
            }
        )
        if result.success:
            successful += 1

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {
        "total": len(files),
        "successful": successful,
        "failed": len(files) - successful,
    }
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write pre-fill rows to a CSV file.

    Args:
        rows: One dictionary per receipt.
        output_path: Path for the output CSV file.
    """
    if not rows:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout."""
    print(f"\n{'=' * 50}")
    print("Receipt Batch Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def extract_single(
    file_path: Path,
    from_text: bool = False,
    show_candidates: bool = False,
) -> dict[str, object]:
    """Pre-fill a single receipt and return the result as a dict.

    Args:
        file_path: Receipt image, or a text transcript.
        from_text: Treat the file as an OCR transcript even without a
            ``.txt`` suffix.
        show_candidates: Include the ranked amount candidates.

    Returns:
        Dictionary with filename, success flag, notice, fields, and raw text.
    """
    config = load_config()
    service = ReceiptPrefillService(config)

    result = _prefill_file(file_path, service, from_text)

    output: dict[str, object] = {
        "filename": file_path.name,
        "success": result.success,
        "notice": result.notice,
        "fields": result.extraction.to_dict(),
        "raw_text": result.raw_text,
    }
    if show_candidates:
        output["candidates"] = [
            {
                "value": candidate.value_text,
                "score": candidate.score,
                "position": candidate.position,
            }
            for candidate in service.extractor.amount_candidates(result.raw_text)
        ]
    return output


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Receipt OCR pre-fill tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of receipts")
    batch_parser.add_argument("input_dir", type=Path, help="Directory with receipts")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("receipts.csv"),
        help="Output CSV file (default: receipts.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    single_parser = subparsers.add_parser("extract", help="Process a single receipt")
    single_parser.add_argument("file", type=Path, help="Receipt image or transcript")
    single_parser.add_argument(
        "--text", action="store_true", help="Read the file as an OCR transcript"
    )
    single_parser.add_argument(
        "--candidates", action="store_true", help="Show ranked amount candidates"
    )
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    args = parser.parse_args(argv)

    setup_logging(load_config().log_level)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.verbose)
    elif args.command == "extract":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        result = extract_single(args.file, args.text, args.candidates)
        output_str = json.dumps(result, indent=2, ensure_ascii=False)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str, encoding="utf-8")
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
