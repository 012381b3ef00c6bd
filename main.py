#!/usr/bin/env python3
"""
Invoice Desk - Main Entry Point.

Command-line access to invoice field extraction and dashboard
aggregation.

Usage:
    Command Line:
        python main.py extract szamla.txt
        python main.py extract ./ocr_texts/ --ai --excel outputs/szamlak.xlsx
        python main.py dashboard invoices.json --now 2024-03-20T12:00:00

    Python:
        from main import run_extraction
        results = run_extraction("szamla.txt")
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import ConfigurationManager, get_config
from invoice_desk.utils.exceptions import InputError, InvoiceDeskError
from invoice_desk.utils.helpers import list_text_files, read_text_file
from invoice_desk.utils.logger import get_logger, setup_logger_from_config


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Invoice Desk - invoice field extraction and dashboard summaries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Extract one invoice:
        python main.py extract szamla.txt

    Extract a directory with the AI pass and write a ledger:
        python main.py extract ./ocr_texts/ --ai --excel outputs/szamlak.xlsx

    Dashboard summary:
        python main.py dashboard invoices.json --now 2024-03-20T12:00:00
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract invoice fields from OCR text files"
    )
    extract_parser.add_argument(
        "input",
        type=str,
        help="OCR text file or directory of .txt files"
    )
    ai_group = extract_parser.add_mutually_exclusive_group()
    ai_group.add_argument(
        "--ai",
        dest="use_ai",
        action="store_true",
        default=None,
        help="Run the AI re-extraction pass"
    )
    ai_group.add_argument(
        "--no-ai",
        dest="use_ai",
        action="store_false",
        help="Skip the AI re-extraction pass"
    )
    extract_parser.add_argument(
        "--excel", "-x",
        type=str,
        default=None,
        help="Write an Excel ledger to this path"
    )

    dashboard_parser = subparsers.add_parser(
        "dashboard",
        help="Summarize stored invoice records"
    )
    dashboard_parser.add_argument(
        "records",
        type=str,
        help="JSON file with a list of invoice rows"
    )
    dashboard_parser.add_argument(
        "--now",
        type=str,
        default=None,
        help="Reference time in ISO format (default: current time)"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)
    logger = setup_logger_from_config("DEBUG" if args.debug else None)

    logger.debug(f"Version: {config.get('project.version', '1.0.0')}")
    return config


def run_extraction(
    input_path: str,
    use_ai: Optional[bool] = None,
    excel_path: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Run the extraction pipeline over one file or a directory.

    Args:
        input_path: OCR text file or directory of .txt files.
        use_ai: Override the configured AI pass setting.
        excel_path: If given, also write an Excel ledger there.

    Returns:
        List of processed invoice dictionaries.
    """
    from invoice_desk.pipeline import InvoicePipeline

    logger = get_logger(__name__)
    files = list_text_files(input_path)
    if not files:
        logger.warning(f"No text files found in: {input_path}")
        return []

    pipeline = InvoicePipeline(use_ai=use_ai)
    processed = []

    for file_path in files:
        text = read_text_file(file_path)
        processed.append(pipeline.process(text, source=file_path.name))

    if excel_path:
        from invoice_desk.output_handler import LedgerExporter

        excel = Path(excel_path)
        LedgerExporter().export(processed, filename=excel.name, output_dir=str(excel.parent))

    return [invoice.to_dict() for invoice in processed]


def run_dashboard(records_path: str, now: Optional[str] = None) -> Dict[str, Any]:
    """
    Aggregate stored invoice rows from a JSON file.

    Args:
        records_path: JSON file containing a list of rows.
        now: Reference time as ISO string.

    Returns:
        Aggregate as a dictionary.
    """
    from dateutil import parser as date_parser

    from invoice_desk.dashboard import InvoiceRecord, aggregate

    rows = json.loads(read_text_file(records_path))
    if not isinstance(rows, list):
        raise InputError("Records file must contain a JSON list", {"path": records_path})

    records = [InvoiceRecord.from_dict(row) for row in rows]
    reference = date_parser.isoparse(now) if now else datetime.now()

    result = aggregate(
        records,
        reference,
        recent_limit=get_config("dashboard.recent_limit", 5)
    )
    return result.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        args = parse_arguments(argv)
        initialize_system(args)

        if args.command == "extract":
            output = run_extraction(args.input, use_ai=args.use_ai, excel_path=args.excel)
        else:
            output = run_dashboard(args.records, now=args.now)

        print(json.dumps(output, indent=2, ensure_ascii=False))
        return 0

    except (InvoiceDeskError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
