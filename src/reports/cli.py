"""
CLI entry point for the SQCB summary report.

Usage:
    python -m src.reports.cli
    python -m src.reports.cli --site York --search acme
    python -m src.reports.cli --input sqcb.json --now 2025-03-10T08:00:00Z --format json
    python -m src.reports.cli --category "Waiting RMA"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from src.classifiers.filters import ALL_SITES, PLANT_SITES
from src.classifiers.sqcb_classifier import SqcbClassifier
from src.config.settings import settings
from src.connectors.sqcb_api_connector import SqcbApiError
from src.reports.formatters import format_category, format_overview
from src.reports.sources import RecordSourceError, load_records_from_api, load_records_from_file
from src.utils.logger import configure_logging
from src.utils.normalization import resolve_now

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Classify SQCB records into dashboard categories',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Live data, all sites
    python -m src.reports.cli

    # Saved export, frozen evaluation time, machine-readable
    python -m src.reports.cli -i sqcb.json --now 2025-03-10T08:00:00Z -f json

    # One category table
    python -m src.reports.cli --site Thailand --category "Pending Inform"
        """,
    )
    parser.add_argument(
        '--input', '-i',
        type=Path,
        help='JSON file with SQCB records (default: fetch from the API)',
    )
    parser.add_argument(
        '--site', '-s',
        choices=[ALL_SITES, *PLANT_SITES],
        default=settings.SQCB_DEFAULT_SITE,
        help='Plant site filter (default: %(default)s)',
    )
    parser.add_argument(
        '--search',
        default='',
        help='Keep records with any field containing this text',
    )
    parser.add_argument(
        '--now',
        help='Evaluation time as ISO timestamp (default: current UTC time)',
    )
    parser.add_argument(
        '--category', '-c',
        help='Print the chart and table of one category',
    )
    parser.add_argument(
        '--format', '-f',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: %(default)s)',
    )
    parser.add_argument(
        '--log-file',
        action='store_true',
        help=f'Also write logs under {settings.LOG_DIR}',
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show debug logging',
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging('src', level='DEBUG' if args.verbose else None, log_to_file=args.log_file)

    try:
        now = resolve_now(args.now)
    except ValueError as e:
        logger.error(str(e))
        return 1

    classifier = SqcbClassifier()
    if args.category and args.category not in classifier.category_names:
        logger.error(f'Unknown category {args.category!r}; choose from: {", ".join(classifier.category_names)}')
        return 1

    if not args.input:
        missing = settings.validate_required_settings()
        if missing:
            logger.error(f'Missing required settings: {", ".join(missing)}')
            return 1

    try:
        if args.input:
            records = load_records_from_file(args.input)
        else:
            records = load_records_from_api()
    except (RecordSourceError, SqcbApiError) as e:
        logger.error(f'Failed to load records: {str(e)}')
        return 1

    result = classifier.classify(records, now=now, site=args.site, search=args.search)

    if args.format == 'json':
        if args.category:
            print(result[args.category].model_dump_json(indent=2))
        else:
            print(result.model_dump_json(indent=2))
    elif args.category:
        print(format_category(result, args.category))
    else:
        print(format_overview(result, site=args.site, search=args.search))

    return 0


if __name__ == '__main__':
    sys.exit(main())
