#!/usr/bin/env python3
"""
Interactive gross motor screening from the terminal.

This script runs one adaptive screening:
1. Load configuration and the milestone catalog (YAML)
2. Ask yes / sometimes / not yet questions chosen by the basal/ceiling search
3. Score the finished session (motor age equivalency, category scores)
4. Print the caregiver report, optionally with the history record as JSON

Usage:
    python main.py --age 14
    python main.py --birthdate 2024-03-02 --json

Non-diagnostic: results are a screening aid only.
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Dict

import yaml

from screening import (
    AssessmentSession,
    Response,
    ScreeningError,
    YamlCatalogRepository,
)
from scoring import score_session
from reporting import build_screening_report, render_text_report, to_history_record
from utils.config_loader import load_config, get_nested_config
from utils.age_utils import age_group_for_months, months_between

logger = logging.getLogger(__name__)

_ANSWER_ALIASES = {
    'y': Response.YES,
    's': Response.SOMETIMES,
    'n': Response.NOT_YET,
}


def configure_logging(config: Dict) -> None:
    """Send logs to a file and stderr so prompts on stdout stay readable."""
    level_name = get_nested_config(config, 'logging.level', default='INFO')
    log_file = get_nested_config(config, 'logging.file', default='motor_screen.log')

    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stderr)
        ]
    )


def ask(milestone, number: int) -> Response:
    """Prompt until the caregiver gives a recognisable answer."""
    print(f"\nQ{number}. {milestone.display_name}")
    if milestone.description:
        print(f"    {milestone.description}")

    while True:
        raw = input("    [y]es / [s]ometimes / [n]ot yet: ").strip().lower()
        if raw in _ANSWER_ALIASES:
            return _ANSWER_ALIASES[raw]
        try:
            return Response.parse(raw)
        except ScreeningError:
            print("    Please answer y, s or n.")


def run_screening(age_months: float, config: Dict, catalog_path: str, emit_json: bool) -> Dict:
    """
    Run one interactive screening and print the report.

    Args:
        age_months: Child's chronological age in months
        config: Configuration dictionary
        catalog_path: Path to milestone catalog YAML
        emit_json: Also print the history record as JSON

    Returns:
        History record dict
    """
    repository = YamlCatalogRepository(catalog_path)
    session = AssessmentSession.from_repository(repository, age_months, config)

    age_group = age_group_for_months(age_months, repository.load_age_groups())
    print("=" * 60)
    print("GROSS MOTOR SCREENING")
    if age_group:
        print(f"Age group: {age_group.display_name}")
    print("Answer each question about what your child does today.")
    print("=" * 60)

    while not session.is_terminal():
        milestone = session.current_milestone
        response = ask(milestone, len(session.answers) + 1)
        session.submit(response)

    result = score_session(session, config)
    report = build_screening_report(result, session.milestones, age_months, config)
    print()
    print(render_text_report(report))

    record = to_history_record(result, profile_id='cli', chronological_age_months=age_months)
    if emit_json:
        print(json.dumps(record, indent=2))

    return record


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Motor Screen - Adaptive Gross Motor Milestone Screening',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Child aged 14 months
  python main.py --age 14

  # Age from birthdate, custom catalog, print history record
  python main.py --birthdate 2024-03-02 --catalog my_catalog.yaml --json
        """
    )

    age_source = parser.add_mutually_exclusive_group(required=True)
    age_source.add_argument(
        '--age',
        type=float,
        help='Chronological age in months (0-60)'
    )
    age_source.add_argument(
        '--birthdate',
        type=date.fromisoformat,
        help='Birthdate as YYYY-MM-DD (age is computed in whole months)'
    )

    parser.add_argument(
        '--config',
        type=str,
        default='configs/screening.yaml',
        help='Path to configuration YAML file (default: configs/screening.yaml)'
    )

    parser.add_argument(
        '--catalog',
        type=str,
        default='configs/milestones.yaml',
        help='Path to milestone catalog YAML file (default: configs/milestones.yaml)'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the history record as JSON after the report'
    )

    args = parser.parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(str(config_path))
    except (ValueError, yaml.YAMLError) as e:
        print(f"Invalid config {config_path}: {e}", file=sys.stderr)
        sys.exit(1)
    configure_logging(config)

    catalog_path = Path(args.catalog)
    if not catalog_path.exists():
        logger.error(f"Catalog file not found: {catalog_path}")
        sys.exit(1)

    age_months = args.age
    if args.birthdate is not None:
        try:
            age_months = months_between(args.birthdate)
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)
        logger.info(f"Computed age from birthdate {args.birthdate}: {age_months} months")

    try:
        run_screening(age_months, config, str(catalog_path), args.json)
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("\nScreening interrupted by user")
        sys.exit(1)

    except ScreeningError as e:
        logger.error(f"Screening could not run: {type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
