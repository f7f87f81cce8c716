"""
core_helpers – command line entry point over the date helpers.

**Usage**:
    python main.py business-days 2025-01-13 2025-01-24      # 10
    python main.py weekends 2025-01-01 2025-01-31           # 4
    python main.py add-business-days 2025-01-17 3           # 2025-01-22
    python main.py next-weekday 2025-01-18 MONDAY           # 2025-01-20
    python main.py age 1985-12-31 --reference 2024-12-31    # 39

Dates are ISO (YYYY-MM-DD). Logging level and a frozen "today" come from
CORE_HELPERS_LOG_LEVEL and CORE_HELPERS_FROZEN_TODAY (see
core_helpers/config/settings.py).
"""

import argparse
import logging
from datetime import date
from typing import List, Optional

from core_helpers.config.settings import get_settings
from core_helpers.utils.dates import (
    Weekday,
    add_business_days,
    calculate_age,
    get_business_days_between,
    get_next_weekday,
    get_weekends_between,
)

logger = logging.getLogger(__name__)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def _weekday(value: str) -> Weekday:
    try:
        return Weekday[value.strip().upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"invalid weekday {value!r}, expected one of {', '.join(w.name for w in Weekday)}"
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per helper."""
    parser = argparse.ArgumentParser(
        description="Business-day and age arithmetic from the command line.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    commands = parser.add_subparsers(dest="command", required=True)

    business_days = commands.add_parser(
        "business-days", help="Count Monday-Friday days in [start, end]."
    )
    business_days.add_argument("start", type=_iso_date)
    business_days.add_argument("end", type=_iso_date)

    weekends = commands.add_parser("weekends", help="Count weekends in [start, end].")
    weekends.add_argument("start", type=_iso_date)
    weekends.add_argument("end", type=_iso_date)

    add_days = commands.add_parser(
        "add-business-days", help="Move a date by N business days (N may be negative)."
    )
    add_days.add_argument("start", type=_iso_date)
    add_days.add_argument("days", type=int)

    next_weekday = commands.add_parser(
        "next-weekday", help="Next occurrence of a weekday strictly after a date."
    )
    next_weekday.add_argument("start", type=_iso_date)
    next_weekday.add_argument("weekday", type=_weekday)

    age = commands.add_parser("age", help="Full years elapsed since a birth date.")
    age.add_argument("birth", type=_iso_date)
    age.add_argument(
        "--reference",
        type=_iso_date,
        default=None,
        help="Date to measure the age at. Default: today (or CORE_HELPERS_FROZEN_TODAY).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, run the requested helper and print its result.

    **Exit codes**:
      - 0: Success
      - 2: Invalid arguments (raised by argparse as SystemExit)
    """
    args = build_parser().parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level_number,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Running %s with %s", args.command, vars(args))

    if args.command == "business-days":
        result = get_business_days_between(args.start, args.end)
    elif args.command == "weekends":
        result = get_weekends_between(args.start, args.end)
    elif args.command == "add-business-days":
        result = add_business_days(args.start, args.days).isoformat()
    elif args.command == "next-weekday":
        result = get_next_weekday(args.start, args.weekday).isoformat()
    else:
        result = calculate_age(args.birth, args.reference)

    print(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
