# main.py - Facility Booking CLI Entry Point

import argparse
import json
import logging
import sys
from datetime import date
from typing import List, Optional

from backend.errors import BackendError
from backend.get_bookings import get_admin_bookings
from backend.get_community import get_overstay_limits, save_overstay_limits
from backend.login import create_session
from booking_format import (
    format_bookings,
    format_slots,
    generate_bookings_json,
    print_booking_statistics,
    print_quota,
)
from booking_service import BookingService
from models.mutation import MutationState
from utils.booking_stats import BOOKING_TABS, booking_stats, filter_bookings


def run_slots(service: BookingService, args) -> int:
    logger = logging.getLogger("main")
    service.load(args.facility, args.date)

    if not service.facilities:
        print("No facilities found")
        return 1
    if service.facility is None:
        print(f"Facility {args.facility} not found")
        return 1

    print(format_slots(service.facility, service.available_slots()))
    print_quota(service.minutes_used(), service.minutes_left())

    if args.show_bookings:
        print(format_bookings(service.bookings))

    logger.info(f"Listed slots for facility {args.facility} on {args.date}")
    return 0


def run_book(service: BookingService, args) -> int:
    service.load(args.facility, args.date)
    mutation = service.book(args.start, args.people, note=args.note or "")

    if mutation.state == MutationState.CONFIRMED:
        print(f"Booked: {mutation.booking}")
        return 0

    print(f"Booking failed: {mutation.message}")
    return 1


def run_cancel(service: BookingService, args) -> int:
    service.load(args.facility, args.date)
    mutation = service.cancel(args.booking_id)

    if mutation.state == MutationState.CONFIRMED:
        print(f"Cancelled: {mutation.booking}")
        return 0

    print(f"Cancellation failed: {mutation.message}")
    return 1


def run_admin_stats(service: BookingService, args) -> int:
    bookings = get_admin_bookings(service.session)
    print_booking_statistics(booking_stats(bookings))

    filtered = filter_bookings(bookings, args.tab)
    print(format_bookings(filtered))

    if args.output:
        generate_bookings_json(filtered, args.output)
    return 0


def run_overstay_limits(service: BookingService, args) -> int:
    if args.set:
        limits = get_overstay_limits(service.session)
        for entry in args.set:
            visitor_type, _, minutes = entry.partition("=")
            if not minutes.isdigit():
                print(f"Invalid limit {entry!r}, expected TYPE=MINUTES")
                return 1
            limits[visitor_type.strip().upper()] = int(minutes)
        save_overstay_limits(service.session, limits)
        print("Overstay limits saved")

    print(json.dumps(get_overstay_limits(service.session), indent=2))
    return 0


COMMANDS = {
    "slots": run_slots,
    "book": run_book,
    "cancel": run_cancel,
    "admin-stats": run_admin_stats,
    "overstay-limits": run_overstay_limits,
}


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Community Facility Booking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py slots --facility f1 --date 2025-01-01
  python main.py book --facility f1 --date 2025-01-01 --start 2025-01-01T10:00:00 --people 2
  python main.py cancel --facility f1 --date 2025-01-01 --booking-id b42
  python main.py admin-stats --tab confirmed
        """,
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_facility_args(sub):
        sub.add_argument("--facility", "-f", type=str, help="Facility ID")
        sub.add_argument(
            "--date",
            "-d",
            type=str,
            default=date.today().isoformat(),
            help="Day in YYYY-MM-DD format (default: today)",
        )

    slots = subparsers.add_parser("slots", help="List the day's slots")
    add_facility_args(slots)
    slots.add_argument(
        "--show-bookings", action="store_true", help="Also list existing bookings"
    )

    book = subparsers.add_parser("book", help="Book a slot")
    add_facility_args(book)
    book.add_argument("--start", "-s", required=True, help="Slot start (ISO-8601)")
    book.add_argument("--people", "-p", default="1", help="Number of people")
    book.add_argument("--note", "-n", default="", help="Optional note")

    cancel = subparsers.add_parser("cancel", help="Cancel one of your bookings")
    add_facility_args(cancel)
    cancel.add_argument("--booking-id", "-b", required=True, help="Booking ID")

    admin = subparsers.add_parser("admin-stats", help="Community booking statistics")
    admin.add_argument("--tab", choices=BOOKING_TABS, default="all")
    admin.add_argument("--output", "-o", help="Write the bookings to a JSON file")

    overstay = subparsers.add_parser(
        "overstay-limits", help="Show or update visitor overstay limits"
    )
    overstay.add_argument(
        "--set", nargs="+", metavar="TYPE=MINUTES", help="Limits to update"
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False):
    """File handler gets everything, console gets INFO (DEBUG when verbose)"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )

    file_handler = logging.FileHandler("booking_debug.log", mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # urllib3 is chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    try:
        args = parse_arguments(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    setup_logging(args.verbose)
    logger = logging.getLogger("main")
    logger.info(f"=== FACILITY BOOKING: {args.command} ===")

    try:
        session = create_session()
    except (RuntimeError, BackendError) as e:
        logger.error(f"Could not create session: {str(e)}")
        print(f"ERROR: {str(e)}")
        return 1

    service = BookingService(session)

    try:
        exit_code = COMMANDS[args.command](service, args)
    except BackendError as e:
        logger.error(f"{args.command} failed: {e.message}")
        print(f"ERROR: {e.message}")
        exit_code = 1

    logger.info(f"=== FACILITY BOOKING FINISHED: EXIT={exit_code} ===")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
