"""Manual quote check against a catalog.

Run from the repository root with:
  PYTHONPATH=src python scripts/quote.py --vehicle 3 \
    --pickup 2030-01-10 --dropoff 2030-01-12 --addon 1 --addon 5

Against a running booking service:
  PYTHONPATH=src BASE_URL=http://localhost:8000 python scripts/quote.py --list

Optional environment variables:
  BASE_URL
  API_URI
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from pyrentalbooking import BookingSession, BookingSummary, Client
from pyrentalbooking.exceptions import PyRentalBookingError

_LOGGER = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print a rental quote.")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL"), help="Booking service URL.")
    parser.add_argument("--api-uri", default=os.getenv("API_URI", "api/v1"), help="API prefix.")
    parser.add_argument("--list", action="store_true", help="List vehicles and add-ons.")
    parser.add_argument("--vehicle", help="Vehicle id to quote.")
    parser.add_argument("--pickup", help="Pickup date (YYYY-MM-DD).")
    parser.add_argument("--dropoff", help="Drop-off date (YYYY-MM-DD).")
    parser.add_argument(
        "--addon",
        dest="addons",
        action="append",
        default=[],
        help="Add-on id to include (repeatable).",
    )
    parser.add_argument("--retry-count", type=int, default=0, help="GET retries.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def _format_summary(summary: BookingSummary) -> str:
    lines = [
        f"Vehicle:  {summary.vehicle.name}",
        f"Days:     {summary.days}",
        f"Base:     {summary.base_cost:.2f}",
    ]
    for addon in summary.selected_addons:
        lines.append(f"  + {addon.name}: {addon.cost_per_day * summary.days:.2f}")
    lines.extend(
        [
            f"Add-ons:  {summary.addons_cost:.2f}",
            f"Subtotal: {summary.subtotal:.2f}",
            f"Tax:      {summary.tax:.2f}",
            f"Total:    {summary.total:.2f}",
        ]
    )
    return "\n".join(lines)


async def _print_catalog(booking: BookingSession) -> None:
    print("Vehicles:")
    for vehicle in booking.vehicles:
        print(f"- {vehicle.id} | {vehicle.name} | {vehicle.cost_per_day}/day")
        task = booking.select_vehicle(vehicle)
        if task is not None:
            await task
        for addon in booking.available_addons:
            print(f"    {addon.id} | {addon.name} | {addon.cost_per_day}/day")
    booking.reset()


def _report_errors(booking: BookingSession) -> None:
    for error in booking.field_errors.values():
        print(f"{error.field}: {error.message}", file=sys.stderr)


async def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        async with Client(
            base_url=args.base_url,
            api_uri=args.api_uri,
            retry_count=args.retry_count,
        ) as client:
            booking = await client.new_booking()
            await booking.load_vehicles()
            if booking.catalog_error is not None:
                raise booking.catalog_error
            if args.list:
                await _print_catalog(booking)
                return 0
            if not args.vehicle:
                print("Missing required value: --vehicle", file=sys.stderr)
                return 2
            vehicle = next((v for v in booking.vehicles if v.id == args.vehicle), None)
            if vehicle is None:
                print(f"Unknown vehicle: {args.vehicle}", file=sys.stderr)
                return 2
            task = booking.select_vehicle(vehicle)
            if task is not None:
                await task
            booking.set_pickup_date(args.pickup)
            booking.set_dropoff_date(args.dropoff)
            for addon_id in args.addons:
                if not booking.toggle_addon(addon_id):
                    _LOGGER.warning("Add-on %s is not available for %s", addon_id, vehicle.name)
    except PyRentalBookingError as exc:
        print(f"Error: {exc.__class__.__name__}: {exc}", file=sys.stderr)
        return 1

    summary = booking.summary
    if summary is None:
        _report_errors(booking)
        print("Booking is incomplete; no quote available.", file=sys.stderr)
        return 1
    print(_format_summary(summary))
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
