#!/usr/bin/env python3
"""
Burn Status Check

Resolves a location to its Oregon structural fire district and prints
today's burn status and the district's burn line contacts.

Usage:
  python check_burn_status.py --districts districts.geojson --lat 43.39 --lon -123.31
  python check_burn_status.py --districts districts.geojson --address "Sutherlin, OR"

Options:
  --contacts PATH   Burn lines lookup JSON (DistrictName, BurnLinePhone, ...)
  --verbose         Show debug logging
"""

import argparse
import asyncio
import logging
import sys

from oregon_burn import (
    BurnConfig,
    Coordinate,
    DistrictIndex,
    LocationMode,
    LocationResolutionService,
    NominatimGeocoder,
    ResolutionResult,
)
from oregon_burn.models.district import ContactInfo

TIER_ICONS = {
    "highest": "🟥",
    "elevated": "🟧",
    "caution": "🟨",
    "normal": "🟩",
    "unknown": "⬜",
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Check today's open burning status")
    parser.add_argument("--districts", required=True, help="Fire district GeoJSON file")
    parser.add_argument("--contacts", help="Burn lines lookup JSON file")
    parser.add_argument("--lat", type=float, help="Latitude")
    parser.add_argument("--lon", type=float, help="Longitude")
    parser.add_argument("--address", help="Address to geocode instead of --lat/--lon")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    if args.address is None and (args.lat is None or args.lon is None):
        parser.error("either --address or both --lat and --lon are required")
    return args


def print_result(result: ResolutionResult):
    """Print a resolution result the way the app shows it."""
    print("\n" + "=" * 60)
    print("BURN STATUS")
    print("=" * 60)

    if result.location:
        print(
            f"\n📍 Location: Lat {result.location.latitude:.4f}, "
            f"Lon {result.location.longitude:.4f}"
        )
    print(f"🚒 Fire district: {result.district_name}")

    if result.error_message:
        print(f"⚠️  {result.error_message}")

    if result.restriction:
        tier = result.restriction.tier.value
        print(
            f"\n{TIER_ICONS[tier]} Fire danger level: {result.restriction.text} ({tier})"
        )
        if result.restriction.error_message:
            print(f"   {result.restriction.error_message}")

    if result.advisory:
        advisory = result.advisory
        ag_icon = "✅" if advisory.agricultural_permitted else "❌"
        by_icon = "✅" if advisory.backyard_permitted else "❌"
        print("\nToday's burn advisory for Willamette Valley:")
        print(f"  {ag_icon} Agricultural burning: {advisory.agricultural}")
        print(f"  {by_icon} Backyard burning (special control areas): {advisory.backyard}")
        if advisory.error_message:
            print(f"   {advisory.error_message}")

    contact = result.contact
    if contact:
        print("\n📞 Contact info:")
        if contact.burn_line_phone:
            print(
                f"  Burn line: {contact.burn_line_phone} "
                f"({ContactInfo.dial_uri(contact.burn_line_phone)})"
            )
        if contact.main_phone:
            print(f"  Main office: {contact.main_phone}")
        if contact.website:
            print(f"  Website: {contact.website}")
    elif result.district_name and result.location:
        print("\nNo specific contact info found for this district in our database.")

    print()


async def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = BurnConfig()
    index = DistrictIndex.load(
        args.districts, args.contacts, name_property=config.district_name_property
    )
    if len(index) == 0:
        print(f"⚠️  No fire districts loaded from {args.districts}")

    service = LocationResolutionService(
        index, config=config, geocoder=NominatimGeocoder(config)
    )

    if args.address is not None:
        service.mode = LocationMode.MANUAL
        await service.set_manual_address(args.address)
    else:
        service.update_live_location(Coordinate(latitude=args.lat, longitude=args.lon))

    await service.wait_for_pending()
    print_result(service.result)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
