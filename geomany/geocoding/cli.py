#!/usr/bin/env python3
"""
Command-line interface for the geocoding module.

Usage:
    python -m geomany.geocoding.cli --address "4600 Silver Hill Rd, Washington, DC 20233"
    python -m geomany.geocoding.cli --address "10 Downing St, London" --scheduler OrderedList
    python -m geomany.geocoding.cli --address "Paris" --picker max_precision --country France
    python -m geomany.geocoding.cli --compare "82 Clerkenwell Road, London"
    python -m geomany.geocoding.cli --batch locations.txt --output results.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from geomany.core import settings
from geomany.geocoding.base import ConfigurationError, GeocodingError, STATUS_NOT_FOUND
from geomany.geocoding.callbacks import (
    consensus_picker,
    country_filter,
    min_precision_filter,
)
from geomany.geocoding.facade import PROVIDERS, build_geocoder, compare_providers
from geomany.scheduling import SchedulerType

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )


async def geocode_single(
    address: str,
    providers: Optional[List[str]] = None,
    scheduler: Optional[str] = None,
    use_timeouts: Optional[bool] = None,
    picker: str = "first",
    consensus: Optional[int] = None,
    nearness: float = 0.1,
    min_precision: Optional[float] = None,
    country: Optional[str] = None,
    wait: bool = False,
    skip: Optional[List[str]] = None,
    verbose: bool = False
) -> int:
    """Geocode a single address. Returns the result status code."""
    geocoder = build_geocoder(
        providers=providers,
        scheduler_type=scheduler,
        use_timeouts=use_timeouts,
        persistent_cache=True,
    )

    if consensus:
        geocoder.set_picker(consensus_picker(required_consensus=consensus, nearness=nearness))
    else:
        geocoder.set_picker(picker)

    if min_precision is not None and country:
        precision_ok = min_precision_filter(min_precision)
        country_ok = country_filter(country)
        geocoder.set_filter(lambda r: precision_ok(r) and country_ok(r))
    elif min_precision is not None:
        geocoder.set_filter(min_precision_filter(min_precision))
    elif country:
        geocoder.set_filter(country_filter(country))

    print(f"\nGeocoding: {address}")
    print(f"Providers: {', '.join(geocoder.geocoders) or '(none)'}")
    print("-" * 50)

    outcome = await geocoder.geocode_detailed(address, wait_for_retries=wait, skip=skip)
    result = outcome.result

    if result:
        print(f"✓ Success ({outcome.status_code})")
        print(f"  Latitude:  {result.latitude:.6f}")
        print(f"  Longitude: {result.longitude:.6f}")
        print(f"  Address:   {result.address}")
        print(f"  Country:   {result.country}")
        if result.precision is not None:
            print(f"  Precision: {result.precision:.2f}")
        print(f"  Provider:  {result.provider}")
    else:
        print(f"✗ No match found ({outcome.status_code})")

    if verbose:
        for response in outcome.responses:
            print(f"  {response.provider}: status {response.status_code}, {len(response)} result(s)")

    return outcome.status_code


async def compare_address(address: str, providers: Optional[List[str]] = None) -> None:
    """Compare geocoding results from multiple providers."""
    print(f"\nComparing providers for: {address}")
    print("=" * 60)

    results = await compare_providers(address, providers)

    for provider, result in results.items():
        print(f"\n{provider.upper()}:")
        if result:
            print(f"  Lat/Lng: {result.latitude:.6f}, {result.longitude:.6f}")
            print(f"  Address: {result.address}")
            if result.precision is not None:
                print(f"  Precision: {result.precision:.2f}")
        else:
            print(f"  No match")


async def geocode_file(
    input_path: Path,
    output_path: Optional[Path] = None,
    providers: Optional[List[str]] = None,
    scheduler: Optional[str] = None,
    use_timeouts: Optional[bool] = None,
    picker: str = "first",
    wait: bool = False,
    limit: Optional[int] = None,
) -> dict:
    """
    Geocode every location in a file, one per line.

    Blank lines and lines starting with '#' are ignored. Results are
    written as JSON to `output_path`, keyed by location.

    Returns:
        Dict with found/not_found/exhausted counts
    """
    locations = []
    with open(input_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                locations.append(line)

    if limit:
        locations = locations[:limit]
    logger.info(f"Loaded {len(locations)} locations from {input_path}")

    geocoder = build_geocoder(
        providers=providers,
        scheduler_type=scheduler,
        use_timeouts=use_timeouts,
        persistent_cache=True,
    )
    geocoder.set_picker(picker)

    results = {}
    stats = {"found": 0, "not_found": 0, "exhausted": 0}

    for i, location in enumerate(locations):
        outcome = await geocoder.geocode_detailed(location, wait_for_retries=wait)
        results[location] = {
            "status_code": outcome.status_code,
            "result": outcome.result.as_dict if outcome.result else None,
        }

        if outcome.result:
            stats["found"] += 1
        elif outcome.status_code == STATUS_NOT_FOUND:
            stats["not_found"] += 1
        else:
            stats["exhausted"] += 1

        if (i + 1) % 100 == 0:
            logger.info(f"Processed {i + 1}/{len(locations)}...")

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2)
        logger.info(f"Wrote results to {output_path}")

    # Summary
    logger.info("=" * 60)
    logger.info("BATCH GEOCODING COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Locations processed: {len(locations)}")
    logger.info(f"Found: {stats['found']}")
    logger.info(f"Not found: {stats['not_found']}")
    logger.info(f"Providers exhausted: {stats['exhausted']}")

    return stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Geocode through multiple providers with failover"
    )

    parser.add_argument(
        "--address", "-a",
        type=str,
        help="Geocode a single address"
    )
    parser.add_argument(
        "--compare", "-c",
        type=str,
        help="Compare all providers for an address"
    )
    parser.add_argument(
        "--batch", "-b",
        type=Path,
        help="Geocode every location in a file (one per line)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write --batch results to this JSON file"
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Only geocode the first N locations of --batch"
    )
    parser.add_argument(
        "--provider", "-p",
        action="append",
        choices=sorted(PROVIDERS),
        help="Provider to use (repeatable, default: all configured)"
    )
    parser.add_argument(
        "--scheduler", "-s",
        choices=[t.value for t in SchedulerType],
        help="Scheduling policy"
    )
    parser.add_argument(
        "--timeouts",
        action="store_true",
        default=None,
        help="Back off failing providers"
    )
    parser.add_argument(
        "--picker",
        default="first",
        choices=["first", "max_precision"],
        help="Result picker"
    )
    parser.add_argument(
        "--consensus",
        type=int,
        help="Require this many providers to agree (overrides --picker)"
    )
    parser.add_argument(
        "--nearness",
        type=float,
        default=0.1,
        help="Half-width in degrees for --consensus"
    )
    parser.add_argument(
        "--min-precision",
        type=float,
        help="Reject results below this precision"
    )
    parser.add_argument(
        "--country",
        type=str,
        help="Only accept results in this country"
    )
    parser.add_argument(
        "--skip",
        action="append",
        help="Provider to skip (repeatable)"
    )
    parser.add_argument(
        "--wait",
        action="store_true",
        help="Wait for backed-off providers instead of giving up"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        if args.compare:
            asyncio.run(compare_address(args.compare, args.provider))
            return 0
        if args.address:
            status = asyncio.run(geocode_single(
                args.address,
                providers=args.provider,
                scheduler=args.scheduler,
                use_timeouts=args.timeouts,
                picker=args.picker,
                consensus=args.consensus,
                nearness=args.nearness,
                min_precision=args.min_precision,
                country=args.country,
                wait=args.wait,
                skip=args.skip,
                verbose=args.verbose,
            ))
            return 0 if status < 300 else 1
        if args.batch:
            asyncio.run(geocode_file(
                args.batch,
                output_path=args.output,
                providers=args.provider,
                scheduler=args.scheduler,
                use_timeouts=args.timeouts,
                picker=args.picker,
                wait=args.wait,
                limit=args.limit,
            ))
            return 0
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 2
    except GeocodingError as e:
        print(f"Error: {e}")
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
