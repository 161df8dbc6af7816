#!/usr/bin/env python3
"""
saytime-weather CLI

Looks up the current temperature and condition for a postal code, ICAO
airport code or named outpost, prints a one-line summary and writes the
handoff files used by the time announcer.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from common import logger as debug_logger
from saytime_weather.config.constants import VERSION
from saytime_weather.config.settings import Overrides, apply_overrides, load_config, parse_unit
from saytime_weather.core.errors import ConfigError, ResolutionFailed
from saytime_weather.core.models import TemperatureUnit
from saytime_weather.core.normalizer import display_temperature
from saytime_weather.core.pipeline import WeatherServices, announce
from saytime_weather.output import cleanup_output_files, write_announcement_files

EPILOG = """
Examples:
  Postal Codes:
    saytime-weather 90210                 # Beverly Hills, CA (ZIP)
    saytime-weather M5H2N2 v              # Toronto, ON (postal code)
    saytime-weather -d fr 75001           # Paris, France
    saytime-weather -d de 10115 v         # Berlin, Germany

  ICAO Airport Codes:
    saytime-weather KJFK v                # JFK Airport, New York
    saytime-weather EGLL                  # Heathrow, London

  Named Outposts:
    saytime-weather southpole v           # Amundsen-Scott South Pole Station

  With Options:
    saytime-weather -t C KJFK             # JFK in Celsius
    saytime-weather --no-cache EGLL v     # Fresh METAR from Heathrow

Command line options override configuration file settings for that run.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saytime-weather",
        description="Fetch current weather for an announcement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument("location",
                        help="Postal code, ZIP code, ICAO airport code or named outpost")
    parser.add_argument("display_only", nargs="?", default="",
                        help="v = display text only, do not write announcement files")
    parser.add_argument("-c", "--config", type=Path,
                        help="Use alternate configuration file")
    parser.add_argument("-d", "--default-country",
                        help="Override default country (us, ca, fr, de, uk, etc.)")
    parser.add_argument("-t", "--temperature-mode",
                        help="Override temperature mode (F or C)")
    parser.add_argument("--no-cache", action="store_true",
                        help="Disable caching for this request")
    parser.add_argument("--no-condition", action="store_true",
                        help="Skip weather condition announcements")
    parser.add_argument("--verbose", action="store_true",
                        help="Print debug output to the console")
    parser.add_argument("--version", action="version", version=f"%(prog)s version {VERSION}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        debug_logger.enable_console()
        debug_logger.debug(f"Log file: {debug_logger.get_log_file_path()}")

    try:
        config = load_config(args.config)
        overrides = Overrides(
            force_country=args.default_country,
            force_unit=parse_unit(args.temperature_mode) if args.temperature_mode else None,
            bypass_cache=args.no_cache,
            skip_condition_processing=args.no_condition,
        )
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    effective = apply_overrides(config, overrides)
    cleanup_output_files(effective.output_dir)

    services = WeatherServices.create(effective)
    try:
        observation, payload = announce(args.location, config, services, overrides)
    except ResolutionFailed as e:
        debug_logger.warning(str(e))
        print("ERROR: No weather report available", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        cleanup_output_files(effective.output_dir)
        return 1

    temp_f = display_temperature(observation.temperature, TemperatureUnit.FAHRENHEIT)
    temp_c = display_temperature(observation.temperature, TemperatureUnit.CELSIUS)
    print(f"{temp_f}\N{DEGREE SIGN}F, {temp_c}\N{DEGREE SIGN}C / {observation.condition}")

    if args.display_only == "v":
        return 0

    try:
        write_announcement_files(payload, effective.output_dir)
    except OSError as e:
        cleanup_output_files(effective.output_dir)
        print(f"ERROR: Cannot write announcement files: {e}", file=sys.stderr)
        return 1

    if payload.condition_asset_ids:
        debug_logger.debug(f"Condition sounds: {', '.join(payload.condition_asset_ids)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
