# terminal front end: connects typed input to the session and prints the weather card
# everything here is presentation glue, lookups and state live in session.py

from __future__ import annotations
import argparse
import logging
import sys
from dataclasses import replace
from typing import Callable, List, Optional, Tuple
from .client import ConfigurationError, build_client
from .models import TemperatureUnit, icon_url
from .settings import BACKENDS, load_settings
from .session import Failure, Idle, Loading, Success, WeatherSession

HELP = """Type a city name and press Enter to search.
  :c / :f   show Celsius / Fahrenheit
  :u        toggle unit
  :r        refresh the last city
  :h        this help
  :q        quit"""

UNIT_COMMANDS = (":c", ":f", ":celsius", ":fahrenheit")

def parse_command(line: str) -> Tuple[str, Optional[str]]:
    text = line.strip()
    if not text:
        return "noop", None
    lowered = text.lower()
    if lowered in (":q", ":quit"):
        return "quit", None
    if lowered in UNIT_COMMANDS:
        return "unit", lowered[1:]
    if lowered == ":u":
        return "toggle", None
    if lowered == ":r":
        return "refresh", None
    if lowered in (":h", ":help", "?"):
        return "help", None
    return "search", text

def render(session: WeatherSession) -> str:
    state = session.state
    if isinstance(state, Idle):
        return "Enter a city name to see the current weather."
    if isinstance(state, Loading):
        return f"Loading weather for {state.city}..."
    if isinstance(state, Failure):
        return state.message
    if isinstance(state, Success):
        record = state.record
        lines = [record.city]
        url = icon_url(record.icon_id)
        if url:
            lines.append(f"Icon: {url}")
        lines.extend([
            f"Temperature: {session.temperature():.1f}°{session.unit.value}",
            f"Humidity: {record.humidity_percent:g}%",
            f"Wind: {record.wind_speed_mps:g} m/s",
            f"Condition: {record.condition_description or 'n/a'}",
        ])
        return "\n".join(lines)
    raise TypeError(f"Unknown session state: {state!r}")

def run(
    session: WeatherSession,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    # interactive loop, ends on :q or end of input
    write(render(session))
    while True:
        try:
            line = read_line("city> ")
        except EOFError:
            break
        action, arg = parse_command(line)
        if action == "quit":
            break
        if action == "noop":
            continue
        if action == "help":
            write(HELP)
            continue
        if action == "unit":
            session.set_unit(TemperatureUnit.parse(arg))
        elif action == "toggle":
            session.toggle_unit()
        elif action == "refresh":
            session.refresh()
        else:
            session.search(arg)
        write(render(session))

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weather-widget", description="Current weather for a city.")
    parser.add_argument("--backend", choices=BACKENDS, help="override the configured backend")
    parser.add_argument("--unit", type=TemperatureUnit.parse, default=TemperatureUnit.CELSIUS,
                        metavar="{C,F}", help="display unit, C or F (celsius or fahrenheit also accepted)")
    parser.add_argument("--once", metavar="CITY", help="look up one city, print it and exit")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING),
                            format="%(asctime)s %(levelname)s %(name)s: %(message)s")
        if args.backend:
            settings = replace(settings, backend=args.backend)
        client = build_client(settings)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    with WeatherSession(client, unit=args.unit) as session:
        if args.once is not None:
            state = session.search(args.once)
            print(render(session))
            return 0 if isinstance(state, Success) else 1
        run(session)
    return 0

if __name__ == "__main__":
    sys.exit(main())
