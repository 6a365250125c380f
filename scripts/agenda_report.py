# File: scripts/agenda_report.py
"""
Daily agenda report.
Reads an events JSON export and prints the day summary, free windows,
conflicts and (optionally) per-resource lanes for one day.

Usage:
    python scripts/agenda_report.py events.json --day 2024-03-04
    python scripts/agenda_report.py events.json --day 2024-03-04 --resources resources.json
"""

import argparse
import datetime
import json
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from clinic_agenda.core.config_manager import Config
from clinic_agenda.core.conflicts import conflicts_for
from clinic_agenda.core.occupancy import free_windows, summarize_day
from clinic_agenda.core.resources import group_by_resource
from clinic_agenda.core.time_grid import TimeGrid
from clinic_agenda.models import resource_from_dict
from clinic_agenda.processors.event_processor import EventProcessor
from clinic_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print the agenda summary for one day.")
    parser.add_argument("events", type=Path, help="JSON file with a list of events")
    parser.add_argument("--day", type=datetime.date.fromisoformat, default=datetime.date.today(),
                        help="Day to report on (YYYY-MM-DD, default: today)")
    parser.add_argument("--resources", type=Path, help="JSON file with a list of resources")
    parser.add_argument("--grid-config", type=Path, help="JSON file overriding the grid settings")
    parser.add_argument("--include-cancelled", action="store_true", default=Config.INCLUDE_CANCELLED,
                        help="Let cancelled events count for conflicts and occupancy")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser.parse_args(argv)


def build_report(args: argparse.Namespace) -> dict:
    grid_config = Config.load_grid_config(args.grid_config) if args.grid_config else Config.grid_config()
    grid = TimeGrid(grid_config, Config.timezone())

    processor = EventProcessor(grid)
    events, errors = processor.load_events(args.events)
    day_events = processor.events_on(events, args.day)

    summary = summarize_day(day_events, args.day, grid, include_cancelled=args.include_cancelled)
    report = {
        'summary': summary.to_dict(),
        'free_windows': [w.to_dict() for w in free_windows(
            day_events, args.day, grid=grid, include_cancelled=args.include_cancelled)],
        'conflicts': [c.to_dict() for c in conflicts_for(
            day_events, grid, include_cancelled=args.include_cancelled)],
        'rejected': [str(e) for e in errors],
    }

    if args.resources:
        with open(args.resources, 'r', encoding='utf-8') as f:
            resources = [resource_from_dict(r) for r in json.load(f)]
        lanes = group_by_resource(day_events, resources, args.day, grid,
                                  include_cancelled=args.include_cancelled)
        report['lanes'] = [
            {
                'resource_id': lane.resource.id,
                'name': lane.resource.name,
                'total': lane.total,
                'confirmed': lane.confirmed,
                'occupancy': lane.occupancy,
            }
            for lane in lanes
        ]

    return report


def print_report(report: dict):
    summary = report['summary']
    print(f"Agenda for {summary['day']}")
    print(f"  Appointments: {summary['total']} "
          f"({summary['by_state'].get('confirmed', 0)} confirmed, "
          f"{summary['by_state'].get('scheduled', 0)} pending)")
    print(f"  Occupancy:    {summary['occupancy']}%")
    print(f"  Free time:    {summary['free_minutes']:.0f} min in {summary['free_window_count']} windows")

    for window in report['free_windows']:
        print(f"    {window['start'][11:16]} - {window['end'][11:16]}")

    if report['conflicts']:
        print(f"  Conflicts:    {len(report['conflicts'])}")
        for conflict in report['conflicts']:
            print(f"    [{conflict['severity']}] {conflict['event_id_a']} / {conflict['event_id_b']} ({conflict['kind']})")

    for lane in report.get('lanes', []):
        print(f"  {lane['name'] or lane['resource_id']}: {lane['total']} events, {lane['occupancy']}%")

    if report['rejected']:
        print(f"  Rejected records: {len(report['rejected'])}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)

    if not Config.validate():
        logger.error("Configuration validation failed")
        return 1

    try:
        report = build_report(args)
    except FileNotFoundError as e:
        logger.error(f"Could not find: {e.filename or e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1

    if args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False))
    else:
        print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
