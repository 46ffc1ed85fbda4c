"""Standalone verifier for courtsched.

Validates a schedule by reading a schedule CSV + config.yaml.
Usage: courtsched-verify <schedule.csv> [config.yaml]
"""

import sys
from pathlib import Path

from courtsched.config import load_config
from courtsched.constraints import format_validation_report, validate_schedule
from courtsched.ids import teams_by_division
from courtsched.models import Match
from courtsched.output import parse_schedule_csv
from courtsched.slots import capacity_per_week
from courtsched.stats import compute_stats, format_stats_report


def load_schedule_csv(csv_path: str | Path) -> list[Match]:
    return parse_schedule_csv(Path(csv_path).read_text())


def main():
    if len(sys.argv) < 2:
        print("Usage: courtsched-verify <schedule.csv> [config.yaml]")
        print("  Validates a schedule CSV against constraints in config.")
        sys.exit(1)

    csv_path = sys.argv[1]
    config_path = sys.argv[2] if len(sys.argv) > 2 else "config.yaml"

    if not Path(csv_path).exists():
        print(f"Error: {csv_path} not found")
        sys.exit(1)
    if not Path(config_path).exists():
        print(f"Error: {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    config = load_config(config_path)

    print(f"Parsing schedule from {csv_path}...")
    matches = load_schedule_csv(csv_path)
    print(f"Loaded {len(matches)} matches")

    if not matches:
        print("No matches found in CSV. Check the format.")
        sys.exit(1)

    result = validate_schedule(matches, config)
    print(format_validation_report(result))

    capacity = capacity_per_week(config["venues"], config["timeslots"])
    stats = compute_stats(matches, teams_by_division(config["divisions"]), capacity)
    print("\n" + format_stats_report(stats))

    sys.exit(0 if result["valid"] and not result["unassigned"] else 1)


if __name__ == "__main__":
    main()
