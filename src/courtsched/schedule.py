#!/usr/bin/env python3
"""Court league schedule builder.

Generate mode (default):
    courtsched [config.yaml] [-o DIR] [--verbose]

    Checks the config, builds round-robin pairings for every division,
    places them on courts and writes:
      {DIR}/schedule.txt    - Human-readable week-by-week schedule
      {DIR}/schedule.csv    - Flat match list
      {DIR}/clashes.csv     - Expanded clash pairs (when clashes are set)
      {DIR}/snapshot.json   - Config + schedule snapshot
      {DIR}/stats.txt       - Validation report + statistics

Verify mode:
    courtsched-verify <schedule.csv> [config.yaml]

Examples:
    courtsched                          # default config.yaml, output/
    courtsched winter.yaml -o winter    # alternate config and output dir
    courtsched --verbose                # trace every placement decision
"""

import argparse
import sys
from pathlib import Path

from courtsched.clashes import build_clash_edges, clash_groups
from courtsched.config import format_config_report, load_config, validate_config
from courtsched.constraints import format_validation_report, validate_schedule
from courtsched.ids import teams_by_division
from courtsched.netheights import compute_net_height_changes
from courtsched.output import write_schedule
from courtsched.scheduler import print_event, schedule
from courtsched.slots import capacity_per_week
from courtsched.snapshot import write_snapshot
from courtsched.stats import compute_stats, format_stats_report


def format_net_height_report(result: dict) -> str:
    lines = [f"\n--- NET HEIGHT CHANGES ({result['total']}) ---"]
    for week in sorted(result["by_week"]):
        lines.append(f"  Week {week:>2}: {result['by_week'][week]}")
    return "\n".join(lines)


def format_clash_groups(groups: list[list[str]]) -> str:
    lines = [f"\n--- CLASH GROUPS ({len(groups)}) ---"]
    for g in groups:
        lines.append(f"  {len(g):>2}: {', '.join(g)}")
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="Court league schedule builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Output files:
  {dir}/schedule.txt    Human-readable schedule (week view)
  {dir}/schedule.csv    week,division,home,away,venue,court,time
  {dir}/clashes.csv     Expanded clash pairs
  {dir}/snapshot.json   Config + schedule snapshot (schemaVersion 1)
  {dir}/stats.txt       Validation report + statistics

Exit codes:
  0  Every game placed with no hard violations
  1  Config errors, unassigned games or constraint violations
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Print every accept/reject decision made during placement"
    )
    args = parser.parse_args()

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    config = load_config(config_path)

    config_result = validate_config(config)
    print(format_config_report(config_result))
    if not config_result["valid"]:
        print("\nFix the config errors above before generating.")
        sys.exit(1)

    weeks = config["season"]["weeks"]
    print(f"\nGenerating schedule ({weeks} weeks)...")
    matches = schedule(config, on_event=print_event if args.verbose else None)

    print("\nValidating...")
    result = validate_schedule(matches, config)
    report = format_validation_report(result)
    print(report)

    capacity = capacity_per_week(config["venues"], config["timeslots"])
    stats = compute_stats(matches, teams_by_division(config["divisions"]), capacity)
    edges = build_clash_edges(config["clash_rows"])
    stats_text = format_stats_report(stats)
    stats_text += format_net_height_report(compute_net_height_changes(
        matches, config["divisions"], config["timeslots"]))
    if edges:
        stats_text += format_clash_groups(clash_groups(edges))
    print("\n" + stats_text)

    print("\nWriting output files...")
    write_schedule(matches, config, clash_edges=edges,
                   output_prefix=args.output_prefix)
    snap_path = write_snapshot(Path(args.output_prefix) / "snapshot.json",
                               config, matches)
    print(f"Written: {snap_path}")

    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text)
    print(f"Written: {stats_path}")

    if not result["valid"]:
        print(f"\nSchedule has {len(result['errors'])} problems.")
        sys.exit(1)
    if result["unassigned"]:
        print(f"\n{len(result['unassigned'])} games found no slot.")
        print("Add courts or timeslots, or relax clashes, and run again.")
        sys.exit(1)
    print("\nSchedule generated successfully!")


if __name__ == "__main__":
    main()
