"""
PetStat - run.py
Command-line entry point: print a team report for a roster snapshot.

    python run.py roster.toml [--config analytics.toml] [--within 5] [--rank] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure we can import petstat packages
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))

from petstat.components import EstimateStatus, TimeEstimate
from petstat.config import load_config
from petstat.data_loader import load_roster
from petstat.efficiency import best_reason, rank_team
from petstat.report import build_team_report, near_max_level


def format_estimate(estimate: TimeEstimate) -> str:
    if estimate.status is EstimateStatus.AT_CAP:
        return "at cap"
    if estimate.status is EstimateStatus.INDETERMINATE:
        return "never (no XP)"
    if estimate.hours is None:
        return "n/a"
    if estimate.hours < 1:
        return f"{round(estimate.hours * 60)}m"
    whole = int(estimate.hours)
    return f"{whole}h {round((estimate.hours - whole) * 60)}m"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Pet ability and progression report.")
    parser.add_argument("roster", type=Path, help="TOML file with [[creatures]] snapshots")
    parser.add_argument("--config", type=Path, default=None, help="TOML file overriding design variables")
    parser.add_argument("--within", type=int, default=None,
                        help="only list creatures this many levels below their cap")
    parser.add_argument("--rank", action="store_true", help="rank creatures by efficiency score")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        roster = load_roster(args.roster)
    except (FileNotFoundError, ValueError) as e:
        # pydantic ValidationError and tomllib.TOMLDecodeError are both ValueErrors
        print(f"error: {e}", file=sys.stderr)
        return 1

    report = build_team_report(roster, config=config)
    creatures = report.creatures
    if args.within is not None:
        creatures = near_max_level(creatures, args.within)

    rate = report.team_rate
    print(f"Team XP/hour: {report.shared_xp_per_hour:,.0f} "
          f"(bonus {rate.bonus_xp_per_hour:,.0f}, "
          f"{rate.chance_per_minute * 100:.2f}%/min combined)")
    for c in creatures:
        prog = c.progression
        cap = "?" if prog.level_cap is None else f"{prog.level_cap:g}"
        strength = "?" if c.strength is None else f"{c.strength:g}"
        print(f"- {c.label}: STR {strength}/{cap}, next level {format_estimate(prog.time_to_next)}, "
              f"cap {format_estimate(prog.time_to_cap)}")
        for ab in c.abilities:
            if not ab.known:
                print(f"    {ab.raw}: unknown ability")
                continue
            line = f"    {ab.name}: {ab.stats.procs_per_hour:.2f} procs/h"
            if ab.value_per_hour is not None:
                line += f", {ab.value_per_hour:,.0f} value/h"
            elif ab.value_detail:
                line += f", {ab.value_detail}"
            print(line)
    if args.rank:
        rankings = rank_team(report)
        print("Efficiency ranking:")
        for place, item in enumerate(rankings.by_score, 1):
            print(f"  {place}. {item.label}: {item.score:.1f} ({best_reason(item)})")
    for creature_id in report.failed:
        print(f"- {creature_id}: report failed", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
