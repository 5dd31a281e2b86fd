"""Command-line entry point for SIRSim.

Usage:
    sirsim                                   # defaults (N=1000, 90 days)
    sirsim --config configs/default.yaml --seed 7
    sirsim -n 500 --contacts-per-day 4 --infection-probability 0.2 --plot curve.png
    python -m sirsim --quiet --json summary.json

Command-line flags are applied as the last override layer on top of the
config file (or the built-in defaults when no file is given).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional

import yaml

from sirsim.config import SEEDING_MODES, SimulationConfig, config_from_dict, load_config
from sirsim.model import SIRSimulation
from sirsim.reporting import (
    format_daily_stats,
    format_header,
    format_summary,
    write_summary_json,
    write_trajectory_csv,
)
from sirsim.types import ConfigurationError

logger = logging.getLogger(__name__)

# flag dest → (section, key)
_OVERRIDE_FLAGS = {
    'population_size':       ('simulation', 'population_size'),
    'initial_infections':    ('simulation', 'initial_infections'),
    'days':                  ('simulation', 'simulation_days'),
    'seed':                  ('simulation', 'seed'),
    'infection_probability': ('disease', 'infection_probability'),
    'contacts_per_day':      ('disease', 'contacts_per_day'),
    'infection_duration':    ('disease', 'infection_duration'),
    'seeding':               ('disease', 'seeding'),
    'csv':                   ('output', 'csv_path'),
    'json':                  ('output', 'json_path'),
    'plot':                  ('output', 'plot_path'),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sirsim",
        description="Agent-based SIR epidemic simulation.",
        epilog="Example: sirsim -n 1000 --days 120 --seed 42 --plot curve.png",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Base config YAML (default: built-in defaults)",
    )
    parser.add_argument(
        "--scenario", type=str, default=None,
        help="Scenario YAML merged on top of --config",
    )
    parser.add_argument("-n", "--population-size", type=int, default=None)
    parser.add_argument("--initial-infections", type=int, default=None)
    parser.add_argument(
        "--days", type=int, default=None,
        help="Maximum number of days to simulate",
    )
    parser.add_argument("--infection-probability", type=float, default=None)
    parser.add_argument("--contacts-per-day", type=int, default=None)
    parser.add_argument(
        "--infection-duration", type=int, default=None,
        help="Days from infection to recovery",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="RNG seed for a reproducible run",
    )
    parser.add_argument(
        "--seeding", choices=sorted(SEEDING_MODES), default=None,
        help="How initial infections pick their targets",
    )
    parser.add_argument(
        "--no-early-stop", action="store_true",
        help="Keep simulating after the infected count reaches zero",
    )
    parser.add_argument("--csv", type=str, default=None, help="Write daily trajectory CSV")
    parser.add_argument("--json", type=str, default=None, help="Write summary JSON")
    parser.add_argument("--plot", type=str, default=None, help="Save epidemic curve PNG")
    parser.add_argument(
        "--quiet", action="store_true",
        help="Suppress the per-day lines",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    return parser


def _overrides_from_args(args: argparse.Namespace) -> Dict:
    overrides: Dict = {}
    for dest, (section, key) in _OVERRIDE_FLAGS.items():
        value = getattr(args, dest)
        if value is not None:
            overrides.setdefault(section, {})[key] = value
    if args.no_early_stop:
        overrides.setdefault('simulation', {})['stop_on_extinction'] = False
    return overrides


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    """Merge config file(s) and command-line flags into a validated config."""
    overrides = _overrides_from_args(args)
    if args.config is not None:
        return load_config(args.config, scenario_path=args.scenario,
                           sweep_overrides=overrides)
    if args.scenario is not None:
        return load_config(args.scenario, sweep_overrides=overrides)
    return config_from_dict(overrides)


def _configure_logging(verbosity: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = resolve_config(args)
        simulation = SIRSimulation(config)
    except (ConfigurationError, FileNotFoundError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_header(config))

    on_day = None if args.quiet else (lambda stats: print(format_daily_stats(stats)))
    result = simulation.run(on_day=on_day)

    print()
    print(format_summary(result))

    out = config.output
    if out.csv_path:
        print(f"Saved: {write_trajectory_csv(result, out.csv_path)}")
    if out.json_path:
        print(f"Saved: {write_summary_json(result, config, out.json_path)}")
    if out.plot_path:
        from sirsim.viz import plot_epidemic_curve
        plot_epidemic_curve(result, save_path=out.plot_path)
        print(f"Saved: {out.plot_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
