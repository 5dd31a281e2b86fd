"""Text reports and file export for simulation runs.

Usage:
    sim = SIRSimulation(config)
    result = sim.run(on_day=lambda s: print(format_daily_stats(s)))
    print(format_summary(result))
    write_trajectory_csv(result, "trajectory.csv")
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Union

from sirsim.config import SimulationConfig, describe_config
from sirsim.model import DailyStats, SimResult

TRAJECTORY_COLUMNS = ['day', 'susceptible', 'infected', 'recovered', 'new_infections']


def format_header(config: SimulationConfig, title: str = "SIR Epidemic Simulation") -> str:
    return f"=== {title} ===\n{describe_config(config)}\n"


def format_daily_stats(stats: DailyStats) -> str:
    """e.g. ``Day   3: S= 981, I=  12, R=   7``"""
    return (
        f"Day {stats.day:>3}: "
        f"S={stats.susceptible:>4}, "
        f"I={stats.infected:>4}, "
        f"R={stats.recovered:>4}"
    )


def format_summary(result: SimResult) -> str:
    """Final statistics block with percentages of the population."""
    s = result.summary()
    lines = []
    if result.extinction_day is not None:
        lines.append(f"*** Epidemic ended on day {result.extinction_day} ***")
        lines.append("")
    lines.extend([
        "=== Final Statistics ===",
        f"Susceptible: {s['susceptible']} ({s['susceptible_pct']:.1f}%)",
        f"Infected: {s['infected']} ({s['infected_pct']:.1f}%)",
        f"Recovered: {s['recovered']} ({s['recovered_pct']:.1f}%)",
        f"Total Affected: {s['total_affected']} "
        f"({100.0 * result.attack_rate:.1f}%)",
        f"Attack Rate: {s['attack_rate_pct']:.1f}%",
        f"Peak Infected: {s['peak_infected']} on day {s['peak_day']}",
    ])
    return '\n'.join(lines)


def write_trajectory_csv(result: SimResult, path: Union[str, Path]) -> Path:
    """Write the daily S/I/R trajectory as CSV. Returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(TRAJECTORY_COLUMNS)
        for row in result.rows():
            writer.writerow([
                row.day, row.susceptible, row.infected,
                row.recovered, row.new_infections,
            ])
    return path


def write_summary_json(
    result: SimResult,
    config: SimulationConfig,
    path: Union[str, Path],
) -> Path:
    """Write the run configuration and summary statistics as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        'config': config.to_dict(),
        'summary': result.summary(),
        'seed_entropy': (str(result.seed_entropy)
                         if result.seed_entropy is not None else None),
    }
    with open(path, 'w') as f:
        json.dump(payload, f, indent=2)
    return path
