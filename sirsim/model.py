"""Simulation orchestrator.

Wires a validated SimulationConfig to a Population and runs the daily loop:

  1. Validate config (ConfigurationError on failure)
  2. Seed ``initial_infections`` random infections
  3. Record day 0
  4. For day = 1 .. simulation_days:
       advance one day → record S/I/R → notify the reporting callback
       stop early on the first day with no infected (if enabled)
  5. Package the trajectory into a SimResult

The orchestrator never mutates Person objects directly; all changes go
through the Population.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from sirsim.config import SimulationConfig, validate_config
from sirsim.population import Population
from sirsim.rng import entropy_of, make_rng

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# RESULT TYPES
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DailyStats:
    """Compartment counts at the end of one simulated day."""
    day: int
    susceptible: int
    infected: int
    recovered: int
    new_infections: int = 0

    @property
    def total(self) -> int:
        return self.susceptible + self.infected + self.recovered


@dataclass
class SimResult:
    """Trajectory and summary of one simulation run.

    Daily arrays have length ``days_run + 1``; index 0 is the state right
    after seeding, before any day has been simulated.
    """
    population_size: int
    days_run: int
    daily_S: np.ndarray
    daily_I: np.ndarray
    daily_R: np.ndarray
    daily_new_infections: np.ndarray
    extinction_day: Optional[int] = None
    wasted_seeds: int = 0
    seed_entropy: Optional[int] = None

    @classmethod
    def from_history(
        cls,
        history: List[DailyStats],
        population_size: int,
        extinction_day: Optional[int] = None,
        wasted_seeds: int = 0,
        seed_entropy: Optional[int] = None,
    ) -> 'SimResult':
        return cls(
            population_size=population_size,
            days_run=history[-1].day if history else 0,
            daily_S=np.array([h.susceptible for h in history], dtype=np.int64),
            daily_I=np.array([h.infected for h in history], dtype=np.int64),
            daily_R=np.array([h.recovered for h in history], dtype=np.int64),
            daily_new_infections=np.array(
                [h.new_infections for h in history], dtype=np.int64
            ),
            extinction_day=extinction_day,
            wasted_seeds=wasted_seeds,
            seed_entropy=seed_entropy,
        )

    @property
    def final_counts(self) -> Tuple[int, int, int]:
        return int(self.daily_S[-1]), int(self.daily_I[-1]), int(self.daily_R[-1])

    @property
    def peak_infected(self) -> int:
        return int(self.daily_I.max()) if len(self.daily_I) else 0

    @property
    def peak_day(self) -> int:
        """First day on which the infected count reached its maximum."""
        return int(np.argmax(self.daily_I)) if len(self.daily_I) else 0

    @property
    def total_affected(self) -> int:
        """Everyone who was ever infected (N − final susceptibles)."""
        return self.population_size - self.final_counts[0]

    @property
    def attack_rate(self) -> float:
        """Fraction of the population ever infected."""
        if self.population_size <= 0:
            return 0.0
        return self.total_affected / self.population_size

    def days(self) -> np.ndarray:
        return np.arange(len(self.daily_S))

    def rows(self) -> List[DailyStats]:
        """The trajectory as a list of DailyStats, day 0 first."""
        return [
            DailyStats(
                day=int(d),
                susceptible=int(self.daily_S[d]),
                infected=int(self.daily_I[d]),
                recovered=int(self.daily_R[d]),
                new_infections=int(self.daily_new_infections[d]),
            )
            for d in range(len(self.daily_S))
        ]

    def summary(self) -> Dict[str, float]:
        """Summary dict suitable for JSON serialization."""
        S, I, R = self.final_counts
        n = self.population_size

        def pct(x: int) -> float:
            return round(100.0 * x / n, 1) if n > 0 else 0.0

        return {
            'population_size': n,
            'days_run': self.days_run,
            'extinction_day': self.extinction_day,
            'susceptible': S,
            'infected': I,
            'recovered': R,
            'susceptible_pct': pct(S),
            'infected_pct': pct(I),
            'recovered_pct': pct(R),
            'total_affected': self.total_affected,
            'attack_rate_pct': round(100.0 * self.attack_rate, 1),
            'peak_infected': self.peak_infected,
            'peak_day': self.peak_day,
            'wasted_seeds': self.wasted_seeds,
        }


# ═══════════════════════════════════════════════════════════════════════
# ORCHESTRATOR
# ═══════════════════════════════════════════════════════════════════════

class SIRSimulation:
    """Runs one SIR simulation from a configuration.

    Args:
        config: Simulation configuration. Re-validated on construction;
            suspicious-setting warnings are left to the config loaders.
        rng: Optional generator to inject (e.g. for deterministic tests).
            When omitted, one is built from ``config.simulation.seed``.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Optional[np.random.Generator] = None,
    ):
        validate_config(config, warn=False)
        self.config = config
        self.rng = rng if rng is not None else make_rng(config.simulation.seed)
        self.population = Population(config.simulation.population_size, rng=self.rng)
        self.population.configure(
            transmission_probability=config.disease.infection_probability,
            contacts_per_day=config.disease.contacts_per_day,
            infection_duration=config.disease.infection_duration,
        )
        self.history: List[DailyStats] = []
        self._initialized = False

    def _snapshot(self, new_infections: int = 0) -> DailyStats:
        S, I, R = self.population.counts()
        return DailyStats(
            day=self.population.day,
            susceptible=S,
            infected=I,
            recovered=R,
            new_infections=new_infections,
        )

    def initialize(self) -> DailyStats:
        """Seed the initial infections and record day 0.

        Calling this more than once has no further effect.
        """
        if self._initialized:
            return self.history[0]

        self.population.seed_random_infections(
            self.config.simulation.initial_infections,
            susceptible_only=self.config.disease.seeding == "susceptible",
        )

        if self.population.wasted_seeds:
            logger.warning(
                "%d of %d seed draws hit an already-infected person; "
                "day 0 has %d infected",
                self.population.wasted_seeds,
                self.config.simulation.initial_infections,
                self.population.n_infected,
            )

        self._initialized = True
        stats = self._snapshot(new_infections=self.population.n_infected)
        self.history.append(stats)
        return stats

    def step(self) -> DailyStats:
        """Advance one day and record the resulting counts."""
        if not self._initialized:
            self.initialize()
        new_infections = self.population.advance_one_day()
        stats = self._snapshot(new_infections)
        self.history.append(stats)
        return stats

    def run(
        self,
        on_day: Optional[Callable[[DailyStats], None]] = None,
    ) -> SimResult:
        """Run the full simulation.

        Args:
            on_day: Optional callback receiving each day's DailyStats,
                day 0 included.

        Returns:
            SimResult with the full trajectory.
        """
        sim = self.config.simulation
        logger.info(
            "Starting run: N=%d, %d initial infections, %d days",
            sim.population_size, sim.initial_infections, sim.simulation_days,
        )

        stats = self.initialize()
        if on_day is not None:
            on_day(stats)

        extinction_day = None
        while self.population.day < sim.simulation_days:
            stats = self.step()
            if on_day is not None:
                on_day(stats)
            if stats.infected == 0:
                if extinction_day is None:
                    extinction_day = stats.day
                if sim.stop_on_extinction:
                    logger.info("Epidemic ended on day %d", stats.day)
                    break

        result = SimResult.from_history(
            self.history,
            population_size=self.population.size,
            extinction_day=extinction_day,
            wasted_seeds=self.population.wasted_seeds,
            seed_entropy=entropy_of(self.rng),
        )
        logger.info(
            "Run finished after %d days: attack rate %.1f%%",
            result.days_run, 100.0 * result.attack_rate,
        )
        return result


def run_simulation(
    config: SimulationConfig,
    rng: Optional[np.random.Generator] = None,
    on_day: Optional[Callable[[DailyStats], None]] = None,
) -> SimResult:
    """Build a SIRSimulation from ``config`` and run it to completion."""
    return SIRSimulation(config, rng=rng).run(on_day=on_day)
