"""Tests for sirsim.model: simulation orchestrator and results.

Acceptance criteria:
  - Invalid configuration rejected at construction (ConfigurationError)
  - Day 0 recorded right after seeding
  - Early stop on the first day with zero infected (when enabled)
  - Identical seeds → identical trajectories
  - Summary statistics consistent with final counts
"""

import warnings

import numpy as np
import pytest

from sirsim.config import SimulationConfig, config_from_dict
from sirsim.model import DailyStats, SIRSimulation, SimResult, run_simulation
from sirsim.rng import make_rng
from sirsim.types import ConfigurationError


# ═══════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════

def _config(**kwargs) -> SimulationConfig:
    """Build a config from flat keyword overrides."""
    sim_keys = {'population_size', 'initial_infections', 'simulation_days',
                'seed', 'stop_on_extinction'}
    data = {'simulation': {}, 'disease': {}}
    for key, value in kwargs.items():
        data['simulation' if key in sim_keys else 'disease'][key] = value
    return config_from_dict(data)


@pytest.fixture
def no_contact_config() -> SimulationConfig:
    """N=10, one seed, duration 3, no contacts."""
    return _config(population_size=10, initial_infections=1, simulation_days=90,
                   seed=1, contacts_per_day=0, infection_duration=3)


@pytest.fixture
def outbreak_config() -> SimulationConfig:
    return _config(population_size=500, initial_infections=5, simulation_days=120,
                   seed=42, contacts_per_day=4, infection_probability=0.3,
                   infection_duration=5)


# ═══════════════════════════════════════════════════════════════════════
# CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════════

class TestConstruction:
    def test_invalid_config_raises(self):
        config = SimulationConfig()
        config.simulation.initial_infections = 0
        with pytest.raises(ConfigurationError):
            SIRSimulation(config)

    def test_population_configured(self, outbreak_config):
        sim = SIRSimulation(outbreak_config)
        pop = sim.population
        assert pop.size == 500
        assert pop.transmission_probability == 0.3
        assert pop.contacts_per_day == 4
        assert pop.infection_duration == 5
        assert pop.rng is sim.rng

    def test_injected_rng(self, outbreak_config):
        rng = make_rng(5)
        assert SIRSimulation(outbreak_config, rng=rng).population.rng is rng

    def test_suspicious_config_warns_once(self):
        with pytest.warns(UserWarning) as record:
            config = _config(population_size=5, initial_infections=1,
                             contacts_per_day=10)
            SIRSimulation(config)
        assert len(record) == 1

    def test_hand_built_config_checked_without_warning(self):
        config = SimulationConfig()
        config.simulation.population_size = 5
        config.simulation.initial_infections = 1
        config.disease.contacts_per_day = 10
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            SIRSimulation(config)


# ═══════════════════════════════════════════════════════════════════════
# INITIALIZATION & STEPPING
# ═══════════════════════════════════════════════════════════════════════

class TestInitialize:
    def test_day_zero_counts(self, no_contact_config):
        stats = SIRSimulation(no_contact_config).initialize()
        assert stats == DailyStats(day=0, susceptible=9, infected=1,
                                   recovered=0, new_infections=1)

    def test_idempotent(self, no_contact_config):
        sim = SIRSimulation(no_contact_config)
        first = sim.initialize()
        second = sim.initialize()
        assert first == second
        assert sim.population.n_infected == 1
        assert len(sim.history) == 1

    def test_susceptible_seeding_infects_exact_count(self):
        config = _config(population_size=6, initial_infections=6,
                         seeding="susceptible", contacts_per_day=0, seed=3)
        stats = SIRSimulation(config).initialize()
        assert stats.infected == 6
        assert stats.susceptible == 0

    def test_uniform_seeding_never_exceeds_count(self):
        config = _config(population_size=4, initial_infections=4,
                         seeding="uniform", contacts_per_day=0, seed=3)
        sim = SIRSimulation(config)
        stats = sim.initialize()
        assert 1 <= stats.infected <= 4
        assert stats.infected + sim.population.wasted_seeds == 4


class TestStep:
    def test_step_initializes_first(self, no_contact_config):
        sim = SIRSimulation(no_contact_config)
        stats = sim.step()
        assert stats.day == 1
        assert [h.day for h in sim.history] == [0, 1]

    def test_countdown_scenario(self, no_contact_config):
        sim = SIRSimulation(no_contact_config)
        sim.initialize()
        rows = [sim.step() for _ in range(3)]
        assert [(r.susceptible, r.infected, r.recovered) for r in rows] == [
            (9, 1, 0), (9, 1, 0), (9, 0, 1),
        ]


# ═══════════════════════════════════════════════════════════════════════
# FULL RUNS
# ═══════════════════════════════════════════════════════════════════════

class TestRun:
    def test_stops_on_extinction(self, no_contact_config):
        result = SIRSimulation(no_contact_config).run()
        assert result.days_run == 3
        assert result.extinction_day == 3
        np.testing.assert_array_equal(result.daily_I, [1, 1, 1, 0])
        np.testing.assert_array_equal(result.daily_S, [9, 9, 9, 9])
        np.testing.assert_array_equal(result.daily_R, [0, 0, 0, 1])

    def test_runs_full_length_without_early_stop(self):
        config = _config(population_size=10, initial_infections=1,
                         simulation_days=12, stop_on_extinction=False,
                         contacts_per_day=0, infection_duration=3, seed=1)
        result = run_simulation(config)
        assert result.days_run == 12
        assert len(result.daily_S) == 13
        assert result.extinction_day == 3

    def test_day_limit(self):
        config = _config(population_size=10, initial_infections=1,
                         simulation_days=2, contacts_per_day=0,
                         infection_duration=50, seed=1)
        result = run_simulation(config)
        assert result.days_run == 2
        assert result.extinction_day is None
        assert result.final_counts == (9, 1, 0)

    def test_callback_sees_every_day(self, no_contact_config):
        seen = []
        SIRSimulation(no_contact_config).run(on_day=seen.append)
        assert [s.day for s in seen] == [0, 1, 2, 3]
        assert all(isinstance(s, DailyStats) for s in seen)

    def test_partition_every_day(self, outbreak_config):
        result = run_simulation(outbreak_config)
        totals = result.daily_S + result.daily_I + result.daily_R
        assert np.all(totals == 500)

    def test_susceptibles_non_increasing(self, outbreak_config):
        result = run_simulation(outbreak_config)
        assert np.all(np.diff(result.daily_S) <= 0)
        assert np.all(np.diff(result.daily_R) >= 0)

    def test_new_infections_match_susceptible_drop(self, outbreak_config):
        result = run_simulation(outbreak_config)
        np.testing.assert_array_equal(
            result.daily_new_infections[1:], -np.diff(result.daily_S)
        )

    def test_outbreak_spreads(self, outbreak_config):
        """R0 ≈ 4 × 0.3 × 5 = 6 → large epidemic."""
        result = run_simulation(outbreak_config)
        assert result.attack_rate > 0.8
        assert result.peak_infected > 50

    def test_zero_probability_no_spread(self):
        config = _config(population_size=100, initial_infections=3,
                         infection_probability=0.0, contacts_per_day=10,
                         seeding="susceptible", seed=4)
        result = run_simulation(config)
        assert result.total_affected == 3
        assert result.final_counts[0] == 97


class TestDeterminism:
    def test_same_seed_same_trajectory(self, outbreak_config):
        r1 = run_simulation(outbreak_config)
        r2 = run_simulation(outbreak_config)
        np.testing.assert_array_equal(r1.daily_S, r2.daily_S)
        np.testing.assert_array_equal(r1.daily_I, r2.daily_I)
        np.testing.assert_array_equal(r1.daily_R, r2.daily_R)

    def test_injected_rng_matches_config_seed(self, outbreak_config):
        r1 = run_simulation(outbreak_config)
        outbreak_config.simulation.seed = None
        r2 = run_simulation(outbreak_config, rng=make_rng(42))
        np.testing.assert_array_equal(r1.daily_I, r2.daily_I)

    def test_seed_entropy_recorded(self, outbreak_config):
        assert run_simulation(outbreak_config).seed_entropy == 42


# ═══════════════════════════════════════════════════════════════════════
# RESULT SUMMARY
# ═══════════════════════════════════════════════════════════════════════

class TestSimResult:
    def test_summary_no_contacts(self, no_contact_config):
        s = SIRSimulation(no_contact_config).run().summary()
        assert s['susceptible'] == 9
        assert s['recovered'] == 1
        assert s['total_affected'] == 1
        assert s['attack_rate_pct'] == 10.0
        assert s['susceptible_pct'] == 90.0
        assert s['peak_infected'] == 1
        assert s['peak_day'] == 0

    def test_percentages_sum_to_100(self, outbreak_config):
        s = run_simulation(outbreak_config).summary()
        total = s['susceptible_pct'] + s['infected_pct'] + s['recovered_pct']
        assert total == pytest.approx(100.0, abs=0.2)

    def test_rows_round_trip(self, no_contact_config):
        result = SIRSimulation(no_contact_config).run()
        rows = result.rows()
        assert len(rows) == result.days_run + 1
        assert rows[-1] == DailyStats(3, 9, 0, 1, 0)

    def test_from_history(self):
        history = [DailyStats(0, 8, 2, 0, 2), DailyStats(1, 5, 5, 0, 3),
                   DailyStats(2, 5, 3, 2, 0)]
        result = SimResult.from_history(history, population_size=10)
        assert result.days_run == 2
        assert result.peak_infected == 5
        assert result.peak_day == 1
        assert result.attack_rate == pytest.approx(0.5)

    def test_daily_stats_total(self):
        assert DailyStats(4, 3, 2, 1).total == 6
