"""Population-level transmission and progression engine.

Owns a fixed list of Person objects and advances them one day at a time.
The daily step is split into three phases so the outcome does not depend
on member iteration order:

  1. Transmission:  every person infected at the START of the day makes
                    ``contacts_per_day`` uniform random contacts (with
                    replacement, self-contact allowed). A contact that was
                    susceptible at the start of the day is exposed with
                    probability ``transmission_probability``. Nothing is
                    mutated yet.
  2. Progression:   advance_day() on every member exactly once.
  3. Infection:     infect() every exposed member. Fresh infections are
                    therefore not decremented on the day they occur.

Then the day counter is incremented and S/I/R counts are recomputed.

Parameters are stored verbatim with no validation; range checking belongs
to sirsim.config.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from sirsim.person import Person
from sirsim.rng import make_rng
from sirsim.types import HealthState

logger = logging.getLogger(__name__)


class Population:
    """A well-mixed population of N individuals.

    Args:
        size: Number of individuals (fixed for the lifetime of the object).
        rng: Random generator to draw from. Takes precedence over ``seed``.
        seed: Seed for a new generator when ``rng`` is not given
            (None = fresh OS entropy).
    """

    def __init__(
        self,
        size: int,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        self.members: List[Person] = [Person() for _ in range(int(size))]
        self.rng = rng if rng is not None else make_rng(seed)
        self.day: int = 0

        # Transmission parameters (set by the driver before day 1)
        self.transmission_probability: float = 0.0
        self.contacts_per_day: int = 0
        self.infection_duration: int = 0

        # Cached compartment counts
        self.n_susceptible: int = len(self.members)
        self.n_infected: int = 0
        self.n_recovered: int = 0

        # Uniform seeding draws that landed on a non-susceptible member
        self.wasted_seeds: int = 0

    def __len__(self) -> int:
        return len(self.members)

    def __repr__(self) -> str:
        return (
            f"Population(N={self.size}, day={self.day}, "
            f"S={self.n_susceptible}, I={self.n_infected}, R={self.n_recovered})"
        )

    @property
    def size(self) -> int:
        return len(self.members)

    def configure(
        self,
        transmission_probability: Optional[float] = None,
        contacts_per_day: Optional[int] = None,
        infection_duration: Optional[int] = None,
    ) -> None:
        """Set any subset of the transmission parameters."""
        if transmission_probability is not None:
            self.transmission_probability = transmission_probability
        if contacts_per_day is not None:
            self.contacts_per_day = contacts_per_day
        if infection_duration is not None:
            self.infection_duration = infection_duration

    # ── seeding ──────────────────────────────────────────────────────

    def seed_random_infection(self, susceptible_only: bool = False) -> Optional[int]:
        """Infect one randomly chosen member.

        By default the target is drawn uniformly from ALL members, so a draw
        that lands on someone already infected or recovered is wasted. With
        ``susceptible_only=True`` the draw is restricted to current
        susceptibles, which always makes progress while any remain.

        Returns:
            Index of the chosen member, or None if there was nobody to draw.

        Raises:
            InvalidArgument: If infection_duration is not positive.
        """
        if susceptible_only:
            candidates = np.flatnonzero(self.states() == HealthState.SUSCEPTIBLE)
            if len(candidates) == 0:
                return None
            index = int(candidates[self.rng.integers(0, len(candidates))])
        else:
            if self.size == 0:
                return None
            index = int(self.rng.integers(0, self.size))

        self._seed_member(index)
        self.update_counts()
        return index

    def seed_random_infections(
        self, count: int, susceptible_only: bool = False,
    ) -> List[int]:
        """Seed ``count`` infections with a single draw and a single recount.

        Uniform mode draws ``count`` indices with replacement, so repeats
        and already-infected targets are wasted exactly as with repeated
        seed_random_infection() calls. Susceptible-only mode draws
        distinct current susceptibles, capped at how many there are.

        Returns:
            Indices of the chosen members, in draw order.
        """
        count = max(int(count), 0)
        if susceptible_only:
            candidates = np.flatnonzero(self.states() == HealthState.SUSCEPTIBLE)
            k = min(count, len(candidates))
            chosen = self.rng.choice(candidates, size=k, replace=False) if k else []
        else:
            if self.size == 0 or count == 0:
                return []
            chosen = self.rng.integers(0, self.size, size=count)

        indices = [int(i) for i in chosen]
        for index in indices:
            self._seed_member(index)
        self.update_counts()
        return indices

    def _seed_member(self, index: int) -> None:
        if not self.members[index].infect(self.infection_duration):
            self.wasted_seeds += 1
            logger.debug("Seed draw hit non-susceptible member %d", index)

    # ── daily step ───────────────────────────────────────────────────

    def advance_one_day(self) -> int:
        """Advance every member by one day.

        Returns:
            Number of members newly infected through contact today.
        """
        exposed = self._draw_exposures()

        for person in self.members:
            person.advance_day()

        new_infections = 0
        for index in exposed:
            if self.members[index].infect(self.infection_duration):
                new_infections += 1

        self.day += 1
        self.update_counts()
        logger.debug(
            "Day %d: S=%d I=%d R=%d (+%d new)",
            self.day, self.n_susceptible, self.n_infected, self.n_recovered,
            new_infections,
        )
        return new_infections

    def _draw_exposures(self) -> np.ndarray:
        """Phase 1: decide who gets exposed today, from start-of-day states.

        Each infected member gets one row of ``contacts_per_day`` contact
        indices and one row of uniform draws. A draw u in [0, 1) transmits
        when u < p, so p = 0 never transmits and p = 1 always does.
        """
        n_contacts = max(int(self.contacts_per_day), 0)
        states = self.states()
        infected_idx = np.flatnonzero(states == HealthState.INFECTED)
        if n_contacts == 0 or len(infected_idx) == 0:
            return np.empty(0, dtype=np.int64)

        susceptible = states == HealthState.SUSCEPTIBLE
        shape = (len(infected_idx), n_contacts)
        contacts = self.rng.integers(0, self.size, size=shape)
        draws = self.rng.random(shape)

        # Strict <, not the textbook u <= p; they differ only on an exact tie
        hit = susceptible[contacts] & (draws < self.transmission_probability)
        return np.unique(contacts[hit])

    # ── counts & inspection ──────────────────────────────────────────

    def states(self) -> np.ndarray:
        """Current HealthState of every member as an int8 array."""
        return np.fromiter(
            (int(p.status) for p in self.members),
            dtype=np.int8,
            count=len(self.members),
        )

    def update_counts(self) -> None:
        """Recompute the cached S/I/R counts from member states."""
        counts = np.bincount(self.states(), minlength=len(HealthState))
        self.n_susceptible = int(counts[HealthState.SUSCEPTIBLE])
        self.n_infected = int(counts[HealthState.INFECTED])
        self.n_recovered = int(counts[HealthState.RECOVERED])

    def counts(self) -> Tuple[int, int, int]:
        """(susceptible, infected, recovered) as of the last update."""
        return self.n_susceptible, self.n_infected, self.n_recovered
