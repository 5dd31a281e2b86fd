"""Individual-level SIR state machine.

A Person is SUSCEPTIBLE until infected, INFECTED for a fixed countdown of
days, then RECOVERED for good. The countdown is set once at infection time
and decremented by one per simulated day (COUNTDOWN semantics: the day the
timer reaches zero, the person recovers).

Transitions:
  SUSCEPTIBLE --infect(d)-->  INFECTED (remaining_days = d)
  INFECTED    --advance_day--> INFECTED (remaining_days - 1)  while > 0
  INFECTED    --advance_day--> RECOVERED (remaining_days = 0)

Calling infect() on an INFECTED or RECOVERED person is a silent no-op.
"""

from __future__ import annotations

from sirsim.types import HealthState, InvalidArgument


class Person:
    """One member of the population.

    Invariant: ``status is INFECTED`` exactly when ``remaining_days > 0``.
    """

    def __init__(self):
        self._state: HealthState = HealthState.SUSCEPTIBLE
        self._remaining_days: int = 0

    def __repr__(self) -> str:
        if self._state is HealthState.INFECTED:
            return f"Person(infected, {self._remaining_days}d left)"
        return f"Person({self._state.label})"

    # ── transitions ──────────────────────────────────────────────────

    def infect(self, duration: int) -> bool:
        """Start an infection lasting ``duration`` days.

        Args:
            duration: Days until recovery. Must be positive.

        Returns:
            True if the person went from SUSCEPTIBLE to INFECTED, False if
            they were already infected or recovered (nothing changes).

        Raises:
            InvalidArgument: If duration <= 0 (checked before the state).
        """
        if duration <= 0:
            raise InvalidArgument(
                f"infection duration must be positive, got {duration}"
            )
        if self._state is not HealthState.SUSCEPTIBLE:
            return False
        self._state = HealthState.INFECTED
        self._remaining_days = int(duration)
        return True

    def advance_day(self) -> None:
        """Progress the infection countdown by one day."""
        if self._state is not HealthState.INFECTED:
            return
        self._remaining_days -= 1
        if self._remaining_days <= 0:
            self._state = HealthState.RECOVERED
            self._remaining_days = 0

    # ── queries ──────────────────────────────────────────────────────

    @property
    def status(self) -> HealthState:
        return self._state

    @property
    def remaining_days(self) -> int:
        """Days of infection left (0 unless infected)."""
        return self._remaining_days

    @property
    def is_susceptible(self) -> bool:
        return self._state is HealthState.SUSCEPTIBLE

    @property
    def is_infected(self) -> bool:
        return self._state is HealthState.INFECTED

    @property
    def is_recovered(self) -> bool:
        return self._state is HealthState.RECOVERED
