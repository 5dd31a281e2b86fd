"""Core data types for SIRSim.

This module is the single home for:
  - HealthState: the three SIR compartments
  - InvalidArgument / ConfigurationError: the error taxonomy

All modules import these from here.
"""

from enum import IntEnum


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class HealthState(IntEnum):
    """SIR compartments.

    S → I  (contact with an infected person, or initial seeding)
    I → R  (infection countdown reaches zero)
    R is terminal: lifelong immunity, no reinfection.
    """
    SUSCEPTIBLE = 0
    INFECTED    = 1
    RECOVERED   = 2

    @property
    def label(self) -> str:
        return self.name.lower()


# ═══════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════

class InvalidArgument(ValueError):
    """A person was asked to start an infection with a non-positive duration."""


class ConfigurationError(ValueError):
    """Simulation parameters failed validation."""
