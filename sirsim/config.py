"""Configuration system for SIRSim.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → scenario override → command-line / sweep overrides

Sections map 1:1 to YAML top-level keys:
  simulation:  population size, seeding count, run length, RNG seed
  disease:     per-contact probability, contacts per day, infection length
  output:      optional CSV / JSON / plot destinations

Validation happens here, not in the Population: the engine stores its
parameters verbatim and trusts the driver to have called validate_config().
"""

from __future__ import annotations

import dataclasses
import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml

from sirsim.types import ConfigurationError

logger = logging.getLogger(__name__)

SEEDING_MODES = {"uniform", "susceptible"}


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationSection:
    """Run size, length and reproducibility."""
    population_size: int = 1000
    initial_infections: int = 5
    simulation_days: int = 90
    seed: Optional[int] = None       # None = fresh OS entropy each run
    stop_on_extinction: bool = True  # End the run on the first day with I = 0


@dataclass
class DiseaseSection:
    """Transmission and progression parameters.

    seeding:
      "uniform"      initial infections drawn from ALL members;
                     a draw on an already-infected member is wasted
      "susceptible"  draws restricted to current susceptibles
    """
    infection_probability: float = 0.5   # Per-contact transmission probability
    contacts_per_day: int = 6            # Contacts per infected person per day
    infection_duration: int = 5          # Days from infection to recovery
    seeding: str = "uniform"


@dataclass
class OutputSection:
    """Optional output destinations (None = don't write)."""
    csv_path: Optional[str] = None
    json_path: Optional[str] = None
    plot_path: Optional[str] = None


@dataclass
class SimulationConfig:
    """Complete simulation configuration.

    Load from YAML via `load_config()`, or from a plain dict via
    `config_from_dict()`.
    """
    simulation: SimulationSection = field(default_factory=SimulationSection)
    disease: DiseaseSection = field(default_factory=DiseaseSection)
    output: OutputSection = field(default_factory=OutputSection)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Layer ``override`` onto ``base`` in place and return ``base``.

    Sections present in both are merged key by key, so a scenario file
    that sets only ``disease.contacts_per_day`` keeps every other
    disease parameter from the base file.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    unknown = set(data) - valid_fields
    if unknown:
        logger.warning(
            "Ignoring unknown %s keys: %s",
            section_cls.__name__, ", ".join(sorted(unknown)),
        )
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _require_mapping(data: Any, where: str) -> Dict:
    """Return ``data`` if it is a dict (None counts as empty), else raise."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{where} must be a mapping, got {type(data).__name__}"
        )
    return data


def _yaml_to_config(data: Dict) -> SimulationConfig:
    """Convert a merged YAML dict to a SimulationConfig."""
    data = _require_mapping(data, "configuration")
    sections = {}
    section_map = {
        'simulation': SimulationSection,
        'disease': DiseaseSection,
        'output': OutputSection,
    }
    for key, cls in section_map.items():
        section_data = _require_mapping(data.get(key), f"section '{key}'")
        sections[key] = _dict_to_section(cls, section_data)
    return SimulationConfig(**sections)


# ═══════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════

def _is_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool)


def validate_config(config: SimulationConfig, warn: bool = True) -> None:
    """Validate configuration constraints. Raises ConfigurationError on failure.

    Checks:
      - population_size > 0
      - 0 < initial_infections <= population_size
      - simulation_days > 0
      - 0 <= infection_probability <= 1
      - contacts_per_day >= 0
      - infection_duration > 0
      - seeding mode, seed, early-stop flag and output paths are well-formed

    With ``warn=False`` the UserWarning for legal but suspicious settings
    is suppressed (used when re-checking an already loaded config).
    """
    sim = config.simulation
    dis = config.disease

    for name, value in (
        ("simulation.population_size", sim.population_size),
        ("simulation.initial_infections", sim.initial_infections),
        ("simulation.simulation_days", sim.simulation_days),
        ("disease.contacts_per_day", dis.contacts_per_day),
        ("disease.infection_duration", dis.infection_duration),
    ):
        if not _is_int(value):
            raise ConfigurationError(
                f"{name} must be an integer, got {value!r}"
            )

    if sim.population_size <= 0:
        raise ConfigurationError(
            f"simulation.population_size must be > 0, got {sim.population_size}"
        )
    if not (0 < sim.initial_infections <= sim.population_size):
        raise ConfigurationError(
            f"simulation.initial_infections must be in "
            f"(0, population_size={sim.population_size}], "
            f"got {sim.initial_infections}"
        )
    if sim.simulation_days <= 0:
        raise ConfigurationError(
            f"simulation.simulation_days must be > 0, got {sim.simulation_days}"
        )
    if sim.seed is not None and (not _is_int(sim.seed) or sim.seed < 0):
        raise ConfigurationError(
            f"simulation.seed must be a non-negative integer or null, "
            f"got {sim.seed!r}"
        )
    if not isinstance(sim.stop_on_extinction, bool):
        raise ConfigurationError(
            f"simulation.stop_on_extinction must be true or false, "
            f"got {sim.stop_on_extinction!r}"
        )

    if not _is_number(dis.infection_probability):
        raise ConfigurationError(
            f"disease.infection_probability must be a number, "
            f"got {dis.infection_probability!r}"
        )
    if not (0.0 <= dis.infection_probability <= 1.0):
        raise ConfigurationError(
            f"disease.infection_probability must be in [0, 1], "
            f"got {dis.infection_probability}"
        )
    if dis.contacts_per_day < 0:
        raise ConfigurationError(
            f"disease.contacts_per_day must be >= 0, got {dis.contacts_per_day}"
        )
    if dis.infection_duration <= 0:
        raise ConfigurationError(
            f"disease.infection_duration must be > 0, "
            f"got {dis.infection_duration}"
        )
    if not isinstance(dis.seeding, str) or dis.seeding not in SEEDING_MODES:
        raise ConfigurationError(
            f"disease.seeding must be one of {sorted(SEEDING_MODES)}, "
            f"got {dis.seeding!r}"
        )

    for name in ('csv_path', 'json_path', 'plot_path'):
        value = getattr(config.output, name)
        if value is not None and not isinstance(value, (str, Path)):
            raise ConfigurationError(
                f"output.{name} must be a path or null, got {value!r}"
            )

    # Legal but probably a typo: every infected person touches ~everyone daily
    if warn and dis.contacts_per_day >= sim.population_size:
        warnings.warn(
            f"disease.contacts_per_day ({dis.contacts_per_day}) >= "
            f"population_size ({sim.population_size})",
            UserWarning,
            stacklevel=2,
        )


# ═══════════════════════════════════════════════════════════════════════
# ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════════

def config_from_dict(data: Dict) -> SimulationConfig:
    """Build and validate a SimulationConfig from a nested dict."""
    config = _yaml_to_config(data)
    validate_config(config)
    return config


def load_config(
    base_path: Union[str, Path],
    scenario_path: Optional[Union[str, Path]] = None,
    sweep_overrides: Optional[Dict] = None,
) -> SimulationConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → scenario → sweep overrides.
    Each layer overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        scenario_path: Optional scenario override YAML.
        sweep_overrides: Optional dict of overrides (e.g. from the CLI).

    Returns:
        Validated SimulationConfig.

    Raises:
        FileNotFoundError: If base_path or scenario_path doesn't exist.
        ConfigurationError: If a file is not a mapping or validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    with open(base_path) as f:
        config_dict = _require_mapping(yaml.safe_load(f), str(base_path))

    if scenario_path is not None:
        scenario_path = Path(scenario_path)
        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {scenario_path}")
        with open(scenario_path) as f:
            scenario = _require_mapping(yaml.safe_load(f), str(scenario_path))
        deep_merge(config_dict, scenario)

    if sweep_overrides is not None:
        deep_merge(config_dict, sweep_overrides)

    return config_from_dict(config_dict)


def default_config() -> SimulationConfig:
    """Return a SimulationConfig with all default values."""
    config = SimulationConfig()
    validate_config(config)
    return config


def describe_config(config: SimulationConfig) -> str:
    """One-line human-readable summary of the run parameters."""
    sim = config.simulation
    dis = config.disease
    return (
        f"Population: {sim.population_size}, "
        f"Initial Infections: {sim.initial_infections}, "
        f"Days: {sim.simulation_days}, "
        f"Infection Prob: {dis.infection_probability:.2f}, "
        f"Contacts/Day: {dis.contacts_per_day}, "
        f"Duration: {dis.infection_duration} days"
    )
