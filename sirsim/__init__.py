"""SIRSim: agent-based Susceptible–Infected–Recovered epidemic model.

A well-mixed, individual-based model in which:
  - Each person is a three-state machine with an infection countdown
  - Infected people make random daily contacts across the population
  - Susceptible contacts are infected with a fixed per-contact probability
  - Infection lasts a fixed number of days, then confers permanent immunity

Modules:
  - types:      HealthState enum and error classes
  - person:     Individual state machine
  - population: Daily transmission / progression engine
  - config:     YAML configuration and validation
  - model:      Simulation orchestrator and results
  - reporting:  Text reports, CSV/JSON export
  - viz:        Epidemic curve plots
"""

__version__ = "0.1.0"
