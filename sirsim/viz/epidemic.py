"""Epidemic trajectory plots for SIRSim.

Every function:
  - Accepts a SimResult as input
  - Returns a matplotlib Figure
  - Has an optional ``save_path`` parameter (saves PNG when given)
  - Uses the shared dark theme from ``sirsim.viz.style``

matplotlib backend is forced to Agg (no display) on import.
"""

from __future__ import annotations

import matplotlib
matplotlib.use('Agg')

from typing import Optional, TYPE_CHECKING

import matplotlib.pyplot as plt

from sirsim.viz.style import (
    COMPARTMENT_COLORS,
    NEW_CASES_COLOR,
    TEXT_COLOR,
    dark_figure,
    dark_legend,
    save_figure,
)

if TYPE_CHECKING:
    from sirsim.model import SimResult


def plot_epidemic_curve(
    result: 'SimResult',
    save_path: Optional[str] = None,
    show_new_cases: bool = True,
) -> plt.Figure:
    """Classic SIR curves: S, I and R over time.

    Marks the infection peak and, when the epidemic burned out inside the
    run, the extinction day.

    Args:
        result: SimResult from a completed run.
        save_path: Optional path to save figure.
        show_new_cases: Overlay daily new infections as bars.

    Returns:
        matplotlib Figure.
    """
    fig, ax = dark_figure(figsize=(12, 6))
    days = result.days()

    if show_new_cases:
        ax.bar(days, result.daily_new_infections, color=NEW_CASES_COLOR,
               alpha=0.35, width=1.0, label='New infections')

    ax.plot(days, result.daily_S, color=COMPARTMENT_COLORS['S'],
            linewidth=2, label='Susceptible')
    ax.plot(days, result.daily_I, color=COMPARTMENT_COLORS['I'],
            linewidth=2, label='Infected')
    ax.plot(days, result.daily_R, color=COMPARTMENT_COLORS['R'],
            linewidth=2, label='Recovered')

    ax.axvline(result.peak_day, color=TEXT_COLOR, linestyle=':',
               linewidth=1, alpha=0.6,
               label=f'Peak ({result.peak_infected} on day {result.peak_day})')
    if result.extinction_day is not None:
        ax.axvline(result.extinction_day, color=COMPARTMENT_COLORS['R'],
                   linestyle='--', linewidth=1, alpha=0.6,
                   label=f'Extinct (day {result.extinction_day})')

    ax.set_xlabel('Day', fontsize=12)
    ax.set_ylabel('Individuals', fontsize=12)
    ax.set_title(f'SIR Epidemic Curve (N = {result.population_size})',
                 fontsize=15, fontweight='bold')
    ax.set_xlim(0, max(result.days_run, 1))
    ax.set_ylim(0, result.population_size * 1.02)
    dark_legend(ax, loc='center right')

    if save_path:
        save_figure(fig, save_path)
    return fig


def plot_compartment_stack(
    result: 'SimResult',
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Stacked-area view of the S/I/R partition (always sums to N)."""
    fig, ax = dark_figure(figsize=(12, 6))
    days = result.days()

    ax.stackplot(
        days,
        result.daily_I, result.daily_R, result.daily_S,
        colors=[COMPARTMENT_COLORS['I'], COMPARTMENT_COLORS['R'],
                COMPARTMENT_COLORS['S']],
        alpha=0.8,
        labels=['Infected', 'Recovered', 'Susceptible'],
    )

    ax.set_xlabel('Day', fontsize=12)
    ax.set_ylabel('Individuals', fontsize=12)
    ax.set_title(f'Compartment Composition (attack rate '
                 f'{100.0 * result.attack_rate:.1f}%)',
                 fontsize=15, fontweight='bold')
    ax.set_xlim(0, max(result.days_run, 1))
    ax.set_ylim(0, result.population_size)
    dark_legend(ax, loc='upper right')

    if save_path:
        save_figure(fig, save_path)
    return fig
