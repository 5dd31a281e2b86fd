"""Dark theme styling for SIRSim visualizations.

Provides consistent colors and theme helpers so every plot has the same look.
"""

import matplotlib.pyplot as plt
import numpy as np

# ═══════════════════════════════════════════════════════════════════════
# COLOR PALETTE
# ═══════════════════════════════════════════════════════════════════════

DARK_BG = '#1a1a2e'
DARK_PANEL = '#16213e'
TEXT_COLOR = '#e0e0e0'
GRID_COLOR = '#2a2a4a'

COMPARTMENT_COLORS = {
    'S': '#48c9b0',   # Susceptible, teal
    'I': '#e74c3c',   # Infected, red
    'R': '#2ecc71',   # Recovered, green
}

NEW_CASES_COLOR = '#f39c12'  # amber


# ═══════════════════════════════════════════════════════════════════════
# THEME HELPERS
# ═══════════════════════════════════════════════════════════════════════

def apply_dark_theme(fig=None, ax=None):
    """Dark background for ``fig``; dark panel, light text and faint grid for ``ax``."""
    if fig is not None:
        fig.patch.set_facecolor(DARK_BG)
    if ax is None:
        return
    ax.set_facecolor(DARK_PANEL)
    ax.tick_params(colors=TEXT_COLOR)
    for text in (ax.xaxis.label, ax.yaxis.label, ax.title):
        text.set_color(TEXT_COLOR)
    for spine in ax.spines.values():
        spine.set_color(GRID_COLOR)
    ax.grid(True, color=GRID_COLOR, alpha=0.3, linewidth=0.5)


def dark_figure(nrows=1, ncols=1, figsize=None, **kwargs):
    """plt.subplots() with every panel themed. Epidemic curves read best wide."""
    if figsize is None:
        figsize = (10, 5.5) if nrows * ncols == 1 else (6 * ncols, 4.5 * nrows)
    fig, axes = plt.subplots(nrows, ncols, figsize=figsize, **kwargs)
    apply_dark_theme(fig=fig)
    for ax in np.atleast_1d(axes).flat:
        apply_dark_theme(ax=ax)
    return fig, axes


def dark_legend(ax, **kwargs):
    """Legend styled to match the dark panels."""
    kwargs.setdefault('fontsize', 10)
    return ax.legend(facecolor=DARK_PANEL, edgecolor=GRID_COLOR,
                     labelcolor=TEXT_COLOR, **kwargs)


def save_figure(fig, save_path, dpi=150):
    """Save a figure with tight layout and dark background, then close it."""
    fig.tight_layout()
    fig.savefig(save_path, dpi=dpi, facecolor=fig.get_facecolor(),
                edgecolor='none', bbox_inches='tight')
    plt.close(fig)
