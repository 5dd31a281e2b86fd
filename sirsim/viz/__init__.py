"""SIRSim visualization library.

Modules:
  - style: Dark theme colours and helpers
  - epidemic: S/I/R trajectory plots
"""

from sirsim.viz.style import (  # noqa: F401
    COMPARTMENT_COLORS,
    DARK_BG,
    DARK_PANEL,
    GRID_COLOR,
    TEXT_COLOR,
    apply_dark_theme,
    dark_figure,
    save_figure,
)

from sirsim.viz.epidemic import (  # noqa: F401
    plot_compartment_stack,
    plot_epidemic_curve,
)
