"""
Visualization utilities for mechmodel.

Models only emit geometry (``Skeleton``) and coordinate trajectories; this
module renders them with matplotlib.

Plotting
--------
- draw_skeleton: Mechanism line segments with the model's view hints
- plot_coordinates: Time series of dependent coordinates
- plot_constraint_residuals: Φ(q) along a trajectory
- plot_comparison: Compare trajectories (nominal vs. perturbed models)

Animation
---------
- animate_mechanism: Per-frame skeleton animation
- save_animation: Write an animation to disk

Example
-------
>>> import mechmodel as mm
>>> from mechmodel.visualization import draw_skeleton
>>>
>>> model = mm.create_pendulum()
>>> fig, ax = draw_skeleton(model.plot_skeleton(model.q_init_approx, autoscale=True))
"""

from mechmodel.visualization.animate import animate_mechanism, save_animation
from mechmodel.visualization.plotters import (
    draw_skeleton,
    plot_comparison,
    plot_constraint_residuals,
    plot_coordinates,
)

__all__ = [
    # Animation
    "animate_mechanism",
    # Plotting
    "draw_skeleton",
    "plot_comparison",
    "plot_constraint_residuals",
    "plot_coordinates",
    "save_animation",
]
