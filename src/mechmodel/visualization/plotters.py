"""
Plotting utilities for mechmodel.

This module renders model output with matplotlib:
- Mechanism skeletons
- Coordinate time series
- Constraint residuals along a trajectory
- Nominal versus error-injected comparisons
"""

from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from mechmodel.base import MechanismModel, Skeleton

# =============================================================================
# Skeleton
# =============================================================================


def draw_skeleton(
    skeleton: Skeleton,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (6, 6),
    linewidth: float = 2.0,
) -> Tuple[Figure, Axes]:
    """
    Draw a mechanism skeleton.

    Parameters
    ----------
    skeleton : Skeleton
        Output of ``MechanismModel.plot_skeleton``.
    ax : Axes, optional
        Existing axes. A new figure is created if None.
    figsize : tuple
        Figure size, used only when creating a figure.
    linewidth : float
        Segment line width.

    Returns
    -------
    fig : Figure
    ax : Axes

    Example
    -------
    >>> skel = model.plot_skeleton(model.q_init_approx, "b-", autoscale=True)
    >>> fig, ax = draw_skeleton(skel)
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    for start, end in skeleton.segments:
        ax.plot([start[0], end[0]], [start[1], end[1]], skeleton.style, linewidth=linewidth)

    if skeleton.equal_aspect:
        ax.set_aspect("equal")
    if skeleton.xlim is not None:
        ax.set_xlim(skeleton.xlim)
    if skeleton.ylim is not None:
        ax.set_ylim(skeleton.ylim)

    return fig, ax


# =============================================================================
# Time Series Plots
# =============================================================================


def plot_coordinates(
    t: np.ndarray,
    q: np.ndarray,
    coord_names: Optional[Sequence[str]] = None,
    title: str = "Coordinates",
    figsize: Tuple[float, float] = (10, 8),
    sharex: bool = True,
    grid: bool = True,
) -> Tuple[Figure, np.ndarray]:
    """
    Plot dependent coordinates over time.

    Parameters
    ----------
    t : np.ndarray, shape (N,)
        Time array.
    q : np.ndarray, shape (N, n)
        Coordinate trajectory.
    coord_names : sequence of str, optional
        Names for each coordinate. Defaults to q_0, q_1, etc.
    title : str
        Figure title.
    figsize : tuple
        Figure size (width, height).
    sharex : bool
        Share x-axis across subplots.
    grid : bool
        Show grid.

    Returns
    -------
    fig : Figure
    axes : ndarray of Axes
    """
    n_coords = q.shape[1]

    if coord_names is None:
        coord_names = [f"q_{i}" for i in range(n_coords)]

    n_cols = min(2, n_coords)
    n_rows = int(np.ceil(n_coords / n_cols))

    fig, axes = plt.subplots(n_rows, n_cols, figsize=figsize, sharex=sharex)
    axes = np.atleast_1d(axes).flatten()

    for i in range(n_coords):
        axes[i].plot(t, q[:, i], linewidth=1.5)
        axes[i].set_ylabel(coord_names[i])
        if grid:
            axes[i].grid(True, alpha=0.3)

    # Hide unused subplots
    for i in range(n_coords, len(axes)):
        axes[i].set_visible(False)

    for i in range(n_cols):
        idx = (n_rows - 1) * n_cols + i
        if idx < len(axes):
            axes[idx].set_xlabel("Time [s]")

    fig.suptitle(title)
    fig.tight_layout()

    return fig, axes


def plot_constraint_residuals(
    t: np.ndarray,
    q: np.ndarray,
    model: MechanismModel,
    title: str = "Constraint Residuals",
    figsize: Tuple[float, float] = (10, 6),
    ax: Optional[Axes] = None,
) -> Tuple[Figure, Axes]:
    """
    Plot each row of Φ(q) along a trajectory.

    Residuals should stay near zero; drift indicates integration error.

    Parameters
    ----------
    t : np.ndarray, shape (N,)
        Time array.
    q : np.ndarray, shape (N, n)
        Coordinate trajectory.
    model : MechanismModel
        Model whose constraints are evaluated.
    title : str
        Title.
    figsize : tuple
        Figure size.
    ax : Axes, optional
        Existing axes.

    Returns
    -------
    fig : Figure
    ax : Axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    residuals = np.array([model.phi(q_k) for q_k in q])

    for i in range(residuals.shape[1]):
        ax.plot(t, residuals[:, i], label=f"Φ[{i}]", linewidth=1.5)

    ax.axhline(0, color="k", linestyle="--", alpha=0.5)
    ax.set_xlabel("Time [s]")
    ax.set_ylabel("Residual")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend()

    return fig, ax


# =============================================================================
# Comparison Plots
# =============================================================================


def plot_comparison(
    t_list: List[np.ndarray],
    q_list: List[np.ndarray],
    labels: List[str],
    coord_idx: int = 0,
    ylabel: Optional[str] = None,
    title: str = "Comparison",
    figsize: Tuple[float, float] = (10, 6),
    ax: Optional[Axes] = None,
) -> Tuple[Figure, Axes]:
    """
    Compare one coordinate across several trajectories.

    Typically the nominal model against its error-injected copies.

    Parameters
    ----------
    t_list : list of arrays
        Time arrays.
    q_list : list of arrays
        Coordinate trajectories.
    labels : list of str
        Labels for each trajectory.
    coord_idx : int
        Which coordinate to plot.
    ylabel : str, optional
        Y-axis label.
    title : str
        Title.
    figsize : tuple
        Figure size.
    ax : Axes, optional
        Existing axes.

    Returns
    -------
    fig : Figure
    ax : Axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    for t, q, label in zip(t_list, q_list, labels):
        ax.plot(t, q[:, coord_idx], linewidth=1.5, label=label)

    ax.set_xlabel("Time [s]")
    ax.set_ylabel(ylabel or f"q[{coord_idx}]")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend()

    return fig, ax
