"""
Animation utilities for mechmodel.

Frames are built from ``MechanismModel.plot_skeleton``, so any model that
implements the contract can be animated.
"""

import logging
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation

from mechmodel.base import MechanismModel

logger = logging.getLogger(__name__)


def animate_mechanism(
    model: MechanismModel,
    t: np.ndarray,
    q: np.ndarray,
    style: str = "k-",
    title: str = "Mechanism Animation",
    figsize: Tuple[float, float] = (6, 6),
    interval: int = 20,
    trail_length: int = 50,
    save_path: Optional[str] = None,
) -> FuncAnimation:
    """
    Create animation of a mechanism trajectory.

    Parameters
    ----------
    model : MechanismModel
        Model used to project each frame.
    t : np.ndarray, shape (N,)
        Time array.
    q : np.ndarray, shape (N, n)
        Coordinate trajectory.
    style : str
        Segment format hint.
    title : str
        Animation title.
    figsize : tuple
        Figure size.
    interval : int
        Milliseconds between frames.
    trail_length : int
        Number of past positions of the last segment end to show as trail.
    save_path : str, optional
        Path to save animation (e.g., 'pendulum.gif').

    Returns
    -------
    anim : FuncAnimation
        Matplotlib animation object.
    """
    first = model.plot_skeleton(q[0], style, autoscale=True)
    n_segments = first.n_segments

    # Trail follows the free end of the last segment
    tips = np.array([model.plot_skeleton(q_k).segments[-1, 1] for q_k in q])

    fig, ax = plt.subplots(figsize=figsize)
    ax.set_xlim(first.xlim)
    ax.set_ylim(first.ylim)
    ax.set_aspect("equal")
    ax.grid(True, alpha=0.3)
    ax.set_title(title)

    lines = [ax.plot([], [], style, linewidth=2, zorder=3)[0] for _ in range(n_segments)]
    (trail,) = ax.plot([], [], "b-", alpha=0.3, linewidth=1)
    time_text = ax.text(0.02, 0.98, "", transform=ax.transAxes, verticalalignment="top")

    def init():
        for line in lines:
            line.set_data([], [])
        trail.set_data([], [])
        time_text.set_text("")
        return (*lines, trail, time_text)

    def animate(i):
        segments = model.plot_skeleton(q[i], style).segments
        for line, (start, end) in zip(lines, segments):
            line.set_data([start[0], end[0]], [start[1], end[1]])

        start = max(0, i - trail_length)
        trail.set_data(tips[start : i + 1, 0], tips[start : i + 1, 1])

        time_text.set_text(f"t = {t[i]:.2f}s")

        return (*lines, trail, time_text)

    anim = FuncAnimation(fig, animate, init_func=init, frames=len(t), interval=interval, blit=True)

    if save_path:
        save_animation(anim, save_path, fps=max(1, 1000 // interval))

    return anim


def save_animation(anim: FuncAnimation, path: str, fps: int = 30, dpi: int = 100):
    """
    Save animation to file.

    Parameters
    ----------
    anim : FuncAnimation
        Animation object.
    path : str
        Output path (.gif, .mp4, etc.)
    fps : int
        Frames per second.
    dpi : int
        Resolution.
    """
    writer = "ffmpeg" if path.endswith(".mp4") else "pillow"

    anim.save(path, writer=writer, fps=fps, dpi=dpi)
    logger.info("Saved animation to %s", path)
