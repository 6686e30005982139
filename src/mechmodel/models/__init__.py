"""
Mechanism model implementations.

This module contains concrete mechanism models. Each model implements the
``MechanismModel`` contract for one topology.

Available Models
----------------
PendulumModel : Planar pendulum with one link (natural coordinates + angle)
"""

from mechmodel.models.pendulum import (
    PendulumModel,
    PendulumParams,
    create_pendulum,
    default_params,
)

__all__ = [
    # Pendulum
    "PendulumModel",
    "PendulumParams",
    "create_pendulum",
    "default_params",
]
