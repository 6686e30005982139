"""
mechmodel - Mechanism physical models for multibody dynamics.

This library provides algebraic models of constrained planar mechanisms
in natural coordinates: constraints, Jacobians, generalized forces and
deterministic model-error injection, for use by external integrators and
state estimators.

Visualization utilities are available in the `mechmodel.visualization` submodule:
    from mechmodel.visualization import draw_skeleton, animate_mechanism
"""

import logging

__version__ = "0.1.0"

from mechmodel.base import MechanismModel, Skeleton
from mechmodel.exceptions import MechanismModelError, UnhandledConfigurationError
from mechmodel.logging_config import setup_logging
from mechmodel.model_errors import ErrorType, ModelErrorDef, resolve_error_type
from mechmodel.models import (
    PendulumModel,
    PendulumParams,
    create_pendulum,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Model errors
    "ErrorType",
    # Core
    "MechanismModel",
    "MechanismModelError",
    "ModelErrorDef",
    # Models - Pendulum
    "PendulumModel",
    "PendulumParams",
    "Skeleton",
    "UnhandledConfigurationError",
    "__version__",
    "create_pendulum",
    "resolve_error_type",
    "setup_logging",
]
