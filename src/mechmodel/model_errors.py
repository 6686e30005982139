"""
Model-error definitions.

A ``ModelErrorDef`` describes a deterministic perturbation that a mechanism
model applies to a copy of itself (see ``MechanismModel.apply_errors``).
Perturbed models are used to evaluate estimator robustness and sensitivity
to modeling errors.

Error Types
-----------
    0 : no error
    1 : gravity + initial position error
    2 : initial position error
    3 : initial velocity error
    4 : damping coefficient, relative reduction
    5 : damping coefficient, absolute increase
"""

from dataclasses import dataclass
from enum import IntEnum

from mechmodel.exceptions import UnhandledConfigurationError


class ErrorType(IntEnum):
    """Recognized model-error tags."""

    NONE = 0
    GRAVITY_AND_INITIAL_POSITION = 1
    INITIAL_POSITION = 2
    INITIAL_VELOCITY = 3
    DAMPING_RELATIVE = 4
    DAMPING_ABSOLUTE = 5


@dataclass(frozen=True)
class ModelErrorDef:
    """
    Definition of a model error.

    Attributes
    ----------
    error_type : int
        Error tag, one of ``ErrorType``. Not validated here: an unknown tag
        is rejected by the model that tries to apply it.
    error_scale : float
        Multiplier for the perturbation magnitude. Default 1.0.
    """

    error_type: int = ErrorType.NONE
    error_scale: float = 1.0


def resolve_error_type(value) -> ErrorType:
    """
    Map a raw error tag to an ``ErrorType``.

    Raises
    ------
    UnhandledConfigurationError
        If ``value`` is not a recognized tag.
    """
    try:
        return ErrorType(value)
    except ValueError as exc:
        available = ", ".join(str(int(e)) for e in ErrorType)
        raise UnhandledConfigurationError(f"Unhandled error type {value!r}. Available: {available}") from exc
