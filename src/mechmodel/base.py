"""
Abstract base class for mechanism physical models.

All mechanism models in mechmodel inherit from this class and must implement
the required abstract methods and class constants. A model describes a
constrained planar multibody system in dependent coordinates ``q`` and is
queried by an external integrator or estimator at every time step.
"""

import dataclasses
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


# =============================================================================
# Skeleton Projection
# =============================================================================


@dataclass
class Skeleton:
    """
    2D line-segment projection of a mechanism configuration.

    Attributes
    ----------
    segments : np.ndarray, shape (n_segments, 2, 2)
        Endpoint pairs, ``segments[k] = [[x_start, y_start], [x_end, y_end]]``.
    style : str
        Matplotlib-style format hint (e.g. ``"k-"``).
    xlim, ylim : tuple of float, optional
        Axis bounds suggested by the model when autoscaling was requested.
    equal_aspect : bool
        Whether the view should use equal axis scaling.
    """

    segments: np.ndarray
    style: str = "k-"
    xlim: Optional[Tuple[float, float]] = None
    ylim: Optional[Tuple[float, float]] = None
    equal_aspect: bool = False

    @property
    def n_segments(self) -> int:
        """Number of line segments."""
        return self.segments.shape[0]


# =============================================================================
# Mechanism Model
# =============================================================================


class MechanismModel(ABC):
    """
    Abstract base class for mechanism models.

    This class defines the interface that all mechanism models must implement:
    constraint evaluation, constraint Jacobians, generalized forces, the
    linearized stiffness/damping pair, model-error injection and a skeleton
    projection for rendering.

    Attributes
    ----------
    params : object
        Model parameters. Structure depends on the specific mechanism.
    M : np.ndarray, shape (n, n)
        Global mass matrix.
    q_init_approx : np.ndarray, shape (n,)
        Initial, approximate position (dependent coordinates).
    zp_init : np.ndarray, shape (len(indep_idxs),)
        Initial velocity of the independent coordinates.

    Notes
    -----
    The gravity scalar ``g`` and the gravity force vector ``Qg`` are coupled:
    assigning ``g`` always recomputes ``Qg``. Subclasses must set ``M``
    before assigning ``g``.
    """

    def __init__(self, params=None):
        """
        Initialize the mechanism model.

        Parameters
        ----------
        params : object, optional
            Model parameters. If None, subclasses should use default parameters.
        """
        self.params = params
        self.M = np.zeros((self.dep_coords_count, self.dep_coords_count))
        self.q_init_approx = np.zeros(self.dep_coords_count)
        self.zp_init = np.zeros(len(self.indep_idxs))
        self._g = 0.0
        self._Qg = np.zeros(self.dep_coords_count)
        self._Qg.setflags(write=False)

    # =========================================================================
    # Abstract Class Constants - Subclasses MUST define these
    # =========================================================================

    @property
    @abstractmethod
    def dep_coords_count(self) -> int:
        """Number of dependent coordinates (length of q)."""
        pass

    @property
    @abstractmethod
    def indep_idxs(self) -> Tuple[int, ...]:
        """Indices (0-based) of the independent coordinates in q."""
        pass

    @property
    @abstractmethod
    def coord_names(self) -> Tuple[str, ...]:
        """Human-readable names for each coordinate in q."""
        pass

    # Indices of the vertical (gravity-aligned) coordinates in q
    vertical_idxs: Tuple[int, ...] = ()

    # =========================================================================
    # Gravity
    # =========================================================================

    @property
    def g(self) -> float:
        """Gravity acceleration along the vertical axis (negative is down)."""
        return self._g

    @g.setter
    def g(self, value: float):
        self._g = float(value)
        self.update_Qg()
        # Keep a parameter dataclass with a gravity field in step
        if dataclasses.is_dataclass(self.params) and hasattr(self.params, "g"):
            self.params = dataclasses.replace(self.params, g=self._g)

    @property
    def Qg(self) -> np.ndarray:
        """Generalized gravity force vector, kept in sync with ``g``. Read-only."""
        return self._Qg

    def set_gravity(self, g: float) -> "MechanismModel":
        """
        Set the gravity scalar and recompute the gravity force vector.

        Returns
        -------
        MechanismModel
            This model, for chaining.
        """
        self.g = g
        return self

    def update_Qg(self) -> None:
        """Recompute ``Qg = M · g_vec`` from the current gravity scalar."""
        g_vec = np.zeros(self.dep_coords_count)
        g_vec[list(self.vertical_idxs)] = self._g
        self._Qg = self.M @ g_vec
        self._Qg.setflags(write=False)
        logger.debug("%s: gravity force updated for g=%g", self.__class__.__name__, self._g)

    # =========================================================================
    # Abstract Methods - Subclasses MUST implement these
    # =========================================================================

    @abstractmethod
    def phi(self, q: np.ndarray) -> np.ndarray:
        """
        Constraint vector Φ(q).

        Parameters
        ----------
        q : np.ndarray, shape (dep_coords_count,)
            Dependent coordinates. May be off the constraint manifold.

        Returns
        -------
        np.ndarray, shape (n_constraints,)
            Constraint residuals, zero for a valid configuration.
        """
        pass

    @abstractmethod
    def jacob_phi_q(self, q: np.ndarray) -> np.ndarray:
        """
        Constraint Jacobian Φ_q = ∂Φ/∂q.

        Returns
        -------
        np.ndarray, shape (n_constraints, dep_coords_count)
        """
        pass

    @abstractmethod
    def jacob_phiqp_times_qp(self, q: np.ndarray, qp: np.ndarray) -> np.ndarray:
        """
        Velocity-dependent term (dΦ_q/dt)·q̇ of the acceleration constraints.

        Returns
        -------
        np.ndarray, shape (n_constraints,)
        """
        pass

    @abstractmethod
    def eval_forces(self, q: np.ndarray, qp: np.ndarray) -> np.ndarray:
        """
        Instantaneous generalized forces Q(q, q̇).

        Returns
        -------
        np.ndarray, shape (dep_coords_count,)
        """
        pass

    @abstractmethod
    def eval_KC(self, q: np.ndarray, dq: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Stiffness and damping matrices of the system.

        Returns
        -------
        K : np.ndarray, shape (dep_coords_count, dep_coords_count)
        C : np.ndarray, shape (dep_coords_count, dep_coords_count)
        """
        pass

    @abstractmethod
    def apply_errors(self, error_def) -> "MechanismModel":
        """
        Return an independent copy of this model with the given errors applied.

        Parameters
        ----------
        error_def : ModelErrorDef
            The perturbation to apply.

        Returns
        -------
        MechanismModel
            A new model. This model is left unchanged.

        Raises
        ------
        UnhandledConfigurationError
            If the error type is not recognized.
        """
        pass

    @abstractmethod
    def plot_skeleton(self, q: np.ndarray, style: str = "k-", autoscale: bool = False) -> Skeleton:
        """
        Project a configuration onto 2D line segments for rendering.

        Parameters
        ----------
        q : np.ndarray, shape (dep_coords_count,)
            Dependent coordinates.
        style : str
            Format hint passed through to the renderer.
        autoscale : bool
            If True, include suggested axis bounds.

        Returns
        -------
        Skeleton
        """
        pass

    # =========================================================================
    # Concrete Methods - Default implementations (can be overridden)
    # =========================================================================

    def jacob_Rq(self, q: np.ndarray, R: np.ndarray) -> np.ndarray:  # noqa: ARG002
        """
        Hypermatrix ∂R/∂q, with Rq[:, :, k] the derivative of R(q) wrt q[k].

        Raises
        ------
        NotImplementedError
            Unless overridden by the concrete model.
        """
        raise NotImplementedError(f"{self.__class__.__name__} does not implement jacob_Rq")

    def eval_kinetic_energy(self, q: np.ndarray, qp: np.ndarray) -> float:  # noqa: ARG002
        """Kinetic energy T = ½·q̇ᵀ·M·q̇."""
        qp = np.asarray(qp, dtype=np.float64)
        return float(0.5 * qp @ self.M @ qp)

    def eval_potential_energy(self, q: np.ndarray) -> float:
        """Gravitational potential energy V = -Qg·q (uniform gravity field)."""
        q = np.asarray(q, dtype=np.float64)
        return float(-self.Qg @ q)

    def eval_energy(self, q: np.ndarray, qp: np.ndarray) -> Dict[str, float]:
        """
        Compute kinetic and potential energy.

        Returns
        -------
        dict
            Dictionary with 'kinetic', 'potential', and 'total' energy.
        """
        T = self.eval_kinetic_energy(q, qp)
        V = self.eval_potential_energy(q)
        return {"kinetic": T, "potential": V, "total": T + V}

    def is_configuration_valid(self, q: np.ndarray, tol: float = 1e-8) -> bool:
        """
        Check whether q satisfies all constraints.

        Returns
        -------
        bool
            True if every constraint residual is within ``tol``.
        """
        return bool(np.max(np.abs(self.phi(q))) <= tol)

    def jacob_phi_q_numerical(self, q: np.ndarray, eps: float = 1e-6) -> np.ndarray:
        """
        Compute Φ_q numerically using central differences.

        Useful for verifying analytical Jacobian implementations.

        Parameters
        ----------
        q : np.ndarray, shape (dep_coords_count,)
            Coordinates at which to compute the Jacobian.
        eps : float, optional
            Perturbation size for finite differences.

        Returns
        -------
        np.ndarray, shape (n_constraints, dep_coords_count)
            Numerical constraint Jacobian.
        """
        q = np.asarray(q, dtype=np.float64)
        n_constraints = len(self.phi(q))

        phiq_num = np.zeros((n_constraints, self.dep_coords_count))
        for j in range(self.dep_coords_count):
            q_plus = q.copy()
            q_minus = q.copy()
            q_plus[j] += eps
            q_minus[j] -= eps
            phiq_num[:, j] = (self.phi(q_plus) - self.phi(q_minus)) / (2 * eps)

        return phiq_num

    def jacob_phiqp_times_qp_numerical(self, q: np.ndarray, qp: np.ndarray, eps: float = 1e-6) -> np.ndarray:
        """
        Compute (dΦ_q/dt)·q̇ numerically.

        Φ_q is differentiated along the direction q̇ with central differences,
        then multiplied by q̇.

        Returns
        -------
        np.ndarray, shape (n_constraints,)
        """
        q = np.asarray(q, dtype=np.float64)
        qp = np.asarray(qp, dtype=np.float64)

        dphiq = (self.jacob_phi_q(q + eps * qp) - self.jacob_phi_q(q - eps * qp)) / (2 * eps)
        return dphiq @ qp

    def verify_jacobians(
        self, q: np.ndarray, qp: np.ndarray, eps: float = 1e-6, tol: float = 1e-5
    ) -> Tuple[bool, Dict[str, float]]:
        """
        Verify analytical Jacobians against numerical computation.

        Parameters
        ----------
        q : np.ndarray, shape (dep_coords_count,)
            Coordinates at which to verify.
        qp : np.ndarray, shape (dep_coords_count,)
            Velocities at which to verify.
        eps : float, optional
            Perturbation size for numerical Jacobians.
        tol : float, optional
            Tolerance for relative error.

        Returns
        -------
        passed : bool
            True if both terms are within tolerance.
        errors : dict
            Relative errors for Φ_q and (dΦ_q/dt)·q̇.
        """
        phiq = self.jacob_phi_q(q)
        phiqpqp = self.jacob_phiqp_times_qp(q, qp)
        phiq_num = self.jacob_phi_q_numerical(q, eps)
        phiqpqp_num = self.jacob_phiqp_times_qp_numerical(q, qp, eps)

        phiq_norm = np.linalg.norm(phiq)
        phiqpqp_norm = np.linalg.norm(phiqpqp)

        if phiq_norm > 0:
            phiq_error = np.linalg.norm(phiq - phiq_num) / phiq_norm
        else:
            phiq_error = np.linalg.norm(phiq - phiq_num)

        if phiqpqp_norm > 0:
            phiqpqp_error = np.linalg.norm(phiqpqp - phiqpqp_num) / phiqpqp_norm
        else:
            phiqpqp_error = np.linalg.norm(phiqpqp - phiqpqp_num)

        passed = (phiq_error < tol) and (phiqpqp_error < tol)
        errors = {"phi_q_relative_error": phiq_error, "phiqp_qp_relative_error": phiqpqp_error}

        return passed, errors

    def __repr__(self) -> str:
        """String representation of the model."""
        return (
            f"{self.__class__.__name__}("
            f"dep_coords_count={self.dep_coords_count}, "
            f"indep_idxs={tuple(self.indep_idxs)}, "
            f"g={self.g})"
        )
