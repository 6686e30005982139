"""
Planar pendulum with one link.

Modeled in natural coordinates plus one relative angle coordinate. A point
mass sits at the free end of a massless bar pivoting about a fixed point.

Geometry
--------
        (xA, yA)
          o
          |
          |  L
          |
          + 1 (x1, y1)

Coordinate Vector (n=3)
-----------------------
    q = [x1, y1, θ]

    Index 0: x coordinate of point 1 [m]
    Index 1: y coordinate of point 1 [m]
    Index 2: angle of the bar (xA, yA)-(x1, y1) from the +x axis [rad]

    The angle is the independent coordinate.

Constraints (m=2)
-----------------
    Φ₁ = (xA - x1)² + (yA - y1)² - L²
    Φ₂ = y1 - yA - L·sin(θ)     if |sin(θ)| < 0.7
         x1 - xA - L·cos(θ)     otherwise

    The second row uses whichever trigonometric component is larger in
    magnitude so that the Jacobian never becomes singular.

Angle Convention
----------------
    θ = 0: bar along +x
    θ = -π/2: hanging straight down (with g < 0)
"""

import copy
import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np

from mechmodel.base import MechanismModel, Skeleton
from mechmodel.exceptions import UnhandledConfigurationError
from mechmodel.model_errors import ErrorType, ModelErrorDef, resolve_error_type

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

G_DEFAULT = -10.0  # Gravity along y [m/s²], negative is down

# |sin(θ)| threshold selecting the second constraint row
BRANCH_THRESHOLD = 0.7

# Initial position error per unit of error scale [rad]
INIT_POS_ERROR = np.pi / 16

# Initial velocity error per unit of error scale [rad/s]
INIT_VEL_ERROR = 10.0

# Gravity error per unit of error scale [m/s²]
GRAVITY_ERROR = 1.0

# Absolute damping error per unit of error scale [N·m·s/rad]
DAMPING_ERROR = 10.0


# =============================================================================
# Parameter Dataclass
# =============================================================================


@dataclass
class PendulumParams:
    """
    Parameters for the one-link pendulum.

    Attributes
    ----------
    xA, yA : float
        Fixed pivot coordinates [m]. Default (0, 0).
    bar_length : float
        Bar length [m]. Default 1.0.
    mA1 : float
        Point mass at the free end [kg]. Default 1.0.
    g : float
        Gravity along y [m/s²]. Default -10.0.
    C : float
        Viscous damping on the angle [N·m·s/rad]. Default 0.0. May be
        negative in error-injected copies.
    theta0 : float
        Initial bar angle [rad]. Default π/2.
    omega0 : float
        Initial angular velocity [rad/s]. Default 0.0.
    """

    xA: float = 0.0
    yA: float = 0.0
    bar_length: float = 1.0
    mA1: float = 1.0
    g: float = G_DEFAULT
    C: float = 0.0
    theta0: float = np.pi / 2
    omega0: float = 0.0

    def __post_init__(self):
        """Validate parameters."""
        for name in ("xA", "yA", "bar_length", "mA1", "g", "C", "theta0", "omega0"):
            value = getattr(self, name)
            if not np.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.bar_length <= 0:
            raise ValueError(f"Bar length must be positive, got {self.bar_length}")
        if self.mA1 <= 0:
            raise ValueError(f"Mass must be positive, got {self.mA1}")


def default_params() -> PendulumParams:
    """Create default pendulum parameters."""
    return PendulumParams()


# =============================================================================
# Main Model Class
# =============================================================================


class PendulumModel(MechanismModel):
    """
    One-link pendulum in natural coordinates plus one angle.

    Parameters
    ----------
    params : PendulumParams, optional
        Model parameters. If None, uses default parameters.

    Attributes
    ----------
    xA, yA : float
        Pivot coordinates.
    fixed_points : np.ndarray, shape (2,)
        The pivot, for rendering.
    bar_lengths : np.ndarray, shape (1,)
        Length of the single bar.
    mA1 : float
        Point mass.
    C : float
        Damping coefficient acting on θ.

    Examples
    --------
    >>> model = PendulumModel()
    >>> q = model.q_init_approx
    >>> np.allclose(model.phi(q), 0.0)
    True
    >>> bad = model.apply_errors(ModelErrorDef(error_type=1, error_scale=0.5))
    >>> bad.g
    -9.5
    """

    dep_coords_count = 3
    indep_idxs = (2,)
    vertical_idxs = (1,)
    coord_names = ("x1", "y1", "theta")
    BRANCH_THRESHOLD = BRANCH_THRESHOLD

    def __init__(self, params: Optional[PendulumParams] = None):
        if params is None:
            params = default_params()
        super().__init__(params)

        self.xA = params.xA
        self.yA = params.yA
        self.fixed_points = np.array([params.xA, params.yA])
        self.bar_lengths = np.array([params.bar_length])
        self.mA1 = params.mA1
        self.C = params.C

        # Point mass at the free end; θ carries no inertia
        self.M = np.diag([params.mA1, params.mA1, 0.0])

        # Must come after M
        self.g = params.g

        L = params.bar_length
        theta0 = params.theta0
        self.q_init_approx = np.array([params.xA + L * np.cos(theta0), params.yA + L * np.sin(theta0), theta0])
        self.zp_init = np.array([params.omega0])

    # =========================================================================
    # Constraints and Jacobians
    # =========================================================================

    def _use_vertical_row(self, theta: float) -> bool:
        """Branch predicate shared by phi and its Jacobians."""
        return bool(np.abs(np.sin(theta)) < self.BRANCH_THRESHOLD)

    def phi(self, q: np.ndarray) -> np.ndarray:
        """
        Constraint vector Φ(q).

        Parameters
        ----------
        q : np.ndarray, shape (3,)
            Coordinates [x1, y1, θ].

        Returns
        -------
        np.ndarray, shape (2,)
            Constraint residuals.
        """
        x1, y1, theta = np.asarray(q, dtype=np.float64)
        L = self.bar_lengths[0]

        if self._use_vertical_row(theta):
            angle_row = y1 - self.yA - L * np.sin(theta)
        else:
            angle_row = x1 - self.xA - L * np.cos(theta)

        return np.array([(self.xA - x1) ** 2 + (self.yA - y1) ** 2 - L**2, angle_row])

    def jacob_phi_q(self, q: np.ndarray) -> np.ndarray:
        """
        Constraint Jacobian Φ_q.

        Φ_q = [-2(xA-x1)  -2(yA-y1)  0        ]
              [0          1          -L·cos(θ)]    if |sin(θ)| < 0.7
              [1          0          L·sin(θ) ]    otherwise

        Returns
        -------
        np.ndarray, shape (2, 3)
        """
        x1, y1, theta = np.asarray(q, dtype=np.float64)
        L = self.bar_lengths[0]

        if self._use_vertical_row(theta):
            angle_row = [0.0, 1.0, -L * np.cos(theta)]
        else:
            angle_row = [1.0, 0.0, L * np.sin(theta)]

        return np.array([[-2 * (self.xA - x1), -2 * (self.yA - y1), 0.0], angle_row])

    def jacob_phiqp_times_qp(self, q: np.ndarray, qp: np.ndarray) -> np.ndarray:
        """
        Velocity-dependent term (dΦ_q/dt)·q̇.

        dΦ_q/dt = [2ẋ1  2ẏ1  0           ]
                  [0    0    L·sin(θ)·θ̇]    if |sin(θ)| < 0.7
                  [0    0    L·cos(θ)·θ̇]    otherwise

        Parameters
        ----------
        q : np.ndarray, shape (3,)
            Coordinates [x1, y1, θ].
        qp : np.ndarray, shape (3,)
            Velocities [ẋ1, ẏ1, θ̇].

        Returns
        -------
        np.ndarray, shape (2,)
        """
        theta = float(np.asarray(q, dtype=np.float64)[2])
        qp = np.asarray(qp, dtype=np.float64)
        x1p, y1p, thetap = qp
        L = self.bar_lengths[0]

        if self._use_vertical_row(theta):
            angle_row = [0.0, 0.0, L * np.sin(theta) * thetap]
        else:
            angle_row = [0.0, 0.0, L * np.cos(theta) * thetap]

        dotphiq = np.array([[2 * x1p, 2 * y1p, 0.0], angle_row])
        return dotphiq @ qp

    # =========================================================================
    # Forces
    # =========================================================================

    def eval_forces(self, q: np.ndarray, qp: np.ndarray) -> np.ndarray:  # noqa: ARG002
        """
        Generalized forces: gravity plus viscous damping on θ.

        Returns
        -------
        np.ndarray, shape (3,)
            Q = Qg + [0, 0, -C·θ̇]
        """
        qp = np.asarray(qp, dtype=np.float64)
        Q_var = np.zeros(self.dep_coords_count)
        Q_var[2] = -self.C * qp[2]
        return self.Qg + Q_var

    def eval_KC(self, q: np.ndarray, dq: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:  # noqa: ARG002
        """
        Stiffness and damping matrices.

        No elastic elements, so K is zero. C only acts on θ.

        Returns
        -------
        K : np.ndarray, shape (3, 3)
        C : np.ndarray, shape (3, 3)
        """
        n = self.dep_coords_count
        K = np.zeros((n, n))
        C = np.zeros((n, n))
        C[2, 2] = self.C
        return K, C

    # =========================================================================
    # Model Errors
    # =========================================================================

    def apply_errors(self, error_def: ModelErrorDef) -> "PendulumModel":
        """
        Return a copy of this model with the given model errors applied.

        Parameters
        ----------
        error_def : ModelErrorDef
            Error type and scale.

        Returns
        -------
        PendulumModel
            Perturbed, independent copy.

        Raises
        ------
        UnhandledConfigurationError
            If ``error_def.error_type`` is not in 0..5.
        """
        error_type = resolve_error_type(error_def.error_type)
        scale = error_def.error_scale

        ini_vel_error = 0.0
        ini_pos_error = 0.0
        grav_error = 0.0
        damping_coef_error = 0.0

        if error_type == ErrorType.NONE:
            pass
        elif error_type == ErrorType.GRAVITY_AND_INITIAL_POSITION:
            grav_error = GRAVITY_ERROR * scale
            ini_pos_error = INIT_POS_ERROR * scale
        elif error_type == ErrorType.INITIAL_POSITION:
            ini_pos_error = INIT_POS_ERROR * scale
        elif error_type == ErrorType.INITIAL_VELOCITY:
            ini_vel_error = INIT_VEL_ERROR * scale
        elif error_type == ErrorType.DAMPING_RELATIVE:
            damping_coef_error = -self.C * scale
        elif error_type == ErrorType.DAMPING_ABSOLUTE:
            damping_coef_error = DAMPING_ERROR * scale
        else:
            raise UnhandledConfigurationError(f"Unhandled error type {error_type!r}")

        bad_model = copy.deepcopy(self)
        bad_model.zp_init = bad_model.zp_init + ini_vel_error
        bad_model.q_init_approx[2] = bad_model.q_init_approx[2] + ini_pos_error
        bad_model.C = bad_model.C + damping_coef_error
        bad_model.params = replace(
            bad_model.params,
            C=float(bad_model.C),
            theta0=float(bad_model.q_init_approx[2]),
            omega0=float(bad_model.zp_init[0]),
        )
        # Recomputes Qg and updates params.g
        bad_model.g = bad_model.g + grav_error

        logger.debug(
            "Applied %s (scale=%g): dg=%g, dtheta0=%g, domega0=%g, dC=%g",
            error_type.name,
            scale,
            grav_error,
            ini_pos_error,
            ini_vel_error,
            damping_coef_error,
        )
        return bad_model

    # =========================================================================
    # Rendering
    # =========================================================================

    def plot_skeleton(self, q: np.ndarray, style: str = "k-", autoscale: bool = False) -> Skeleton:
        """
        Project the bar onto a 2D segment from the pivot to point 1.

        Parameters
        ----------
        q : np.ndarray, shape (3,)
            Coordinates [x1, y1, θ].
        style : str
            Format hint for the renderer.
        autoscale : bool
            If True, suggest bounds of pivot ± 1.2·L on both axes.

        Returns
        -------
        Skeleton
        """
        q = np.asarray(q, dtype=np.float64)
        segments = np.array([[self.fixed_points, q[:2]]])

        if not autoscale:
            return Skeleton(segments=segments, style=style)

        margin = 1.2 * self.bar_lengths[0]
        xA, yA = self.fixed_points
        return Skeleton(
            segments=segments,
            style=style,
            xlim=(xA - margin, xA + margin),
            ylim=(yA - margin, yA + margin),
            equal_aspect=True,
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def position_from_angle(self, theta: float) -> np.ndarray:
        """
        Coordinates consistent with a given bar angle.

        Returns
        -------
        np.ndarray, shape (3,)
            q = [xA + L·cos(θ), yA + L·sin(θ), θ], which satisfies Φ(q) = 0.
        """
        L = self.bar_lengths[0]
        return np.array([self.xA + L * np.cos(theta), self.yA + L * np.sin(theta), theta])

    def velocity_from_angular_rate(self, theta: float, omega: float) -> np.ndarray:
        """
        Velocities consistent with a given angle and angular rate.

        Returns
        -------
        np.ndarray, shape (3,)
            q̇ = [-L·sin(θ)·ω, L·cos(θ)·ω, ω], which satisfies Φ_q·q̇ = 0.
        """
        L = self.bar_lengths[0]
        return np.array([-L * np.sin(theta) * omega, L * np.cos(theta) * omega, omega])


# =============================================================================
# Factory Functions
# =============================================================================


def create_pendulum(
    bar_length: float = 1.0,
    mA1: float = 1.0,
    g: float = G_DEFAULT,
    C: float = 0.0,
    pivot: Tuple[float, float] = (0.0, 0.0),
    theta0: float = np.pi / 2,
    omega0: float = 0.0,
) -> PendulumModel:
    """
    Create a pendulum model with specified parameters.

    Parameters
    ----------
    bar_length : float
        Bar length [m].
    mA1 : float
        Point mass [kg].
    g : float
        Gravity along y [m/s²].
    C : float
        Damping coefficient.
    pivot : tuple of float
        Pivot coordinates (xA, yA).
    theta0 : float
        Initial bar angle [rad].
    omega0 : float
        Initial angular velocity [rad/s].

    Returns
    -------
    PendulumModel
        Configured pendulum model.
    """
    params = PendulumParams(
        xA=pivot[0], yA=pivot[1], bar_length=bar_length, mA1=mA1, g=g, C=C, theta0=theta0, omega0=omega0
    )
    return PendulumModel(params)
