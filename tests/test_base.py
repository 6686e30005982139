"""
Tests for the MechanismModel abstract base class.

These tests verify:
1. Abstract class behavior (cannot instantiate directly)
2. Gravity / gravity-force coupling
3. Default method implementations (energy, validity, jacob_Rq)
4. Numerical Jacobian verification utilities
"""

import copy

import numpy as np
import pytest

from mechmodel import MechanismModel, Skeleton

# =============================================================================
# Test Fixtures - Concrete Model Implementations
# =============================================================================


class PointOnCircle(MechanismModel):
    """
    Point mass constrained to the unit circle, for testing.

    Coordinates: [x, y]
    Constraint: x² + y² - 1 = 0
    """

    dep_coords_count = 2
    indep_idxs = (0,)
    vertical_idxs = (1,)
    coord_names = ("x", "y")

    def __init__(self, mass=2.0, g=-9.81):
        super().__init__({"mass": mass})
        self.M = mass * np.eye(2)
        self.g = g
        self.q_init_approx = np.array([1.0, 0.0])

    def phi(self, q):
        x, y = q
        return np.array([x**2 + y**2 - 1.0])

    def jacob_phi_q(self, q):
        x, y = q
        return np.array([[2 * x, 2 * y]])

    def jacob_phiqp_times_qp(self, q, qp):  # noqa: ARG002
        return np.array([[2 * qp[0], 2 * qp[1]]]) @ qp

    def eval_forces(self, q, qp):  # noqa: ARG002
        return self.Qg.copy()

    def eval_KC(self, q, dq):  # noqa: ARG002
        return np.zeros((2, 2)), np.zeros((2, 2))

    def apply_errors(self, error_def):  # noqa: ARG002
        return copy.deepcopy(self)

    def plot_skeleton(self, q, style="k-", autoscale=False):  # noqa: ARG002
        return Skeleton(segments=np.array([[[0.0, 0.0], q[:2]]]), style=style)


class BrokenJacobian(PointOnCircle):
    """Model with a deliberately wrong constraint Jacobian."""

    def jacob_phi_q(self, q):
        x, y = q
        return np.array([[x, y]])


class IncompleteModel(MechanismModel):
    """Model that doesn't implement all abstract members - for testing."""

    dep_coords_count = 2
    indep_idxs = (0,)

    # Missing: coord_names, phi, jacobians, forces, errors, skeleton


# =============================================================================
# Test: Abstract Class Behavior
# =============================================================================


class TestAbstractBehavior:
    """Tests for abstract class enforcement."""

    def test_cannot_instantiate_base_class(self):
        """MechanismModel should not be instantiable directly."""
        with pytest.raises(TypeError):
            MechanismModel()

    def test_incomplete_implementation_raises(self):
        """Incomplete implementations should raise TypeError."""
        with pytest.raises(TypeError):
            IncompleteModel()

    def test_complete_implementation_instantiates(self):
        model = PointOnCircle()
        assert isinstance(model, MechanismModel)

    def test_class_constants_available_on_type(self):
        assert PointOnCircle.dep_coords_count == 2
        assert PointOnCircle.indep_idxs == (0,)


# =============================================================================
# Test: Default State
# =============================================================================


class TestDefaults:
    """Tests for state initialized by the base class."""

    def test_default_init_vectors_sized_by_model(self):
        model = MechanismModel.__new__(PointOnCircle)
        MechanismModel.__init__(model)
        assert model.q_init_approx.shape == (2,)
        assert model.zp_init.shape == (1,)
        np.testing.assert_array_equal(model.q_init_approx, 0.0)

    def test_params_stored(self):
        model = PointOnCircle(mass=5.0)
        assert model.params == {"mass": 5.0}

    def test_repr(self):
        r = repr(PointOnCircle())
        assert "PointOnCircle" in r
        assert "dep_coords_count=2" in r


# =============================================================================
# Test: Gravity Coupling
# =============================================================================


class TestGravity:
    """Tests that Qg always follows g."""

    def test_initial_gravity_force(self):
        model = PointOnCircle(mass=2.0, g=-9.81)
        np.testing.assert_allclose(model.Qg, [0.0, -19.62])

    def test_setter_recomputes_force(self):
        model = PointOnCircle(mass=2.0, g=-9.81)
        model.g = -1.0
        assert model.g == -1.0
        np.testing.assert_allclose(model.Qg, [0.0, -2.0])

    def test_set_gravity_chains(self):
        model = PointOnCircle(mass=2.0)
        assert model.set_gravity(3.0) is model
        np.testing.assert_allclose(model.Qg, [0.0, 6.0])

    def test_gravity_force_is_read_only(self):
        model = PointOnCircle()
        with pytest.raises(AttributeError):
            model.Qg = np.zeros(2)

    def test_gravity_force_cannot_be_written_in_place(self):
        model = PointOnCircle(mass=2.0, g=-9.81)
        with pytest.raises(ValueError):
            model.Qg[1] = 0.0
        np.testing.assert_allclose(model.Qg, [0.0, -19.62])

    def test_gravity_force_stays_read_only_after_update(self):
        model = PointOnCircle()
        model.g = -1.0
        with pytest.raises(ValueError):
            model.Qg[1] = 0.0

    def test_update_qg_after_mass_change(self):
        model = PointOnCircle(mass=1.0, g=-10.0)
        model.M = 4.0 * np.eye(2)
        model.update_Qg()
        np.testing.assert_allclose(model.Qg, [0.0, -40.0])

    def test_non_dataclass_params_untouched_by_gravity(self):
        model = PointOnCircle(mass=1.0, g=-10.0)
        model.g = -2.0
        assert model.params == {"mass": 1.0}


# =============================================================================
# Test: Default Implementations
# =============================================================================


class TestDefaultMethods:
    """Tests for concrete methods provided by the base class."""

    def test_jacob_rq_not_implemented(self):
        model = PointOnCircle()
        with pytest.raises(NotImplementedError, match="PointOnCircle"):
            model.jacob_Rq(np.array([1.0, 0.0]), np.eye(2))

    def test_kinetic_energy(self):
        model = PointOnCircle(mass=2.0)
        T = model.eval_kinetic_energy(np.array([1.0, 0.0]), np.array([0.0, 3.0]))
        assert T == pytest.approx(9.0)

    def test_potential_energy(self):
        model = PointOnCircle(mass=2.0, g=-10.0)
        V = model.eval_potential_energy(np.array([0.0, 1.0]))
        assert V == pytest.approx(20.0)

    def test_energy_dict(self):
        model = PointOnCircle(mass=1.0, g=-10.0)
        E = model.eval_energy(np.array([0.0, -1.0]), np.array([2.0, 0.0]))
        assert E["kinetic"] == pytest.approx(2.0)
        assert E["potential"] == pytest.approx(-10.0)
        assert E["total"] == pytest.approx(-8.0)

    def test_configuration_valid(self):
        model = PointOnCircle()
        assert model.is_configuration_valid(np.array([0.6, 0.8]))
        assert not model.is_configuration_valid(np.array([1.0, 1.0]))


# =============================================================================
# Test: Jacobian Verification
# =============================================================================


class TestJacobianVerification:
    """Tests for numerical Jacobian utilities."""

    def test_numerical_jacobian_matches(self):
        model = PointOnCircle()
        q = np.array([0.3, -0.7])
        np.testing.assert_allclose(model.jacob_phi_q_numerical(q), model.jacob_phi_q(q), atol=1e-8)

    def test_numerical_velocity_term_matches(self):
        model = PointOnCircle()
        q = np.array([0.3, -0.7])
        qp = np.array([1.5, 0.4])
        np.testing.assert_allclose(
            model.jacob_phiqp_times_qp_numerical(q, qp), model.jacob_phiqp_times_qp(q, qp), atol=1e-8
        )

    def test_verify_passes_for_correct_model(self):
        model = PointOnCircle()
        passed, errors = model.verify_jacobians(np.array([0.6, 0.8]), np.array([-0.8, 0.6]))
        assert passed
        assert errors["phi_q_relative_error"] < 1e-6

    def test_verify_fails_for_wrong_jacobian(self):
        model = BrokenJacobian()
        passed, errors = model.verify_jacobians(np.array([0.6, 0.8]), np.array([-0.8, 0.6]))
        assert not passed
        assert errors["phi_q_relative_error"] > 0.1
