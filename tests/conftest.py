"""
Pytest configuration and shared fixtures for mechmodel tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from mechmodel import PendulumModel, PendulumParams  # noqa: E402

# =============================================================================
# Random Seed Fixture
# =============================================================================


@pytest.fixture
def rng():
    """Provide a seeded random number generator for reproducibility."""
    return np.random.default_rng(42)


@pytest.fixture
def random_coords(rng):
    """Generate a random coordinate vector."""

    def _random_coords(n):
        return rng.standard_normal(n)

    return _random_coords


# =============================================================================
# Tolerance Fixtures
# =============================================================================


@pytest.fixture
def atol():
    """Absolute tolerance for floating point comparisons."""
    return 1e-10


@pytest.fixture
def rtol():
    """Relative tolerance for floating point comparisons."""
    return 1e-6


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def pendulum():
    """Pendulum with default parameters (pivot at origin, L=1, θ0=π/2)."""
    return PendulumModel()


@pytest.fixture
def damped_pendulum():
    """Pendulum with non-zero damping and an offset pivot."""
    return PendulumModel(PendulumParams(xA=0.5, yA=-0.25, bar_length=2.0, mA1=3.0, C=2.0, theta0=0.3))


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
