#!/usr/bin/env python3
"""
Example 01: Model-Error Injection

Demonstrates fundamental mechmodel usage:
- Creating a pendulum model
- Producing perturbed copies with ModelErrorDef
- Driving each model with a minimal integrator
- Using visualization utilities

Outputs saved to: examples/outputs/
"""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

import mechmodel as mm
from mechmodel.visualization import draw_skeleton, plot_comparison, plot_constraint_residuals

# Output directory
OUTPUT_DIR = Path(__file__).parent / "outputs"

logger = logging.getLogger("mechmodel.examples")


def accelerations(model, q, qp):
    """Solve [M Φqᵀ; Φq 0]·[q̈; λ] = [Q; -Φ̇q·q̇] for q̈."""
    n = model.dep_coords_count
    phiq = model.jacob_phi_q(q)
    m = phiq.shape[0]

    A = np.zeros((n + m, n + m))
    A[:n, :n] = model.M
    A[:n, n:] = phiq.T
    A[n:, :n] = phiq

    b = np.concatenate([model.eval_forces(q, qp), -model.jacob_phiqp_times_qp(q, qp)])
    return np.linalg.solve(A, b)[:n]


def simulate(model, t_final=3.0, dt=1e-3):
    """Semi-implicit Euler on the independent angle, with exact reprojection."""
    theta = model.q_init_approx[2]
    omega = model.zp_init[0]

    t = np.arange(0.0, t_final + dt, dt)
    q = np.zeros((len(t), model.dep_coords_count))

    for k in range(len(t)):
        q[k] = model.position_from_angle(theta)
        qp = model.velocity_from_angular_rate(theta, omega)
        omega += dt * accelerations(model, q[k], qp)[2]
        theta += dt * omega

    return t, q


def main():
    mm.setup_logging(logging.DEBUG)
    OUTPUT_DIR.mkdir(exist_ok=True)

    nominal = mm.create_pendulum(C=0.5, theta0=0.0)
    logger.info("Nominal model: %s", nominal)

    models = {"nominal": nominal}
    for error_type in mm.ErrorType:
        if error_type == mm.ErrorType.NONE:
            continue
        models[error_type.name.lower()] = nominal.apply_errors(mm.ModelErrorDef(error_type, error_scale=0.5))

    results = {name: simulate(model) for name, model in models.items()}

    # --- Plots ---

    fig1, _ = plot_comparison(
        [t for t, _ in results.values()],
        [q for _, q in results.values()],
        list(results.keys()),
        coord_idx=2,
        ylabel="θ [rad]",
        title="Nominal vs. Perturbed Models",
    )
    fig1.savefig(OUTPUT_DIR / "01a_comparison.png", dpi=150)
    logger.info("Saved: 01a_comparison.png")

    t, q = results["nominal"]
    fig2, _ = plot_constraint_residuals(t, q, nominal)
    fig2.savefig(OUTPUT_DIR / "01b_residuals.png", dpi=150)
    logger.info("Saved: 01b_residuals.png")

    fig3, ax3 = draw_skeleton(nominal.plot_skeleton(q[0], "k-", autoscale=True))
    for q_k in q[::300]:
        draw_skeleton(nominal.plot_skeleton(q_k, "b-"), ax=ax3, linewidth=1.0)
    ax3.set_title("Pendulum Skeleton")
    fig3.savefig(OUTPUT_DIR / "01c_skeleton.png", dpi=150)
    logger.info("Saved: 01c_skeleton.png")

    plt.close("all")


if __name__ == "__main__":
    main()
