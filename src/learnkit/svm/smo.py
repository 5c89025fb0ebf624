"""
Sequential Minimal Optimization for the soft-margin SVM dual.

Solves

    max_a  sum_i a_i - 1/2 sum_ij a_i a_j y_i y_j K_ij
    s.t.   0 <= a_i <= C,  sum_i a_i y_i = 0

by repeatedly optimizing pairs of multipliers analytically. The outer loop
alternates between sweeps over all examples and sweeps over the non-bound
ones (0 < a_i < C) until a full sweep makes no progress, i.e. every example
satisfies the Karush-Kuhn-Tucker conditions within ``tol``.

The decision function uses the convention f(x) = sum_i a_i y_i K(x_i, x) + b.

References
----------
Platt (1998) "Sequential Minimal Optimization: A Fast Algorithm for
Training Support Vector Machines", Microsoft Research MSR-TR-98-14.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

# Multipliers closer than this to a bound are snapped onto it
BOUND_EPS = 1e-8


@dataclass
class SMOSolution:
    """Container for the optimizer output.

    Attributes
    ----------
    alpha : np.ndarray
        Lagrange multipliers, one per training example.
    bias : float
        Intercept of the decision function.
    n_iterations : int
        Number of outer sweeps performed.
    converged : bool
        Whether the KKT conditions hold within tolerance.
    objective : List[float]
        Dual objective after each sweep.
    """

    alpha: np.ndarray
    bias: float
    n_iterations: int
    converged: bool
    objective: List[float] = field(default_factory=list)


def dual_objective(alpha: np.ndarray, y: np.ndarray, K: np.ndarray) -> float:
    """Value of the SVM dual objective at ``alpha``."""
    ay = alpha * y
    return float(np.sum(alpha) - 0.5 * ay @ K @ ay)


class _SMOSolver:
    def __init__(self, K, y, C, tol, eps, rng):
        self.K = K
        self.y = y
        self.C = C
        self.tol = tol
        self.eps = eps
        self.rng = rng

        self.n = len(y)
        self.alpha = np.zeros(self.n)
        self.b = 0.0
        # Error cache E_i = f(x_i) - y_i, kept exact for every example
        self.E = -y.astype(float)

    def non_bound(self) -> np.ndarray:
        return np.flatnonzero((self.alpha > 0) & (self.alpha < self.C))

    def examine(self, i2: int) -> int:
        y2 = self.y[i2]
        a2 = self.alpha[i2]
        E2 = self.E[i2]
        r2 = E2 * y2

        if not ((r2 < -self.tol and a2 < self.C) or (r2 > self.tol and a2 > 0)):
            return 0

        candidates = self.non_bound()

        # Second choice heuristic: maximize the step size |E1 - E2|
        if len(candidates) > 1:
            i1 = candidates[np.argmax(np.abs(self.E[candidates] - E2))]
            if self.take_step(i1, i2):
                return 1

        # Fall back to scanning non-bound examples, then all examples,
        # from random starting points
        if len(candidates) > 0:
            for i1 in np.roll(candidates, self.rng.integers(len(candidates))):
                if self.take_step(i1, i2):
                    return 1

        for i1 in np.roll(np.arange(self.n), self.rng.integers(self.n)):
            if self.take_step(i1, i2):
                return 1

        return 0

    def take_step(self, i1: int, i2: int) -> bool:
        if i1 == i2:
            return False

        K, C = self.K, self.C
        a1, a2 = self.alpha[i1], self.alpha[i2]
        y1, y2 = self.y[i1], self.y[i2]
        E1, E2 = self.E[i1], self.E[i2]
        s = y1 * y2

        if y1 != y2:
            L = max(0.0, a2 - a1)
            H = min(C, C + a2 - a1)
        else:
            L = max(0.0, a2 + a1 - C)
            H = min(C, a2 + a1)
        if L >= H:
            return False

        k11, k12, k22 = K[i1, i1], K[i1, i2], K[i2, i2]
        eta = k11 + k22 - 2.0 * k12

        if eta > 0:
            a2_new = a2 + y2 * (E1 - E2) / eta
            a2_new = min(max(a2_new, L), H)
        else:
            # Objective is not strictly convex along the constraint line;
            # move to whichever end of the segment is better.
            f1 = y1 * (E1 - self.b) - a1 * k11 - s * a2 * k12
            f2 = y2 * (E2 - self.b) - s * a1 * k12 - a2 * k22
            L1 = a1 + s * (a2 - L)
            H1 = a1 + s * (a2 - H)
            L_obj = L1 * f1 + L * f2 + 0.5 * L1**2 * k11 + 0.5 * L**2 * k22 + s * L * L1 * k12
            H_obj = H1 * f1 + H * f2 + 0.5 * H1**2 * k11 + 0.5 * H**2 * k22 + s * H * H1 * k12
            if L_obj < H_obj - self.eps:
                a2_new = L
            elif L_obj > H_obj + self.eps:
                a2_new = H
            else:
                a2_new = a2

        if a2_new < BOUND_EPS:
            a2_new = 0.0
        elif a2_new > C - BOUND_EPS:
            a2_new = C

        if abs(a2_new - a2) < self.eps * (a2_new + a2 + self.eps):
            return False

        a1_new = a1 + s * (a2 - a2_new)
        if a1_new < BOUND_EPS:
            a1_new = 0.0
        elif a1_new > C - BOUND_EPS:
            a1_new = C

        d1 = y1 * (a1_new - a1)
        d2 = y2 * (a2_new - a2)

        # Threshold that makes the updated example's output equal its label
        b1 = self.b - E1 - d1 * k11 - d2 * k12
        b2 = self.b - E2 - d1 * k12 - d2 * k22
        if 0 < a1_new < C:
            b_new = b1
        elif 0 < a2_new < C:
            b_new = b2
        else:
            b_new = 0.5 * (b1 + b2)

        self.E += d1 * K[i1] + d2 * K[i2] + (b_new - self.b)
        self.alpha[i1] = a1_new
        self.alpha[i2] = a2_new
        self.b = b_new
        return True


def smo(
    K: np.ndarray,
    y: np.ndarray,
    C: float,
    tol: float = 1e-3,
    eps: float = 1e-8,
    max_iter: int = 1000,
    rng: Optional[np.random.Generator] = None,
    verbose: bool = False,
) -> SMOSolution:
    """
    Run SMO on a precomputed kernel matrix.

    Parameters
    ----------
    K : np.ndarray
        Symmetric kernel matrix with shape [n_samples, n_samples].
    y : np.ndarray
        Labels in {-1, +1} with shape [n_samples].
    C : float
        Penalty (box constraint) on the multipliers.
    tol : float, optional
        KKT violation tolerance (default: 1e-3).
    eps : float, optional
        Minimum relative multiplier change counted as progress (default: 1e-8).
    max_iter : int, optional
        Maximum number of outer sweeps (default: 1000).
    rng : np.random.Generator, optional
        Source of the random scan offsets.
    verbose : bool, optional
        Whether to print per-sweep progress (default: False).

    Returns
    -------
    solution : SMOSolution
        Multipliers, bias and convergence information. If ``max_iter`` is
        reached first, ``converged`` is False and the current multipliers
        are returned.
    """
    if rng is None:
        rng = np.random.default_rng()

    solver = _SMOSolver(K, y, C, tol, eps, rng)
    objective = []

    n_changed = 0
    examine_all = True
    n_iter = 0

    while (n_changed > 0 or examine_all) and n_iter < max_iter:
        if examine_all:
            indices = range(solver.n)
        else:
            indices = solver.non_bound()
        n_changed = sum(solver.examine(i) for i in indices)
        n_iter += 1

        if examine_all:
            examine_all = False
        elif n_changed == 0:
            examine_all = True

        objective.append(dual_objective(solver.alpha, y, K))
        if verbose:
            print(
                f"SMO sweep {n_iter}/{max_iter}, "
                f"changed: {n_changed}, "
                f"dual objective: {objective[-1]:.6f}"
            )

    converged = not (n_changed > 0 or examine_all)

    return SMOSolution(
        alpha=solver.alpha,
        bias=float(solver.b),
        n_iterations=n_iter,
        converged=converged,
        objective=objective,
    )
