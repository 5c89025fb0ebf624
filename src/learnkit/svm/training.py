"""
Training for kernel support vector machines.

This module wires datasets, kernels and the SMO optimizer together and
turns the optimizer output into an immutable :class:`SVMModel`.
"""

import time
import warnings
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from ..data import Dataset
from ..exceptions import DidNotConverge, EmptyDataset, InvalidData
from ..kernels import Kernel
from ..linalg import Matrix, Vector
from ..model import TrainingResult
from .model import SVMModel
from .smo import smo

# Default parameters
DEFAULT_PENALTY = 1.0
DEFAULT_TOL = 1e-3
DEFAULT_EPS = 1e-8
DEFAULT_MAX_ITER = 1000
DEFAULT_SV_THRESHOLD = 1e-8


@dataclass(frozen=True)
class SVMConfig:
    """Configuration for :class:`SVMTrainer`.

    Attributes
    ----------
    kernel : Kernel
        Kernel function (default: linear).
    penalty : float
        Soft-margin penalty C; larger values punish margin violations harder
        (default: 1.0).
    tol : float
        KKT tolerance used as the convergence criterion (default: 1e-3).
    eps : float
        Minimum relative multiplier change counted as progress (default: 1e-8).
    max_iter : int
        Maximum number of optimizer sweeps (default: 1000).
    sv_threshold : float
        Multipliers at or below this are pruned from the model (default: 1e-8).
    random_state : int, optional
        Seed for the optimizer's randomized scans.
    verbose : bool
        Whether to print optimizer progress (default: False).
    """

    kernel: Kernel = field(default_factory=Kernel)
    penalty: float = DEFAULT_PENALTY
    tol: float = DEFAULT_TOL
    eps: float = DEFAULT_EPS
    max_iter: int = DEFAULT_MAX_ITER
    sv_threshold: float = DEFAULT_SV_THRESHOLD
    random_state: Optional[int] = None
    verbose: bool = False

    def __post_init__(self):
        if not isinstance(self.kernel, Kernel):
            raise ValueError(f"kernel must be a Kernel, got {type(self.kernel).__name__}")
        if self.penalty <= 0:
            raise ValueError(f"penalty must be positive, got {self.penalty}")
        if self.tol <= 0:
            raise ValueError(f"tol must be positive, got {self.tol}")
        if self.eps <= 0:
            raise ValueError(f"eps must be positive, got {self.eps}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {self.max_iter}")
        if self.sv_threshold < 0:
            raise ValueError(f"sv_threshold must be non-negative, got {self.sv_threshold}")


class SVMTrainer:
    """
    Soft-margin kernel SVM trained with SMO.

    Parameters
    ----------
    config : SVMConfig, optional
        Training configuration. Defaults to ``SVMConfig()``.

    Examples
    --------
    >>> data = Dataset([[-2.0], [-1.0], [1.0], [2.0]], [-1, -1, 1, 1])
    >>> result = SVMTrainer(SVMConfig(penalty=10.0)).train(data)
    >>> result.model.predict([1.5])
    1.0
    """

    def __init__(self, config: Optional[SVMConfig] = None):
        self.config = config if config is not None else SVMConfig()

    def train(self, dataset: Dataset) -> TrainingResult:
        """
        Train a model on ``dataset``.

        Parameters
        ----------
        dataset : Dataset
            Feature vectors with single-column labels in {-1, +1}.

        Returns
        -------
        result : TrainingResult
            Trained :class:`SVMModel`. If the optimizer hit ``max_iter``,
            ``result.error`` is a :class:`DidNotConverge` and the model holds
            the best multipliers found.

        Raises
        ------
        EmptyDataset
            If ``dataset`` has no samples.
        InvalidData
            If labels are not +1/-1 or features are not finite.
        """
        t_start = time.time()
        cfg = self.config

        X, y = _validate(dataset)
        n_samples, n_features = X.shape

        classes = np.unique(y)
        if len(classes) == 1:
            # Only one class present: constant decision function
            model = SVMModel(
                Matrix.zeros(0, n_features),
                Vector.zeros(0),
                Vector.zeros(0),
                bias=float(classes[0]),
                kernel=cfg.kernel,
                n_features=n_features,
            )
            return TrainingResult(model=model, elapsed_time=time.time() - t_start)

        K = cfg.kernel.gram(dataset.features).data
        solution = smo(
            K,
            y,
            C=cfg.penalty,
            tol=cfg.tol,
            eps=cfg.eps,
            max_iter=cfg.max_iter,
            rng=np.random.default_rng(cfg.random_state),
            verbose=cfg.verbose,
        )

        # Keep only examples with a non-negligible multiplier
        sv_mask = solution.alpha > cfg.sv_threshold
        model = SVMModel(
            Matrix._adopt(X[sv_mask].copy()),
            Vector._adopt(solution.alpha[sv_mask].copy()),
            Vector._adopt(y[sv_mask].copy()),
            bias=solution.bias,
            kernel=cfg.kernel,
            n_features=n_features,
        )

        error = None
        if not solution.converged:
            error = DidNotConverge(
                f"SMO did not converge within {cfg.max_iter} sweeps "
                f"(tol={cfg.tol}); returning best multipliers found",
                n_iterations=solution.n_iterations,
            )
            warnings.warn(error, stacklevel=2)

        if cfg.verbose:
            print(
                f"SVM trained on {n_samples} samples: "
                f"{model.n_support} support vectors, "
                f"{solution.n_iterations} sweeps, bias={solution.bias:.4f}"
            )

        return TrainingResult(
            model=model,
            error=error,
            n_iterations=solution.n_iterations,
            history={"dual_objective": solution.objective},
            elapsed_time=time.time() - t_start,
        )


def _validate(dataset: Dataset):
    if dataset.is_empty():
        raise EmptyDataset("Cannot train an SVM on an empty dataset")

    X = dataset.features.data
    y = dataset.labels.data
    if not np.all(np.isfinite(X)):
        raise InvalidData("Training features contain NaN or infinite values")
    if not np.all(np.isin(y, (-1.0, 1.0))):
        bad = sorted(set(np.unique(y)) - {-1.0, 1.0})
        raise InvalidData(f"SVM labels must be -1 or +1, got {bad}")
    return X, y


def train_svm(
    dataset: Dataset,
    kernel: Union[Kernel, str, None] = None,
    penalty: float = DEFAULT_PENALTY,
    **options,
) -> TrainingResult:
    """
    Train a kernel SVM.

    Parameters
    ----------
    dataset : Dataset
        Feature vectors with labels in {-1, +1}.
    kernel : Kernel or str, optional
        Kernel, or the name of a kernel with default parameters
        (default: linear).
    penalty : float, optional
        Soft-margin penalty C (default: 1.0).
    **options
        Any other :class:`SVMConfig` field (``tol``, ``max_iter``,
        ``random_state`` ...).

    Returns
    -------
    result : TrainingResult
        Trained model plus convergence information.

    Examples
    --------
    >>> data = Dataset.from_pairs([(x, 1 if x > 0 else -1) for x in range(-1000, 1000, 100)])
    >>> result = train_svm(data, Kernel.hyper_tan(), penalty=10.0)
    >>> result.model.predict([300.0])
    1.0
    """
    if kernel is None:
        kernel = Kernel()
    elif not isinstance(kernel, Kernel):
        kernel = Kernel(kernel)
    config = SVMConfig(kernel=kernel, penalty=penalty, **options)
    return SVMTrainer(config).train(dataset)
