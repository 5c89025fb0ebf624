"""
Training for feed-forward networks.

Weights are learned by mini-batch gradient descent with gradients computed
by backpropagation:

1. Forward pass: weighted sums and activations of every layer.
2. Output error: derivative of the cost through the output activation.
3. Backward pass: chain rule through each layer's activation derivative.
4. Update: ``W -= learning_rate * gradient``.

The default batch size of 1 updates the weights after every example.
"""

import dataclasses
import time
import warnings
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..data import Dataset
from ..exceptions import DimensionMismatch, EmptyDataset, InvalidData, NonFiniteGradient
from ..linalg import Matrix
from ..model import TrainingResult
from .activations import Activation, derivative, get_activation
from .costs import Cost, cost_gradient, cost_value, get_cost
from .model import Layer, NetworkModel, forward_pass

# Default parameters
DEFAULT_LEARNING_RATE = 0.1
DEFAULT_EPOCHS = 100
DEFAULT_BATCH_SIZE = 1
DEFAULT_LOG_EVERY = 20


@dataclass(frozen=True)
class NetworkConfig:
    """Configuration for :class:`NetworkTrainer`.

    Attributes
    ----------
    learning_rate : float
        Gradient descent step size (default: 0.1).
    epochs : int
        Maximum number of passes over the dataset (default: 100).
    tol : float, optional
        Stop early once the epoch-over-epoch change of the mean training loss
        falls below this value. Disabled when None (default).
    activation : Activation or str
        Activation of the hidden layers (default: sigmoid).
    output_activation : Activation or str, optional
        Activation of the output layer. Defaults to ``activation``.
    cost : Cost or str
        Cost function (default: squared error).
    batch_size : int
        Examples per weight update (default: 1).
    shuffle : bool
        Whether to visit examples in a new random order every epoch
        (default: True).
    init_range : float, optional
        Initial weights are drawn uniformly from [-init_range, init_range].
        When None, each layer uses sqrt(6 / (n_in + n_out)).
    regularization : float
        L2 penalty on non-bias weights (default: 0.0).
    random_state : int, optional
        Seed for weight initialization and shuffling.
    verbose : bool
        Whether to print training progress (default: False).
    log_every : int
        Epochs between progress lines when ``verbose`` (default: 20).
    """

    learning_rate: float = DEFAULT_LEARNING_RATE
    epochs: int = DEFAULT_EPOCHS
    tol: Optional[float] = None
    activation: Union[Activation, str] = Activation.SIGMOID
    output_activation: Union[Activation, str, None] = None
    cost: Union[Cost, str] = Cost.SQUARED_ERROR
    batch_size: int = DEFAULT_BATCH_SIZE
    shuffle: bool = True
    init_range: Optional[float] = None
    regularization: float = 0.0
    random_state: Optional[int] = None
    verbose: bool = False
    log_every: int = DEFAULT_LOG_EVERY

    def __post_init__(self):
        object.__setattr__(self, "activation", get_activation(self.activation))
        if self.output_activation is not None:
            object.__setattr__(self, "output_activation", get_activation(self.output_activation))
        object.__setattr__(self, "cost", get_cost(self.cost))

        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if self.epochs < 1:
            raise ValueError(f"epochs must be at least 1, got {self.epochs}")
        if self.tol is not None and self.tol <= 0:
            raise ValueError(f"tol must be positive, got {self.tol}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.init_range is not None and self.init_range <= 0:
            raise ValueError(f"init_range must be positive, got {self.init_range}")
        if self.regularization < 0:
            raise ValueError(f"regularization must be non-negative, got {self.regularization}")
        if self.log_every < 1:
            raise ValueError(f"log_every must be at least 1, got {self.log_every}")

    @property
    def layer_activations(self) -> Tuple[Activation, Activation]:
        """(hidden, output) activations."""
        output = self.output_activation if self.output_activation is not None else self.activation
        return self.activation, output


class NetworkTrainer:
    """
    Feed-forward network trained by backpropagation.

    Parameters
    ----------
    topology : Sequence[int]
        Layer sizes ``[n_inputs, hidden..., n_outputs]``. ``[2, 1]`` is a
        single perceptron with two inputs.
    config : NetworkConfig, optional
        Training configuration. Defaults to ``NetworkConfig()``.

    Raises
    ------
    ValueError
        If the topology has fewer than two layers or a non-positive size.
    """

    def __init__(self, topology: Sequence[int], config: Optional[NetworkConfig] = None):
        topology = [int(n) for n in topology]
        if len(topology) < 2:
            raise ValueError(f"topology needs an input and an output layer, got {topology}")
        if any(n < 1 for n in topology):
            raise ValueError(f"All layer sizes must be positive, got {topology}")

        self.topology = topology
        self.config = config if config is not None else NetworkConfig()

    def _layer_activations(self) -> List[Activation]:
        hidden, output = self.config.layer_activations
        return [hidden] * (len(self.topology) - 2) + [output]

    def _init_weights(self, rng: np.random.Generator) -> List[np.ndarray]:
        weights = []
        for n_in, n_out in zip(self.topology[:-1], self.topology[1:]):
            r = self.config.init_range
            if r is None:
                r = np.sqrt(6.0 / (n_in + n_out))
            weights.append(rng.uniform(-r, r, size=(n_out, n_in + 1)))
        return weights

    def compute_gradients(
        self,
        weights: Sequence[np.ndarray],
        X: np.ndarray,
        Y: np.ndarray,
    ) -> Tuple[List[np.ndarray], float, bool]:
        """
        Backpropagate one batch.

        Parameters
        ----------
        weights : Sequence[np.ndarray]
            Current weights, [n_out, n_in + 1] per layer.
        X : np.ndarray
            Inputs with shape [batch, n_inputs].
        Y : np.ndarray
            Targets with shape [batch, n_outputs].

        Returns
        -------
        grads : List[np.ndarray]
            Gradient of the mean batch cost for every weight matrix.
        loss : float
            Mean batch cost (including the L2 term).
        finite : bool
            False if any weighted sum or activation was NaN or infinite.
        """
        cfg = self.config
        acts = self._layer_activations()
        m = X.shape[0]

        zs, outputs = forward_pass(weights, acts, X)
        finite = all(np.all(np.isfinite(a)) for a in zs + outputs[1:])

        out = outputs[-1]
        loss = cost_value(cfg.cost, out, Y)
        if cfg.regularization > 0:
            loss += 0.5 * cfg.regularization * sum(float(np.sum(W[:, 1:] ** 2)) for W in weights)

        if cfg.cost is Cost.CROSS_ENTROPY and acts[-1] is Activation.SIGMOID:
            # Sigmoid derivative cancels the cross-entropy denominator
            delta = out - Y
        else:
            delta = cost_gradient(cfg.cost, out, Y) * derivative(acts[-1], zs[-1], out)

        grads = [None] * len(weights)
        for layer in reversed(range(len(weights))):
            W = weights[layer]
            a_prev = outputs[layer]

            grad = np.empty_like(W)
            grad[:, 0] = delta.sum(axis=0) / m
            grad[:, 1:] = delta.T @ a_prev / m
            if cfg.regularization > 0:
                grad[:, 1:] += cfg.regularization * W[:, 1:]
            grads[layer] = grad

            if layer > 0:
                delta = (delta @ W[:, 1:]) * derivative(
                    acts[layer - 1], zs[layer - 1], outputs[layer]
                )

        return grads, loss, finite

    def train(self, dataset: Dataset) -> TrainingResult:
        """
        Train a network on ``dataset``.

        Parameters
        ----------
        dataset : Dataset
            Feature vectors and real-valued target vectors.

        Returns
        -------
        result : TrainingResult
            Trained :class:`NetworkModel`. If an update produced NaN or
            infinite values, ``result.error`` is a :class:`NonFiniteGradient`
            and the model holds the last known-good weights.

        Raises
        ------
        EmptyDataset
            If ``dataset`` has no samples.
        DimensionMismatch
            If the topology does not match the dataset's feature or target width.
        InvalidData
            If the data contains NaN or infinite values.
        """
        t_start = time.time()
        cfg = self.config

        X, Y = self._validate(dataset)
        n_samples = X.shape[0]

        rng = np.random.default_rng(cfg.random_state)
        weights = self._init_weights(rng)

        history = {"train_loss": []}
        error = None
        n_epochs = 0

        for epoch in range(cfg.epochs):
            order = rng.permutation(n_samples) if cfg.shuffle else np.arange(n_samples)
            epoch_loss = 0.0

            for start in range(0, n_samples, cfg.batch_size):
                idx = order[start : start + cfg.batch_size]
                with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
                    grads, loss, finite = self.compute_gradients(weights, X[idx], Y[idx])
                    updated = [W - cfg.learning_rate * g for W, g in zip(weights, grads)]

                if not (finite and np.isfinite(loss) and all(np.all(np.isfinite(W)) for W in updated)):
                    error = NonFiniteGradient(
                        f"Non-finite values in epoch {epoch + 1}; "
                        f"keeping the weights from before this update",
                        epoch=epoch + 1,
                    )
                    break

                for W, new in zip(weights, updated):
                    W[...] = new
                epoch_loss += loss * len(idx)

            if error is not None:
                warnings.warn(error, stacklevel=2)
                break

            n_epochs = epoch + 1
            history["train_loss"].append(epoch_loss / n_samples)

            if cfg.verbose and (epoch + 1) % cfg.log_every == 0:
                print(f"Epoch {epoch + 1}/{cfg.epochs}, Train Loss: {history['train_loss'][-1]:.6f}")

            if (
                cfg.tol is not None
                and len(history["train_loss"]) > 1
                and abs(history["train_loss"][-2] - history["train_loss"][-1]) < cfg.tol
            ):
                if cfg.verbose:
                    print(f"Converged at epoch {epoch + 1}")
                break

        # The trainer's buffers become the model's frozen state
        layers = [
            Layer(Matrix._adopt(W), act) for W, act in zip(weights, self._layer_activations())
        ]
        del weights

        return TrainingResult(
            model=NetworkModel(layers),
            error=error,
            n_iterations=n_epochs,
            history=history,
            elapsed_time=time.time() - t_start,
        )

    def _validate(self, dataset: Dataset) -> Tuple[np.ndarray, np.ndarray]:
        if dataset.is_empty():
            raise EmptyDataset("Cannot train a network on an empty dataset")
        if dataset.n_features != self.topology[0]:
            raise DimensionMismatch(
                f"Input layer has {self.topology[0]} units but the dataset has "
                f"{dataset.n_features} features",
                expected=self.topology[0],
                actual=dataset.n_features,
            )
        if dataset.n_outputs != self.topology[-1]:
            raise DimensionMismatch(
                f"Output layer has {self.topology[-1]} units but the dataset has "
                f"{dataset.n_outputs} targets per sample",
                expected=self.topology[-1],
                actual=dataset.n_outputs,
            )

        X = dataset.features.data
        Y = dataset.targets.data
        if not (np.all(np.isfinite(X)) and np.all(np.isfinite(Y))):
            raise InvalidData("Training data contains NaN or infinite values")
        return X, Y


def train_network(
    dataset: Dataset,
    topology: Sequence[int],
    config: Optional[NetworkConfig] = None,
    **options,
) -> TrainingResult:
    """
    Train a feed-forward network.

    Parameters
    ----------
    dataset : Dataset
        Training data.
    topology : Sequence[int]
        Layer sizes ``[n_inputs, hidden..., n_outputs]``.
    config : NetworkConfig, optional
        Training configuration.
    **options
        :class:`NetworkConfig` fields overriding ``config``.

    Returns
    -------
    result : TrainingResult
        Trained model plus training history.

    Examples
    --------
    >>> data = Dataset([[0, 0], [0, 1], [1, 0], [1, 1]], [0, 0, 0, 1])
    >>> result = train_network(data, [2, 1], epochs=2000, learning_rate=1.0,
    ...                        cost="cross_entropy", random_state=0)
    >>> round(result.model.predict([1, 1])[0])
    1
    """
    if config is None:
        config = NetworkConfig(**options)
    elif options:
        config = dataclasses.replace(config, **options)
    return NetworkTrainer(topology, config).train(dataset)
