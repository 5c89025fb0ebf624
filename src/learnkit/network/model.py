"""
Trained feed-forward network.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionMismatch
from ..linalg import Matrix, Vector, as_matrix, as_vector
from .activations import Activation, activate


@dataclass(frozen=True)
class Layer:
    """
    One fully connected layer.

    Attributes
    ----------
    weights : Matrix
        Weights with shape [n_outputs, n_inputs + 1]. Column 0 holds the
        bias of each output unit.
    activation : Activation
        Activation applied to the weighted sums.
    """

    weights: Matrix
    activation: Activation = Activation.SIGMOID

    # Matrix is unhashable, so layers are too
    __hash__ = None

    def __post_init__(self):
        if self.weights.rows < 1 or self.weights.cols < 1:
            raise DimensionMismatch(
                f"Layer weights need at least one row and the bias column, "
                f"got {self.weights.rows}x{self.weights.cols}",
                expected="[n_outputs >= 1, n_inputs + 1 >= 1]",
                actual=(self.weights.rows, self.weights.cols),
            )

    @property
    def n_inputs(self) -> int:
        return self.weights.cols - 1

    @property
    def n_outputs(self) -> int:
        return self.weights.rows

    @property
    def bias(self) -> Vector:
        return self.weights.col(0)


def forward_pass(
    weights: Sequence[np.ndarray], activations: Sequence[Activation], X: np.ndarray
) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Propagate a batch through the network.

    Parameters
    ----------
    weights : Sequence[np.ndarray]
        Per-layer weights with shape [n_out, n_in + 1] (bias in column 0).
    activations : Sequence[Activation]
        Per-layer activation.
    X : np.ndarray
        Inputs with shape [n_samples, n_inputs].

    Returns
    -------
    zs : List[np.ndarray]
        Pre-activations of every layer, each [n_samples, n_out].
    outputs : List[np.ndarray]
        Activations, starting with ``X`` itself; ``outputs[-1]`` is the
        network output.
    """
    zs = []
    outputs = [X]
    a = X
    for W, act in zip(weights, activations):
        z = a @ W[:, 1:].T + W[:, 0]
        a = activate(act, z)
        zs.append(z)
        outputs.append(a)
    return zs, outputs


class NetworkModel:
    """
    Immutable feed-forward network.

    Parameters
    ----------
    layers : Sequence[Layer]
        Layers in order from input to output. Consecutive layers must agree
        on their sizes.

    Raises
    ------
    DimensionMismatch
        If a layer's input size differs from the previous layer's output size.
    """

    __slots__ = ("_layers",)

    def __init__(self, layers: Sequence[Layer]):
        layers = tuple(layers)
        if not layers:
            raise ValueError("A network needs at least one layer")
        for prev, nxt in zip(layers[:-1], layers[1:]):
            if prev.n_outputs != nxt.n_inputs:
                raise DimensionMismatch(
                    f"Layer with {prev.n_outputs} outputs cannot feed a layer "
                    f"with {nxt.n_inputs} inputs",
                    expected=prev.n_outputs,
                    actual=nxt.n_inputs,
                )
        object.__setattr__(self, "_layers", layers)

    def __setattr__(self, name, value):
        raise AttributeError("NetworkModel is immutable")

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return self._layers

    @property
    def topology(self) -> List[int]:
        """Layer sizes from input to output."""
        return [self._layers[0].n_inputs] + [layer.n_outputs for layer in self._layers]

    @property
    def n_features(self) -> int:
        return self._layers[0].n_inputs

    @property
    def n_outputs(self) -> int:
        return self._layers[-1].n_outputs

    def __repr__(self) -> str:
        acts = [layer.activation.value for layer in self._layers]
        return f"NetworkModel(topology={self.topology}, activations={acts})"

    def _forward(self, X: np.ndarray) -> np.ndarray:
        weights = [layer.weights.data for layer in self._layers]
        activations = [layer.activation for layer in self._layers]
        _, outputs = forward_pass(weights, activations, X)
        return outputs[-1]

    def predict(self, features: Union[Vector, np.ndarray, list]) -> Vector:
        """
        Forward one feature vector through the network.

        Returns
        -------
        output : Vector
            Output layer activations.

        Raises
        ------
        DimensionMismatch
            If the feature count differs from the input layer size.
        """
        x = as_vector(features)
        if len(x) != self.n_features:
            raise DimensionMismatch(
                f"Model expects {self.n_features} features, got {len(x)}",
                expected=self.n_features,
                actual=len(x),
            )
        return Vector._adopt(self._forward(x.data[np.newaxis, :])[0].copy())

    def predict_batch(self, features: Matrix) -> Matrix:
        """Network outputs for every row of ``features``."""
        X = as_matrix(features)
        if X.cols != self.n_features:
            raise DimensionMismatch(
                f"Model expects {self.n_features} features, got {X.cols}",
                expected=self.n_features,
                actual=X.cols,
            )
        return Matrix._adopt(self._forward(X.data))
