"""Dense (fully-connected) sigmoid layer."""

from __future__ import annotations

import numpy as np

from .activations import sigmoid, sigmoid_deriv
from .errors import NotInitializedError, ShapeMismatchError
from .types import Array, Vector


def as_vector(values: Vector, width: int, what: str) -> Array:
    """Return ``values`` as a float64 vector, checking it holds ``width`` entries."""

    vec = np.asarray(values, dtype=np.float64).reshape(-1)
    if vec.size != width:
        raise ShapeMismatchError(what, width, int(vec.size))
    return vec


class DenseLayer:
    """A set of sigmoid nodes sharing the same input width.

    Node ``i`` owns row ``i`` of :attr:`weights`, ``bias[i]``, ``output[i]``
    and ``error[i]`` (its delta).  ``output`` and ``error`` are transient:
    they are only meaningful inside one feedforward/backpropagate/optimize
    cycle.
    """

    def __init__(
        self,
        num_nodes: int = 0,
        num_weights: int = 0,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clear()
        if num_nodes or num_weights:
            self.resize(num_nodes, num_weights)

    @property
    def num_nodes(self) -> int:
        return int(self.weights.shape[0])

    @property
    def num_weights(self) -> int:
        return int(self.weights.shape[1])

    def __repr__(self) -> str:
        return f"DenseLayer(num_nodes={self.num_nodes}, num_weights={self.num_weights})"

    def resize(self, num_nodes: int, num_weights: int) -> None:
        """Reallocate ``num_nodes`` nodes with ``num_weights`` weights each.

        Weights and biases are drawn uniformly from ``[0, 1)``; outputs and
        errors from any previous cycle are discarded.
        """

        if num_nodes < 0 or num_weights < 0:
            raise ValueError(
                f"Layer dimensions must be non-negative, got ({num_nodes}, {num_weights})"
            )
        self.weights = self.rng.random((num_nodes, num_weights))
        self.bias = self.rng.random(num_nodes)
        self.output = np.zeros(num_nodes)
        self.error = np.zeros(num_nodes)

    def clear(self) -> None:
        self.weights = np.zeros((0, 0))
        self.bias = np.zeros(0)
        self.output = np.zeros(0)
        self.error = np.zeros(0)

    def feedforward(self, input: Vector) -> Array:
        """Compute new node outputs from ``input`` and return them."""

        if self.num_nodes == 0:
            raise NotInitializedError("feedforward called on an empty layer")
        x = as_vector(input, self.num_weights, "layer input")
        self.output = sigmoid(self.weights @ x + self.bias)
        return self.output

    def backpropagate(self, target: Vector | "DenseLayer") -> Array:
        """Compute node errors.

        ``target`` is either the reference vector (output layer) or the
        downstream :class:`DenseLayer` whose errors were already computed
        (hidden layer).
        """

        if isinstance(target, DenseLayer):
            if target.num_weights != self.num_nodes:
                raise ShapeMismatchError(
                    "downstream layer width", self.num_nodes, target.num_weights
                )
            raw_error = target.error @ target.weights
        else:
            reference = as_vector(target, self.num_nodes, "reference")
            raw_error = reference - self.output
        self.error = raw_error * sigmoid_deriv(self.output)
        return self.error

    def optimize(self, input: Vector, learning_rate: float) -> None:
        """Nudge weights and biases along the stored errors.

        ``input`` must be the vector fed to :meth:`feedforward` in the same
        cycle.
        """

        x = as_vector(input, self.num_weights, "layer input")
        step = learning_rate * self.error
        self.weights += np.outer(step, x)
        self.bias += step


__all__ = ["DenseLayer", "as_vector"]
