"""Two-layer sigmoid network trained by per-sample backpropagation."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence, TextIO

import numpy as np

from .core.layer import DenseLayer, as_vector
from .core.types import Array, TrainingSet, Vector
from .reporting.formatting import print_predictions
from .training.losses import REGISTRY as LOSS_REGISTRY
from .training.metrics import compute_metrics, parse_metric_names


def _as_matrix(rows: Sequence[Vector], width: int, what: str) -> Array:
    if width:
        vectors = [as_vector(row, width, what) for row in rows]
        return np.vstack(vectors) if vectors else np.zeros((0, width))
    if not rows:
        return np.zeros((0, 0))
    return np.array([np.asarray(row, dtype=np.float64).reshape(-1) for row in rows])


class Network:
    """Fully-connected network with one hidden layer and one output layer.

    The network owns both layers, the training samples and the random
    generator used for weight initialisation and sample shuffling.  Pass
    ``seed`` (or an explicit ``rng``) for reproducible runs.
    """

    def __init__(
        self,
        num_inputs: int = 0,
        num_hidden_nodes: int = 0,
        num_outputs: int = 0,
        *,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        if rng is not None and seed is not None:
            raise ValueError("pass either rng or seed, not both")
        if rng is None:
            rng = np.random.default_rng(seed)
        self.rng = rng
        self._hidden_layer = DenseLayer(rng=rng)
        self._output_layer = DenseLayer(rng=rng)
        self._train_in = np.zeros((0, 0))
        self._train_out = np.zeros((0, 0))
        self._train_order = np.zeros(0, dtype=np.int64)
        if num_inputs or num_hidden_nodes or num_outputs:
            self.init(num_inputs, num_hidden_nodes, num_outputs)

    def __repr__(self) -> str:
        return (
            f"Network(num_inputs={self.num_inputs}, "
            f"num_hidden_nodes={self.num_hidden_nodes}, "
            f"num_outputs={self.num_outputs})"
        )

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def hidden_layer(self) -> DenseLayer:
        return self._hidden_layer

    @property
    def output_layer(self) -> DenseLayer:
        return self._output_layer

    @property
    def train_in(self) -> Array:
        return self._train_in

    @property
    def train_out(self) -> Array:
        return self._train_out

    @property
    def train_order(self) -> Array:
        return self._train_order

    @property
    def num_inputs(self) -> int:
        return self._hidden_layer.num_weights

    @property
    def num_hidden_nodes(self) -> int:
        return self._hidden_layer.num_nodes

    @property
    def num_outputs(self) -> int:
        return self._output_layer.num_nodes

    @property
    def num_training_sets(self) -> int:
        return int(self._train_order.size)

    @property
    def output(self) -> Array:
        """Copy of the output layer's most recent activations."""

        return self._output_layer.output.copy()

    # ------------------------------------------------------------------
    # Construction and data

    def init(self, num_inputs: int, num_hidden_nodes: int, num_outputs: int) -> None:
        """Size both layers, reinitialising every weight and bias."""

        self._hidden_layer.resize(num_hidden_nodes, num_inputs)
        self._output_layer.resize(num_outputs, num_hidden_nodes)

    def clear(self) -> None:
        """Return the network to its default-constructed (empty) state."""

        self._hidden_layer.clear()
        self._output_layer.clear()
        self._train_in = np.zeros((0, 0))
        self._train_out = np.zeros((0, 0))
        self._train_order = np.zeros(0, dtype=np.int64)

    def set_training_data(
        self, train_in: Sequence[Vector], train_out: Sequence[Vector]
    ) -> None:
        """Store copies of the training samples.

        When the two sequences differ in length the longer one is cut down
        to the shorter, so only complete input/target pairs are kept.  The
        sample order is reset to ``0, 1, ..., n - 1``.
        """

        train_in = list(train_in)
        train_out = list(train_out)
        count = min(len(train_in), len(train_out))
        self._train_in = _as_matrix(train_in[:count], self.num_inputs, "training input")
        self._train_out = _as_matrix(
            train_out[:count], self.num_outputs, "training target"
        )
        self._init_training_order()

    def set_training_set(self, training_set: TrainingSet) -> None:
        self.set_training_data(training_set.inputs, training_set.targets)

    def _init_training_order(self) -> None:
        self._train_order = np.arange(self._train_in.shape[0], dtype=np.int64)

    def _randomize_training_order(self) -> None:
        # Each position is swapped with a partner drawn from the full range,
        # itself included.
        order = self._train_order
        size = order.size
        for i in range(size):
            r = int(self.rng.integers(size))
            order[i], order[r] = order[r], order[i]

    # ------------------------------------------------------------------
    # Learning

    def _feedforward(self, input: Vector) -> None:
        self._hidden_layer.feedforward(input)
        self._output_layer.feedforward(self._hidden_layer.output)

    def _backpropagate(self, reference: Vector) -> None:
        self._output_layer.backpropagate(reference)
        self._hidden_layer.backpropagate(self._output_layer)

    def _optimize(self, input: Vector, learning_rate: float) -> None:
        self._output_layer.optimize(self._hidden_layer.output, learning_rate)
        self._hidden_layer.optimize(input, learning_rate)

    def train(
        self,
        num_epochs: int,
        learning_rate: float,
        *,
        callbacks: Sequence[object] | None = None,
        metric_names: Iterable[str] | str | None = None,
        loss: str = "mse",
    ) -> None:
        """Train on the stored samples for ``num_epochs`` shuffled epochs.

        Each sample goes through one forward pass, one backward pass and one
        parameter update before the next sample is drawn.  ``callbacks``
        receive ``on_epoch(epoch, metrics)`` after every epoch, with metrics
        computed by re-predicting the training set; without callbacks no
        metric is computed.
        """

        if num_epochs < 0:
            raise ValueError(f"num_epochs must be non-negative, got {num_epochs}")
        if learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {learning_rate}")
        callbacks = list(callbacks or [])
        names = parse_metric_names(metric_names)

        for epoch in range(1, num_epochs + 1):
            self._randomize_training_order()
            for j in self._train_order:
                input = self._train_in[j]
                reference = self._train_out[j]
                self._feedforward(input)
                self._backpropagate(reference)
                self._optimize(input, learning_rate)
            if callbacks:
                metrics = self.evaluate(metric_names=names, loss=loss)
                self._emit_epoch(epoch, metrics, callbacks)

    @staticmethod
    def _emit_epoch(
        epoch: int, metrics: Mapping[str, float], callbacks: Sequence[object]
    ) -> None:
        for callback in callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)

    # ------------------------------------------------------------------
    # Inference and reporting

    def predict(self, input: Vector) -> Array:
        """Run one forward pass and return a copy of the network output."""

        self._feedforward(input)
        return self.output

    def predict_many(self, inputs: Iterable[Vector]) -> Array:
        rows: List[Array] = [self.predict(sample) for sample in inputs]
        if not rows:
            return np.zeros((0, self.num_outputs))
        return np.vstack(rows)

    def evaluate(
        self,
        inputs: Sequence[Vector] | None = None,
        targets: Sequence[Vector] | None = None,
        *,
        metric_names: Iterable[str] | str | None = None,
        loss: str = "mse",
    ) -> Mapping[str, float]:
        """Return ``loss`` and reporting metrics over the given (or stored) samples."""

        if inputs is None:
            inputs, targets = self._train_in, self._train_out
        elif targets is None:
            raise ValueError("targets are required when inputs are given")
        predictions = self.predict_many(inputs)
        references = _as_matrix(list(targets), self.num_outputs, "target")
        results = {"loss": LOSS_REGISTRY.get(loss)(predictions, references)}
        results.update(
            compute_metrics(parse_metric_names(metric_names), predictions, references)
        )
        return results

    def print(
        self,
        inputs: Iterable[Vector] | None = None,
        num_decimals: int = 1,
        ostream: TextIO | None = None,
    ) -> None:
        """Predict each input and write an ``Input:``/``Output:`` table.

        Without ``inputs`` the stored training inputs are re-predicted.
        """

        batch = self._train_in if inputs is None else inputs
        print_predictions(batch, self.predict, num_decimals, ostream)


__all__ = ["Network"]
