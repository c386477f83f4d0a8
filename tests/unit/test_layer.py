import numpy as np
import pytest

from annlite.core.activations import sigmoid, sigmoid_deriv
from annlite.core.errors import NotInitializedError, ShapeMismatchError
from annlite.core.layer import DenseLayer


def _fixed_layer(weights, bias):
    layer = DenseLayer(len(bias), len(weights[0]), rng=np.random.default_rng(0))
    layer.weights = np.array(weights, dtype=np.float64)
    layer.bias = np.array(bias, dtype=np.float64)
    return layer


def test_resize_sets_shapes_and_small_values():
    layer = DenseLayer(rng=np.random.default_rng(0))
    assert (layer.num_nodes, layer.num_weights) == (0, 0)
    layer.resize(3, 5)
    assert layer.weights.shape == (3, 5)
    assert layer.bias.shape == (3,)
    assert np.all((layer.weights >= 0.0) & (layer.weights < 1.0))
    assert np.all(layer.output == 0.0) and np.all(layer.error == 0.0)
    layer.resize(3, 5)
    assert (layer.num_nodes, layer.num_weights) == (3, 5)


def test_resize_rejects_negative_sizes():
    with pytest.raises(ValueError):
        DenseLayer(rng=np.random.default_rng(0)).resize(-1, 2)


def test_clear_then_resize_matches_fresh_layer():
    layer = DenseLayer(4, 2, rng=np.random.default_rng(1))
    layer.feedforward([0.5, 0.5])
    layer.clear()
    assert (layer.num_nodes, layer.num_weights) == (0, 0)
    assert layer.output.size == 0
    layer.resize(4, 2)
    fresh = DenseLayer(4, 2, rng=np.random.default_rng(2))
    assert layer.weights.shape == fresh.weights.shape
    assert layer.bias.shape == fresh.bias.shape


def test_feedforward_matches_hand_computation():
    layer = _fixed_layer([[0.5, -1.0], [2.0, 0.25]], [0.1, -0.3])
    out = layer.feedforward([1.0, 2.0])
    expected = [
        1.0 / (1.0 + np.exp(-(0.5 * 1.0 - 1.0 * 2.0 + 0.1))),
        1.0 / (1.0 + np.exp(-(2.0 * 1.0 + 0.25 * 2.0 - 0.3))),
    ]
    np.testing.assert_allclose(out, expected)
    np.testing.assert_allclose(layer.output, expected)


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_feedforward_outputs_stay_in_open_unit_interval(seed):
    rng = np.random.default_rng(seed)
    layer = DenseLayer(6, 3, rng=rng)
    for _ in range(20):
        out = layer.feedforward(rng.uniform(-5.0, 5.0, size=3))
        assert np.all(out > 0.0) and np.all(out < 1.0)


def test_terminal_backpropagate_uses_reference_error():
    layer = _fixed_layer([[0.2, 0.4]], [0.0])
    layer.feedforward([1.0, 1.0])
    o = layer.output[0]
    error = layer.backpropagate([1.0])
    assert error[0] == pytest.approx((1.0 - o) * o * (1.0 - o))


def test_interior_backpropagate_sums_downstream_errors():
    hidden = _fixed_layer([[0.1, 0.2], [0.3, 0.4], [0.5, 0.6]], [0.0, 0.0, 0.0])
    output = _fixed_layer([[1.0, -2.0, 0.5], [0.25, 0.75, -1.0]], [0.1, 0.2])
    hidden.feedforward([1.0, 0.0])
    output.feedforward(hidden.output)
    output.backpropagate([1.0, 0.0])
    hidden.backpropagate(output)
    for i in range(hidden.num_nodes):
        downstream = sum(output.error[k] * output.weights[k, i] for k in range(2))
        o = hidden.output[i]
        assert hidden.error[i] == pytest.approx(downstream * o * (1.0 - o))


def test_interior_backpropagate_rejects_incompatible_layer():
    hidden = DenseLayer(3, 2, rng=np.random.default_rng(0))
    output = DenseLayer(1, 4, rng=np.random.default_rng(0))
    with pytest.raises(ShapeMismatchError):
        hidden.backpropagate(output)


def test_optimize_applies_delta_rule():
    layer = _fixed_layer([[0.2, 0.4], [0.1, -0.1]], [0.5, -0.5])
    layer.error = np.array([0.3, -0.2])
    before_w = layer.weights.copy()
    before_b = layer.bias.copy()
    layer.optimize([1.0, 2.0], learning_rate=0.1)
    for i in range(2):
        for j, x in enumerate([1.0, 2.0]):
            assert layer.weights[i, j] == pytest.approx(before_w[i, j] + 0.1 * layer.error[i] * x)
        assert layer.bias[i] == pytest.approx(before_b[i] + 0.1 * layer.error[i])


def test_shape_checks_and_empty_layer():
    layer = DenseLayer(2, 3, rng=np.random.default_rng(0))
    with pytest.raises(ShapeMismatchError) as info:
        layer.feedforward([1.0, 2.0])
    assert info.value.expected == 3 and info.value.actual == 2
    layer.feedforward([1.0, 2.0, 3.0])
    with pytest.raises(ShapeMismatchError):
        layer.backpropagate([1.0])
    with pytest.raises(NotInitializedError):
        DenseLayer(rng=np.random.default_rng(0)).feedforward([])


def test_sigmoid_helpers():
    x = np.array([-2.0, 0.0, 2.0])
    out = sigmoid(x)
    assert out[1] == pytest.approx(0.5)
    np.testing.assert_allclose(sigmoid_deriv(out), out * (1.0 - out))
