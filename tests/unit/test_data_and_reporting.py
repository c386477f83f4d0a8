import io
import json

import numpy as np
import pytest

from annlite.data import available_datasets, get_dataset, register_dataset, truth_table
from annlite.data.registry import DatasetSpec
from annlite.reporting.formatting import format_vector, print_predictions, print_vector
from annlite.reporting.metrics import CsvSink, JsonlSink
from annlite.reporting.summary import summarize, write_summary
from annlite.training.losses import REGISTRY as LOSS_REGISTRY
from annlite.training.metrics import compute_metrics, parse_metric_names


def test_xor_truth_table_order():
    inputs, targets = truth_table("xor")
    np.testing.assert_array_equal(inputs, [[0, 0], [0, 1], [1, 0], [1, 1]])
    np.testing.assert_array_equal(targets.ravel(), [0, 1, 1, 0])


@pytest.mark.parametrize(
    "gate, expected",
    [
        ("and", [0, 0, 0, 1]),
        ("or", [0, 1, 1, 1]),
        ("nand", [1, 1, 1, 0]),
        ("nor", [1, 0, 0, 0]),
        ("xnor", [1, 0, 0, 1]),
    ],
)
def test_two_input_gates(gate, expected):
    _, targets = truth_table(gate)
    np.testing.assert_array_equal(targets.ravel(), expected)


def test_parity_dataset_and_repeat():
    spec = get_dataset("parity", num_inputs=3, repeat=2)
    assert spec.d_in == 3 and spec.d_out == 1
    assert len(spec) == 16
    assert spec.targets.sum() == 8
    assert spec.provenance["gate"] == "xor"


def test_unknown_dataset_and_gate():
    with pytest.raises(KeyError):
        get_dataset("does-not-exist")
    with pytest.raises(KeyError):
        truth_table("implies")
    with pytest.raises(ValueError):
        truth_table("xor", 0)


def test_register_custom_dataset():
    @register_dataset("unit-identity")
    def _make(**_):
        eye = np.eye(2)
        return DatasetSpec(name="unit-identity", inputs=eye, targets=eye)

    assert "unit-identity" in available_datasets()
    assert get_dataset("unit-identity").d_out == 2


def test_csv_dataset(tmp_path):
    path = tmp_path / "table.csv"
    path.write_text("a,b,y\n0,0,0\n0,1,1\n1,0,1\n1,1,0\n")
    spec = get_dataset("csv", csv_path=path, target_cols="y")
    assert spec.inputs.shape == (4, 2)
    assert spec.targets.shape == (4, 1)
    assert spec.provenance["target_cols"] == ["y"]
    with pytest.raises(KeyError):
        get_dataset("csv", csv_path=path, target_cols="missing")
    with pytest.raises(ValueError):
        get_dataset("csv")


def test_format_and_print_vector():
    assert format_vector([0, 0.25, 1], 2) == "0.00 0.25 1.00"
    assert format_vector(np.array([0.96]), 1) == "1.0"
    buf = io.StringIO()
    print_vector([1, 2], buf, 0)
    assert buf.getvalue() == "1 2\n"
    with pytest.raises(ValueError):
        format_vector([1.0], -1)


def test_print_predictions_empty_is_noop():
    buf = io.StringIO()
    print_predictions([], lambda x: np.zeros(1), 2, buf)
    assert buf.getvalue() == ""


def test_metrics_and_losses():
    preds = np.array([[0.9], [0.2], [0.6], [0.4]])
    targets = np.array([[1.0], [0.0], [0.0], [0.0]])
    metrics = compute_metrics(["mse", "mae", "accuracy", "max_error", "rmse"], preds, targets)
    assert metrics["accuracy"] == pytest.approx(0.75)
    assert metrics["max_error"] == pytest.approx(0.6)
    assert metrics["mse"] == pytest.approx(np.mean((preds - targets) ** 2))
    assert metrics["rmse"] == pytest.approx(np.sqrt(metrics["mse"]))
    assert LOSS_REGISTRY.get("sse")(preds, targets) == pytest.approx(
        0.5 * np.sum((preds - targets) ** 2)
    )
    shared = compute_metrics(LOSS_REGISTRY.names(), preds, targets)
    for name in LOSS_REGISTRY.names():
        assert shared[name] == LOSS_REGISTRY.get(name)(preds, targets)
    with pytest.raises(KeyError):
        compute_metrics(["bogus"], preds, targets)
    with pytest.raises(KeyError):
        LOSS_REGISTRY.get("bogus")


def test_parse_metric_names():
    assert parse_metric_names(None) == ["mse", "mae", "accuracy"]
    assert parse_metric_names("default") == ["mse", "mae", "accuracy"]
    assert parse_metric_names("mse, max_error") == ["mse", "max_error"]
    assert parse_metric_names(["rmse"]) == ["rmse"]


def test_sinks_and_summary(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", seed=3, sha="abc")
    csv_sink = CsvSink(tmp_path / "m.csv")
    for epoch, loss in enumerate([0.4, 0.3, 0.1], start=1):
        jsonl.on_epoch(epoch, {"loss": loss})
        csv_sink(epoch, {"loss": loss})
    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert records[0] == {"epoch": 1, "split": "train", "seed": 3, "sha": "abc", "loss": 0.4}
    csv_lines = (tmp_path / "m.csv").read_text().splitlines()
    assert csv_lines[0] == "epoch,loss,split"
    assert len(csv_lines) == 4
    assert csv_sink.rows == jsonl.rows == 3

    summary = summarize(records, tail=2)
    assert summary["epochs"] == 3
    assert set(summary["metrics"]) == {"loss"}
    assert summary["metrics"]["loss"]["first"] == 0.4
    assert summary["metrics"]["loss"]["last"] == 0.1
    assert summary["metrics"]["loss"]["tail_auc"] == pytest.approx(0.2)

    out = write_summary(tmp_path / "m.jsonl", tmp_path / "summary.json")
    assert json.loads(open(out).read())["metrics"]["loss"]["min"] == 0.1


def test_plot_adapter_disabled_is_noop(tmp_path):
    from annlite.reporting.plots import PlotAdapter

    adapter = PlotAdapter(tmp_path / "plots", enable_plots=False)
    adapter.on_epoch(1, {"loss": 1.0})
    assert adapter.epochs == []
    assert adapter.close() is None
    assert not (tmp_path / "plots").exists()


def test_plot_adapter_headless(tmp_path):
    pytest.importorskip("matplotlib")
    from annlite.reporting.plots import PlotAdapter

    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter.on_epoch(1, {"loss": 1.0, "accuracy": 0.5})
    adapter(2, {"loss": 0.5, "accuracy": 1.0})
    assert adapter.curves == {"loss": [1.0, 0.5], "accuracy": [0.5, 1.0]}
    assert adapter.close() == tmp_path / "loss.png"
    assert (tmp_path / "loss.png").exists()
