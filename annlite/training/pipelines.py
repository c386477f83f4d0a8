"""Run assembly: presets, config loading and the training pipeline."""

from __future__ import annotations

import io
import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, TextIO

from ..core.types import RunResult
from ..data import get_dataset
from ..network import Network
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink, MetricsCapture
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .metrics import parse_metric_names

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {"num_inputs": 2}},
        "model": {"d_in": 2, "d_out": 1, "hidden": 2},
        "train": {
            "epochs": 1000,
            "lr": 0.02,
            "seed": 1,
            "run_dir": "runs/xor",
            "enable_plots": False,
        },
    },
    "xor-fast": {
        "data": {"name": "xor", "options": {"num_inputs": 2}},
        "model": {"d_in": 2, "d_out": 1, "hidden": 4},
        "train": {
            "epochs": 6000,
            "lr": 0.7,
            "seed": 3,
            "run_dir": "runs/xor-fast",
            "enable_plots": False,
        },
    },
    "and": {
        "data": {"name": "and", "options": {"num_inputs": 2}},
        "model": {"d_in": 2, "d_out": 1, "hidden": 2},
        "train": {
            "epochs": 3000,
            "lr": 0.5,
            "seed": 0,
            "run_dir": "runs/and",
            "enable_plots": False,
        },
    },
    "or": {
        "data": {"name": "or", "options": {"num_inputs": 2}},
        "model": {"d_in": 2, "d_out": 1, "hidden": 2},
        "train": {
            "epochs": 3000,
            "lr": 0.5,
            "seed": 0,
            "run_dir": "runs/or",
            "enable_plots": False,
        },
    },
    "xor-seed-sweep": {
        "sweep": {"seeds": [0, 1, 2, 3], "hidden": [3, 4]},
        "data": {"name": "xor", "options": {"num_inputs": 2}},
        "model": {"d_in": 2, "d_out": 1},
        "train": {
            "epochs": 3000,
            "lr": 0.5,
            "run_dir": "runs/xor-sweep",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_REQUIRED_SECTIONS = {"data", "model", "train"}
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Decode a JSON or YAML run config."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load config files in YAML format") from exc
        data = yaml.safe_load(path.read_text()) or {}
    elif suffix == ".json":
        data = json.loads(path.read_text() or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    missing = _REQUIRED_SECTIONS - set(data)
    if missing:
        raise KeyError(
            f"Config {path.name} is missing required sections: {', '.join(sorted(missing))}"
        )
    return json.loads(json.dumps(data))


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                found[file.stem] = read_config_file(file)
        _FILE_PRESETS_CACHE = found
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def run_pipeline(
    config: Mapping[str, object], *, ostream: TextIO | None = None
) -> RunResult | List[RunResult]:
    """Train a network as described by ``config`` and write its run artifacts.

    A config with a ``sweep`` section trains one network per
    ``(hidden, seed)`` combination and returns every result.
    """

    if "sweep" in config:
        return _run_sweep(config, ostream=ostream)
    return _train_single(config, ostream=ostream)


def _run_sweep(config: Mapping[str, object], *, ostream: TextIO | None) -> List[RunResult]:
    sweep_cfg = dict(config["sweep"])
    base_dir = Path(str(dict(config["train"]).get("run_dir", "runs/sweep")))
    hidden_values = sweep_cfg.get("hidden") or [dict(config["model"]).get("hidden", 2)]
    results: List[RunResult] = []
    for hidden in hidden_values:
        for seed in sweep_cfg.get("seeds", [0]):
            cfg = deepcopy(dict(config))
            cfg.pop("sweep", None)
            cfg["model"] = dict(cfg["model"], hidden=int(hidden))
            cfg["train"] = dict(
                cfg["train"],
                seed=int(seed),
                run_dir=str(base_dir / f"h{int(hidden)}-s{int(seed)}"),
            )
            results.append(_train_single(cfg, ostream=ostream))
    return results


def _train_single(config: Mapping[str, object], *, ostream: TextIO | None) -> RunResult:
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    d_in = int(model_cfg.get("d_in", dataset.d_in))
    d_out = int(model_cfg.get("d_out", dataset.d_out))
    if dataset.d_in != d_in:
        raise ValueError(f"Configured d_in={d_in} but dataset provides {dataset.d_in}")
    if dataset.d_out != d_out:
        raise ValueError(f"Configured d_out={d_out} but dataset provides {dataset.d_out}")
    hidden = int(model_cfg.get("hidden", 2))

    epochs = int(train_cfg.get("epochs", 1000))
    lr = float(train_cfg.get("lr", 0.02))
    seed = int(train_cfg.get("seed", 0))
    loss_name = str(train_cfg.get("loss", "mse"))
    metric_names = parse_metric_names(train_cfg.get("metrics", "default"))
    decimals = int(train_cfg.get("decimals", 1))

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=dataset.name,
        samples=len(dataset),
        dims=(d_in, hidden, d_out),
        epochs=epochs,
        lr=lr,
        seed=seed,
        loss=loss_name,
        metrics=",".join(metric_names),
    )

    jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", split="train")
    capture = MetricsCapture()
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    network = Network(d_in, hidden, d_out, seed=seed)
    network.set_training_set(dataset.training_set)
    network.train(
        epochs,
        lr,
        callbacks=[jsonl, csv_sink, capture, plots],
        metric_names=metric_names,
        loss=loss_name,
    )
    plots.close()

    table = io.StringIO()
    network.print(num_decimals=decimals, ostream=table)
    predictions_path = run_dir / "predictions.txt"
    predictions_path.write_text(table.getvalue())
    if ostream is not None:
        ostream.write(table.getvalue())

    safe_config = json.loads(json.dumps(config))
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=dict(dataset.provenance, name=dataset.name),
    )
    summary_path = write_summary(
        jsonl.path, run_dir / "summary.json", tail=int(train_cfg.get("summary_tail", 32))
    )
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    final_metrics = dict(capture.last) if capture.last else dict(
        network.evaluate(metric_names=metric_names, loss=loss_name)
    )
    return RunResult(
        epochs=epochs,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        predictions_path=str(predictions_path),
        final_metrics=final_metrics,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_startup_summary(
    *,
    dataset_name: str,
    samples: int,
    dims: tuple[int, int, int],
    epochs: int,
    lr: float,
    seed: int,
    loss: str,
    metrics: str,
) -> None:
    print("=== annlite run ===")
    print(f"Dataset       : {dataset_name} ({samples} samples)")
    print(f"Dimensions    : {list(dims)}")
    print(f"Epochs        : {epochs}")
    print(f"Learning rate : {lr}")
    print(f"Seed          : {seed}")
    print(f"Loss          : {loss}")
    print(f"Metrics       : {metrics}")
    print("===================")


__all__ = ["run_pipeline", "load_preset", "presets", "read_config_file"]
