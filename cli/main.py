"""Command line entry point for annlite training runs."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable

from annlite.data import available_datasets
from annlite.training import pipelines


def _format_result(result) -> str:
    payload = {
        "epochs": result.epochs,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
        "predictions": result.predictions_path,
        "final": result.final_metrics,
    }
    return json.dumps(payload, sort_keys=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        default="xor",
        help="Preset configuration to execute (see --list-presets)",
    )
    parser.add_argument(
        "--config", type=Path, help="JSON/YAML config; full configs replace the preset"
    )
    parser.add_argument("--dataset", help="Override the dataset used by the run")
    parser.add_argument(
        "--num-inputs", type=int, help="Number of inputs for truth-table datasets"
    )
    parser.add_argument("--csv-path", help="Path to a CSV file for the csv dataset")
    parser.add_argument(
        "--target-cols", help="Comma separated target columns for the csv dataset"
    )
    parser.add_argument("--hidden", type=int, help="Number of hidden nodes")
    parser.add_argument("--epochs", type=int, help="Number of training epochs")
    parser.add_argument("--lr", type=float, help="Learning rate")
    parser.add_argument("--seed", type=int, help="Seed for initial weights and shuffling")
    parser.add_argument(
        "--decimals", type=int, help="Decimals shown in the prediction table"
    )
    parser.add_argument("--run-dir", help="Directory receiving run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Save a loss curve (needs matplotlib)"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--list-datasets", action="store_true", help="List registered datasets and exit"
    )
    return parser


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _resolve_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> dict:
    try:
        config = json.loads(json.dumps(pipelines.load_preset(args.preset)))
    except KeyError as exc:
        parser.error(str(exc))

    if args.config:
        try:
            override = pipelines.read_config_file(args.config)
        except (KeyError, ValueError, TypeError, RuntimeError, OSError) as exc:
            parser.error(f"could not load {args.config}: {exc}")
        config = _merge(config, dict(override))
        if "sweep" not in override:
            config.pop("sweep", None)

    if args.dataset or args.num_inputs or args.csv_path:
        data_cfg = config.setdefault("data", {})
        if args.dataset and args.dataset != data_cfg.get("name"):
            data_cfg["name"] = args.dataset
            data_cfg["options"] = {}
            # Widths follow the new dataset.
            config.setdefault("model", {}).pop("d_in", None)
            config["model"].pop("d_out", None)
        opts = data_cfg.setdefault("options", {})
        if args.num_inputs is not None:
            opts["num_inputs"] = int(args.num_inputs)
            config.setdefault("model", {}).pop("d_in", None)
        if args.csv_path:
            opts["csv_path"] = args.csv_path
        if args.target_cols:
            opts["target_cols"] = args.target_cols

    model_cfg = config.setdefault("model", {})
    train_cfg = config.setdefault("train", {})
    if args.hidden is not None:
        if args.hidden < 1:
            parser.error(f"--hidden must be at least 1, got {args.hidden}")
        model_cfg["hidden"] = int(args.hidden)
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.lr is not None:
        train_cfg["lr"] = float(args.lr)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.decimals is not None:
        train_cfg["decimals"] = int(args.decimals)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(None if argv is None else list(argv))

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.list_datasets:
        for name in available_datasets():
            print(name)
        raise SystemExit(0)

    config = _resolve_config(args, parser)
    try:
        result = pipelines.run_pipeline(config, ostream=sys.stdout)
    except (KeyError, ValueError, RuntimeError) as exc:
        parser.error(str(exc))

    if isinstance(result, list):
        for item in result:
            print(_format_result(item))
    else:
        print(_format_result(result))


if __name__ == "__main__":
    main()
