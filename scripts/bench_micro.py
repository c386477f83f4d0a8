"""Train small truth-table networks over several seeds and tabulate the outcome."""

from __future__ import annotations

import argparse
import csv
import json
import time
from pathlib import Path
from statistics import mean, pstdev

from annlite import Network, get_dataset

GATES = ["xor", "and", "or"]


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu:.4f} ± {sd:.4f}"


def train_one(gate: str, seed: int, epochs: int, lr: float, hidden: int) -> dict:
    dataset = get_dataset(gate)
    network = Network(dataset.d_in, hidden, dataset.d_out, seed=seed)
    network.set_training_set(dataset.training_set)
    start = time.perf_counter()
    network.train(epochs, lr)
    elapsed = time.perf_counter() - start
    metrics = network.evaluate(metric_names=["accuracy"])
    return {
        "final_loss": metrics["loss"],
        "final_acc": metrics["accuracy"],
        "seconds": elapsed,
    }


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--seeds", nargs="+", type=int, default=[0, 1, 2])
    ap.add_argument("--epochs", type=int, default=2000)
    ap.add_argument("--lr", type=float, default=0.5)
    ap.add_argument("--hidden", type=int, default=4)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args(argv)

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for gate in GATES:
        for s in args.seeds:
            r = train_one(gate, seed=s, epochs=args.epochs, lr=args.lr, hidden=args.hidden)
            runs.append({"gate": gate, "seed": s, **r})
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    agg = {}
    for gate in GATES:
        rows = [r for r in runs if r["gate"] == gate]
        agg[gate] = {
            "n": len(rows),
            "loss": [r["final_loss"] for r in rows],
            "acc": [r["final_acc"] for r in rows],
            "solved": sum(1 for r in rows if r["final_acc"] == 1.0),
            "seconds": mean(r["seconds"] for r in rows),
        }

    csv_path = out / "bench_micro.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["gate", "seeds", "epochs", "final_loss_mu", "final_acc_mu", "solved", "seconds_mu"])
        for gate in GATES:
            a = agg[gate]
            w.writerow(
                [gate, a["n"], args.epochs, mean(a["loss"]), mean(a["acc"]), a["solved"], a["seconds"]]
            )

    lines = [
        "| Gate | Final loss | Final acc | Solved | Seconds |",
        "|------|------------|-----------|--------|---------|",
    ]
    for gate in GATES:
        a = agg[gate]
        lines.append(
            f"| {gate.upper()} | {_fmt_mu_sigma(a['loss'])} | {_fmt_mu_sigma(a['acc'])} "
            f"| {a['solved']}/{a['n']} | {a['seconds']:.3f} |"
        )
    (out / "bench_micro.md").write_text("\n".join(lines) + "\n", encoding="utf-8")
    print("\n".join(lines))


if __name__ == "__main__":
    main()
