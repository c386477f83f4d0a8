"""Optional training-curve figure for a run directory."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping


class PlotAdapter:
    """Record per-epoch loss (and accuracy when reported) for ``loss.png``.

    Nothing is recorded or written unless ``enable_plots`` is set, and
    matplotlib is imported only when the figure is saved.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.epochs: List[int] = []
        self.curves: Dict[str, List[float]] = {"loss": [], "accuracy": []}
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots:
            return
        self.epochs.append(int(epoch))
        for name, values in self.curves.items():
            if name in metrics:
                values.append(float(metrics[name]))

    def __call__(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.on_epoch(epoch, metrics)

    def close(self) -> Path | None:
        """Save the figure and return its path, or ``None`` when disabled."""

        if not self.enable_plots or not self.epochs:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots()
        loss = self.curves["loss"]
        ax.plot(self.epochs[: len(loss)], loss, color="tab:blue")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Loss")
        accuracy = self.curves["accuracy"]
        if accuracy:
            twin = ax.twinx()
            twin.plot(self.epochs[: len(accuracy)], accuracy, color="tab:orange")
            twin.set_ylabel("Accuracy")
            twin.set_ylim(-0.05, 1.05)
        ax.set_title(f"{self.run_dir.name} training curve")
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path


__all__ = ["PlotAdapter"]
