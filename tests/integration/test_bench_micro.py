import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
SCRIPT = ROOT / "scripts" / "bench_micro.py"


def test_bench_micro_runs_quickly(tmp_path):
    out = tmp_path / "bench"
    env = dict(os.environ, PYTHONPATH=os.pathsep.join(filter(None, [str(ROOT), os.environ.get("PYTHONPATH")])))
    subprocess.check_call(
        [sys.executable, str(SCRIPT), "--seeds", "0", "--epochs", "5", "--out", str(out)],
        env=env,
    )
    md = (out / "bench_micro.md").read_text(encoding="utf-8")
    assert "| XOR |" in md and "| AND |" in md and "| OR |" in md
    assert (out / "bench_micro.csv").exists()
