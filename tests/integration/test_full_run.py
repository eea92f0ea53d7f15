import json
import subprocess
import sys
from pathlib import Path

from evopool import EvoPool
from evopool.evolution import read_checkpoints

ROOT = Path(__file__).resolve().parents[2]


def test_xor_dataset_file_run_keeps_best_score(tmp_path):
    checkpoint = tmp_path / "best.jsonl"
    config = {
        "pool": {"population_size": 10, "elite_count": 2, "seed": 7},
        "engine": {"generations": 50, "max_workers": 2},
        "reporting": {"checkpoint_path": str(checkpoint)},
    }

    result = EvoPool(data=ROOT / "data" / "xor.json", config=config).run()

    best = [stats.best_score for stats in result.history]
    assert len(best) == 50
    assert all(later >= earlier for earlier, later in zip(best, best[1:]))
    records = read_checkpoints(checkpoint)
    assert [record["score"] for record in records] == best


def test_cli_run_prints_metrics(tmp_path):
    checkpoint = tmp_path / "cli.jsonl"
    proc = subprocess.run(
        [
            sys.executable,
            "cli.py",
            "run",
            "--data",
            "data/xor.json",
            "--generations",
            "3",
            "--seed",
            "11",
            "--checkpoint",
            str(checkpoint),
            "--run-name",
            "cli smoke",
        ],
        cwd=ROOT,
        capture_output=True,
        text=True,
        timeout=300,
        check=True,
    )

    payload = json.loads(proc.stdout)
    assert payload["run_id"].startswith("cli-smoke_")
    assert payload["metrics"]["generations"] == 3
    scores = [entry["score"] for entry in payload["top"]]
    assert len(scores) == 5
    assert scores == sorted(scores, reverse=True)
    assert payload["top"][0]["score"] == payload["metrics"]["final_best_score"]
    assert len(checkpoint.read_text(encoding="utf-8").splitlines()) == 3


def test_cli_explains_config_key():
    proc = subprocess.run(
        [sys.executable, "cli.py", "describe-config", "--key", "elite_count"],
        cwd=ROOT,
        capture_output=True,
        text=True,
        timeout=120,
        check=True,
    )
    assert "section=pool" in proc.stdout
