"""Tests for the headless command-line runner."""

import csv
from pathlib import Path

from biotope.__main__ import main
from biotope.simulation.stats import CSV_HEADER


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "tiny.yaml"
    path.write_text(
        "seed: 3\n"
        "world_size: 16\n"
        "river_count: 1\n"
        "rabbit_count: 8\n"
        "wolf_count: 1\n",
    )
    return path


def test_writes_sampled_stats(tmp_path: Path) -> None:
    output = tmp_path / "stats.csv"
    main(
        [
            "-c",
            str(_write_config(tmp_path)),
            "--ticks",
            "5",
            "--log-interval",
            "1",
            "-o",
            str(output),
        ],
    )
    with output.open(newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == list(CSV_HEADER)
    assert [row[0] for row in rows[1:]] == ["1", "2", "3", "4", "5"]


def test_mode_override(tmp_path: Path) -> None:
    output = tmp_path / "static.csv"
    main(
        [
            "-c",
            str(_write_config(tmp_path)),
            "--ticks",
            "4",
            "--log-interval",
            "2",
            "--mode",
            "static",
            "-o",
            str(output),
        ],
    )
    with output.open(newline="") as f:
        rows = list(csv.reader(f))
    assert len(rows) == 3
    # Static mode never breeds or hunts, so animal counts hold steady.
    assert rows[1][-2:] == rows[2][-2:]
