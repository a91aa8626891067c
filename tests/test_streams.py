"""
Unit tests for the accelerometer sources.
Replay uses a temporary CSV; the live client is exercised without a network.
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from jumpsense import streams
from jumpsense.streams import PhyphoxStream, ReplayStream


def test_replay_reads_log(tmp_path):
    """Rows are yielded in order; non-numeric rows are dropped."""
    csv = tmp_path / "accel_log.csv"
    csv.write_text(
        "timestamp,ax,ay,az\n"
        "1000,0.1,0.2,9.8\n"
        "1020,abc,0.2,9.8\n"
        "1040,0.3,-0.1,30.5\n"
    )
    stream = ReplayStream(str(csv))
    rows = list(stream)
    assert len(stream) == 2
    assert rows[0] == (1000, 0.1, 0.2, 9.8)
    assert rows[1] == (1040, 0.3, -0.1, 30.5)


def test_replay_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ReplayStream(str(tmp_path / "nope.csv"))


def test_replay_missing_columns(tmp_path):
    csv = tmp_path / "bad.csv"
    csv.write_text("timestamp,hr\n1000,120\n")
    with pytest.raises(ValueError):
        ReplayStream(str(csv))


def test_phyphox_parse_converts_to_ms():
    stream = PhyphoxStream("http://localhost:8080/")
    out = stream._parse({
        "acc_time": {"buffer": [1.0, 1.02]},
        "accX": {"buffer": [0.0, 0.1]},
        "accY": [0.0, 0.2],
        "accZ": {"buffer": [9.8, None]},
    })
    assert out == [(1000, 0.0, 0.0, 9.8)]
    assert stream.last_t == 1.0
    assert stream.base_url == "http://localhost:8080"


def test_phyphox_network_error(monkeypatch):
    """Connection failures yield an empty batch instead of raising."""
    def boom(*args, **kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(streams.requests, "get", boom)
    stream = PhyphoxStream("http://localhost:8080")
    assert stream.fetch_data() == []
    assert stream.error_count == 1
