"""
Unit tests for the jump session controller.
Drives warm-up, heart-rate pacing and cadence updates with a fake clock.
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from jumpsense.jpm import DetectorConfig
from jumpsense.session import JumpSession

PULSE = [5.0, 12.0, 22.0, 34.0, 40.0, 36.0, 27.0, 18.0, 10.0, 4.0, 2.0]


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class RecordingMetronome:
    """Stands in for the audio metronome and records tempo changes."""

    def __init__(self):
        self.started = []
        self.stops = 0

    def start(self, bpm: int) -> None:
        self.started.append(bpm)

    def stop(self) -> None:
        self.stops += 1


@pytest.fixture
def session_parts():
    clock = FakeClock()
    metro = RecordingMetronome()
    updates = []
    config = DetectorConfig(threshold=18.0, window_size_sec=2.0, step_size_ms=500)
    session = JumpSession(metro, config, clock=clock, on_update=lambda s: updates.append(s.status_line()))
    return session, metro, clock, updates


def test_start_requires_zone(session_parts):
    session, _, _, _ = session_parts
    with pytest.raises(RuntimeError):
        session.start()


def test_warmup_holds_fixed_tempo(session_parts):
    """During warm-up heart-rate changes do not touch the metronome."""
    session, metro, clock, _ = session_parts
    session.set_age(40)
    session.start()
    assert metro.started == [100]
    assert session.mode == "warmup"

    clock.now = 10.0
    session.on_heart_rate(90)
    assert metro.started == [100]
    assert session.current_bpm == 100


def test_auto_mode_follows_zone(session_parts):
    """After warm-up the tempo tracks the heart-rate zone and only restarts on change."""
    session, metro, clock, _ = session_parts
    session.set_age(40)
    session.start()

    clock.now = 31.0
    session.on_heart_rate(90)
    assert session.mode == "auto"
    assert metro.started[-1] == 135

    session.on_heart_rate(110)
    assert metro.started[-1] == 120
    session.on_heart_rate(150)
    session.on_heart_rate(160)
    assert metro.started == [100, 135, 120, 100], "Same target must not restart the metronome"


def test_tick_applies_last_hr_after_warmup(session_parts):
    session, metro, clock, _ = session_parts
    session.set_age(40)
    session.start()
    session.on_heart_rate(90)
    clock.now = 30.5
    session.tick()
    assert metro.started == [100, 135]


def test_stop(session_parts):
    session, metro, _, _ = session_parts
    session.set_age(40)
    session.start()
    session.stop()
    assert metro.stops == 1
    assert session.current_bpm == 0
    assert session.mode == "stop"


def test_accel_feeds_detector(session_parts):
    """Triaxial samples are reduced to magnitude and produce a cadence estimate."""
    session, _, _, updates = session_parts
    for k in range(200):
        phase = (k + 12) % 25
        z = PULSE[phase] if phase < len(PULSE) else 1.0
        session.on_accel(1000 + k * 20, 0.0, 0.0, z)

    assert session.current_jpm == pytest.approx(120.0, abs=5.0)
    assert updates[-1] == "HR:,JPM:120,BPM:0"
