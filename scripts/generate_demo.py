"""
Synthetic accelerometer log generator for the JumpSense replay mode.
Writes timestamp,ax,ay,az rows at 50 Hz: rest, jump-rope phases at changing cadence, rest.
"""
import os
import sys
from pathlib import Path

import numpy as np
import pandas as pd

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jumpsense import config as cfg

SAMPLE_RATE = cfg.SAMPLE_RATE_HZ
START_MS = 1_000_000

# (duration_s, jumps_per_minute)
PHASES = [
    (5, 0),
    (20, 100),
    (30, 120),
    (20, 135),
    (5, 0),
]


def landing_pulse(phase: np.ndarray, width: float = 0.22) -> np.ndarray:
    """Raised-cosine spike centred on each landing, zero elsewhere."""
    d = np.minimum(phase, 1.0 - phase)
    pulse = np.where(d < width, 0.5 * (1.0 + np.cos(np.pi * d / width)), 0.0)
    return pulse


def generate() -> None:
    """Generates the CSV consumed by ReplayStream."""
    total = sum(d for d, _ in PHASES)
    print(f"Generating synthetic accelerometer log ({total}s @ {SAMPLE_RATE:.0f} Hz)...")

    rng = np.random.default_rng(7)
    frames = []
    t_ms = START_MS
    beat_phase = 0.0

    for duration, jpm in PHASES:
        n = int(duration * SAMPLE_RATE)
        dt = 1.0 / SAMPLE_RATE
        if jpm > 0:
            phases = (beat_phase + np.arange(n) * dt * jpm / 60.0) % 1.0
            beat_phase = (beat_phase + n * dt * jpm / 60.0) % 1.0
            spike = landing_pulse(phases) * rng.normal(28.0, 2.0, size=n)
        else:
            spike = np.zeros(n)

        az = cfg.GRAVITY + spike + rng.normal(0, 0.3, size=n)
        ax = rng.normal(0, 0.4, size=n)
        ay = rng.normal(0, 0.4, size=n)
        ts = t_ms + np.round(np.arange(n) * dt * 1000.0).astype(np.int64)
        t_ms = int(ts[-1] + round(dt * 1000.0))

        frames.append(pd.DataFrame({"timestamp": ts, "ax": ax, "ay": ay, "az": az}))

    os.makedirs(cfg.OUT_DIR, exist_ok=True)
    df = pd.concat(frames, ignore_index=True).round({"ax": 4, "ay": 4, "az": 4})
    df.to_csv(cfg.SIM_DATA_FILE, index=False)

    print(f"Success: File '{cfg.SIM_DATA_FILE}' generated ({len(df)} records).")


if __name__ == "__main__":
    generate()
