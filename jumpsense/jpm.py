"""
Real-time jumps-per-minute (JPM) estimation.
Turns a stream of accelerometer magnitudes into a cadence estimate using a
count-bounded sliding window, centered RMS smoothing, refractory peak
picking and interval averaging.

The detector is not thread-safe. Callers with several producers must
serialize calls to `JpmDetector.ingest`.
"""
import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, Sequence

import numpy as np

from jumpsense import config as cfg


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class Sample:
    """A single accelerometer reading reduced to its magnitude."""
    timestamp_ms: int
    magnitude: float


@dataclass(frozen=True)
class DetectorConfig:
    """
    Immutable estimator settings.
    `threshold` has no default: the integrating application must choose it.
    """
    threshold: float
    sample_rate_hz: float = cfg.SAMPLE_RATE_HZ
    window_size_sec: float = cfg.WINDOW_SIZE_SEC
    step_size_ms: int = cfg.STEP_SIZE_MS
    rms_window: int = cfg.RMS_WINDOW
    max_interval_s: float = cfg.MAX_INTERVAL_S

    def __post_init__(self) -> None:
        if self.sample_rate_hz <= 0:
            raise ValueError(f"sample_rate_hz must be positive, got {self.sample_rate_hz}")
        if self.window_size_sec <= 0:
            raise ValueError(f"window_size_sec must be positive, got {self.window_size_sec}")
        if self.step_size_ms <= 0:
            raise ValueError(f"step_size_ms must be positive, got {self.step_size_ms}")
        if self.rms_window < 2:
            raise ValueError(f"rms_window must be at least 2, got {self.rms_window}")

    @property
    def capacity(self) -> int:
        return round_half_up(self.window_size_sec * self.sample_rate_hz)

    @property
    def min_peak_distance(self) -> int:
        return round_half_up(cfg.REFRACTORY_SEC * self.sample_rate_hz)


class SampleWindow:
    """FIFO buffer holding at most `capacity` samples, evicted by count."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._samples: Deque[Sample] = deque()

    def ingest(self, sample: Sample) -> None:
        self._samples.append(sample)
        while len(self._samples) > self.capacity:
            self._samples.popleft()

    def __len__(self) -> int:
        return len(self._samples)

    def timestamps(self) -> np.ndarray:
        return np.array([s.timestamp_ms for s in self._samples], dtype=np.int64)

    def magnitudes(self) -> np.ndarray:
        return np.array([s.magnitude for s in self._samples], dtype=np.float64)


def rms_smooth(mag: Sequence[float], rms_window: int = cfg.RMS_WINDOW) -> np.ndarray:
    """
    Centered moving RMS over [i - w//2, i + w//2), clamped at the edges.
    Edge positions average fewer samples; nothing is padded or wrapped.
    """
    m = np.asarray(mag, dtype=np.float64)
    n = m.size
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    half = rms_window // 2
    sq = m * m
    out = np.empty(n, dtype=np.float64)
    # Each slice is averaged on its own so equal inputs give bit-equal outputs.
    for i in range(n):
        start = max(0, i - half)
        end = min(n, i + half)
        out[i] = np.sqrt(np.mean(sq[start:end]))
    return out


def find_peaks(signal: Sequence[float], threshold: float, min_distance: int) -> List[int]:
    """
    Greedy left-to-right strict local maxima above `threshold`.
    A peak inside the refractory distance of an accepted one is dropped,
    even when it is higher.
    """
    s = np.asarray(signal, dtype=np.float64)
    if s.size < 3:
        return []

    mid = s[1:-1]
    mask = (mid > threshold) & (mid > s[:-2]) & (mid > s[2:])
    candidates = np.nonzero(mask)[0] + 1

    peaks: List[int] = []
    last = -min_distance
    for i in candidates:
        if i - last >= min_distance:
            peaks.append(int(i))
            last = int(i)
    return peaks


def rate_from_peaks(
    peaks: Sequence[int],
    timestamps_ms: Sequence[int],
    max_interval_s: float = cfg.MAX_INTERVAL_S,
) -> float:
    """Converts peak indices into jumps per minute. 0.0 means no stable cadence."""
    if len(peaks) < 2:
        return 0.0

    ts = np.asarray(timestamps_ms, dtype=np.float64) / 1000.0
    intervals = np.diff(ts[np.asarray(peaks, dtype=np.int64)])
    valid = intervals[intervals <= max_interval_s]
    if valid.size == 0:
        return 0.0
    return float(60.0 / np.mean(valid))


class JpmDetector:
    """
    Streaming JPM estimator.
    Every `ingest` updates the window; once `step_size_ms` of sample time has
    passed since the last run, the window is re-analysed and `on_rate` is
    called synchronously with the new estimate.
    """

    def __init__(self, on_rate: Callable[[float], None], config: DetectorConfig, verbose: bool = False):
        self.on_rate = on_rate
        self.config = config
        self.verbose = verbose
        self.window = SampleWindow(config.capacity)
        self.last_compute_ts = 0

    def ingest(self, timestamp_ms: int, magnitude: float) -> None:
        """Precondition: timestamps are non-decreasing and magnitudes non-negative."""
        self.window.ingest(Sample(int(timestamp_ms), float(magnitude)))

        if timestamp_ms - self.last_compute_ts >= self.config.step_size_ms:
            jpm = self.compute()
            self.last_compute_ts = int(timestamp_ms)
            if jpm is not None:
                self.on_rate(jpm)

    def compute(self) -> Optional[float]:
        """Runs smoothing, peak picking and rate conversion on the current window."""
        if len(self.window) < self.config.rms_window:
            return None

        smoothed = rms_smooth(self.window.magnitudes(), self.config.rms_window)
        peaks = find_peaks(smoothed, self.config.threshold, self.config.min_peak_distance)
        jpm = rate_from_peaks(peaks, self.window.timestamps(), self.config.max_interval_s)

        if self.verbose and jpm > 0.0:
            print(f"✅ Peaks={len(peaks)}, JPM={jpm:.1f}")
        return jpm
