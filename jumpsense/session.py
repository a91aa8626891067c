"""
Jump-rope session controller.
Wires accelerometer samples into the JPM detector and heart-rate updates into
the metronome tempo policy, with a fixed-tempo warm-up phase.
"""
import threading
import time
from typing import Callable, Optional

from jumpsense import config as cfg
from jumpsense.features import magnitude
from jumpsense.jpm import DetectorConfig, JpmDetector
from jumpsense.metronome import Metronome
from jumpsense.policy import HeartZone


class JumpSession:
    """
    Owns one detector and drives one metronome.
    Accelerometer and heart-rate callbacks may arrive on different threads;
    all state changes go through a single lock.
    """

    def __init__(
        self,
        metronome: Metronome,
        detector_config: DetectorConfig,
        clock: Callable[[], float] = time.monotonic,
        on_update: Optional[Callable[["JumpSession"], None]] = None,
        warmup_s: float = cfg.WARMUP_S,
    ):
        self.metronome = metronome
        self.clock = clock
        self.on_update = on_update
        self.warmup_s = warmup_s

        self.detector = JpmDetector(self._on_rate, detector_config)
        self.zone: Optional[HeartZone] = None
        self.current_jpm = 0.0
        self.current_bpm = 0
        self.last_hr: Optional[int] = None
        self.is_jumping = False
        self._warmup_until: Optional[float] = None
        self._lock = threading.RLock()

    def set_age(self, age: int) -> HeartZone:
        self.zone = HeartZone.for_age(age)
        print(f"❤️ {self.zone.summary()}")
        return self.zone

    @property
    def in_warmup(self) -> bool:
        return self._warmup_until is not None and self.clock() < self._warmup_until

    @property
    def mode(self) -> str:
        if not self.is_jumping:
            return "stop"
        return "warmup" if self.in_warmup else "auto"

    def start(self) -> None:
        """Begins the warm-up at a fixed tempo. Requires a heart-rate zone."""
        with self._lock:
            if self.zone is None:
                raise RuntimeError("Heart-rate zone not set; call set_age() first")
            if self.is_jumping:
                return
            self.is_jumping = True
            self._warmup_until = self.clock() + self.warmup_s
            self._set_tempo(cfg.WARMUP_BPM)
        print(f"🔥 Warm-up: {self.warmup_s:.0f}s at {cfg.WARMUP_BPM} BPM")

    def stop(self) -> None:
        with self._lock:
            if not self.is_jumping:
                return
            self.is_jumping = False
            self._warmup_until = None
            self.metronome.stop()
            self.current_bpm = 0
        print("🛑 Session stopped")

    def tick(self) -> None:
        """Leaves the warm-up once it has expired and applies the latest heart rate."""
        with self._lock:
            if self._warmup_until is None or self.in_warmup:
                return
            self._warmup_until = None
            print("⏱ Warm-up finished -> automatic mode")
            if self.last_hr is not None:
                self._apply_hr(self.last_hr)

    def on_heart_rate(self, hr: int) -> None:
        with self._lock:
            self.last_hr = int(hr)
            self.tick()
            self._apply_hr(self.last_hr)
        self._notify()

    def on_accel(self, timestamp_ms: int, x: float, y: float, z: float) -> None:
        with self._lock:
            self.detector.ingest(timestamp_ms, magnitude(x, y, z))
            self.tick()

    def _on_rate(self, jpm: float) -> None:
        self.current_jpm = jpm
        self._notify()

    def _apply_hr(self, hr: int) -> None:
        if not self.is_jumping or self.zone is None or self.in_warmup:
            return
        target = self.zone.target_tempo(hr)
        if target != self.current_bpm:
            self._set_tempo(target)

    def _set_tempo(self, bpm: int) -> None:
        self.current_bpm = bpm
        self.metronome.start(bpm)

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update(self)

    def status_line(self) -> str:
        hr = self.last_hr if self.last_hr is not None else ""
        return f"HR:{hr},JPM:{self.current_jpm:.0f},BPM:{self.current_bpm}"
