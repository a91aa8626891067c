"""
Metronome playback.
Plays a short synthesised click through the pygame mixer on a background
thread, scheduling beats against a monotonic clock so the tempo does not drift.
"""
import threading
import time
from typing import Callable, Optional

import numpy as np
import pygame

from jumpsense import config as cfg


def make_click_wave(freq_hz: float = cfg.CLICK_FREQ_HZ, length_ms: int = cfg.CLICK_MS,
                    sample_rate: int = cfg.MIXER_FREQ) -> np.ndarray:
    """Decaying sine burst as signed 16-bit PCM."""
    n = int(sample_rate * length_ms / 1000.0)
    t = np.arange(n) / float(sample_rate)
    env = np.exp(-t * 120.0)
    wave = np.sin(2 * np.pi * freq_hz * t) * env
    return (wave * 0.8 * 32767).astype(np.int16)


class Metronome:
    """
    Beat generator with a pluggable `click` callable.
    Without an explicit click the pygame mixer is opened; if that fails the
    metronome keeps time silently.
    """

    def __init__(self, click: Optional[Callable[[], None]] = None,
                 clock: Callable[[], float] = time.monotonic, tick_s: float = 0.002):
        self.clock = clock
        self.tick_s = tick_s
        self.audio_enabled = False
        self._sound = None
        self._owns_mixer = False

        if click is None:
            click = self._init_mixer()
        self.click = click

        self.bpm = 0
        self.beat_count = 0
        self._lock = threading.Lock()
        self._stop_evt = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _init_mixer(self) -> Callable[[], None]:
        try:
            pygame.mixer.init(frequency=cfg.MIXER_FREQ, size=-16, channels=1)
            _, _, channels = pygame.mixer.get_init()
            wave = make_click_wave()
            if channels > 1:
                wave = np.repeat(wave[:, None], channels, axis=1)
            self._sound = pygame.sndarray.make_sound(np.ascontiguousarray(wave))
            self.audio_enabled = True
            self._owns_mixer = True
            print("🎧 Metronome click loaded.")
        except pygame.error as e:
            print(f"⚠️ Audio output disabled: {e}")
        return self._play_click

    def _play_click(self) -> None:
        if self._sound is not None:
            self._sound.play()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, bpm: int) -> None:
        """(Re)starts the beat at `bpm`; a running beat is stopped first."""
        if bpm <= 0:
            raise ValueError(f"bpm must be positive, got {bpm}")
        self.stop()

        interval_s = 60.0 / bpm
        with self._lock:
            self.bpm = int(bpm)
            self.beat_count = 0
            self._stop_evt = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(interval_s, self._stop_evt), daemon=True
            )
            self._thread.start()
        print(f"▶️ Metronome started at {bpm} BPM (interval={interval_s * 1000:.0f}ms)")

    def _run(self, interval_s: float, stop_evt: threading.Event) -> None:
        next_beat = self.clock()
        while not stop_evt.is_set():
            now = self.clock()
            if now >= next_beat:
                self.click()
                with self._lock:
                    self.beat_count += 1
                next_beat += interval_s
            stop_evt.wait(self.tick_s)

    def stop(self) -> None:
        with self._lock:
            thread, self._thread = self._thread, None
            self._stop_evt.set()
        if thread is not None:
            thread.join(timeout=1.0)
            print("⏹ Metronome stopped")
        self.bpm = 0

    def release(self) -> None:
        """Stops the beat and closes the mixer if this metronome opened it."""
        self.stop()
        if self._owns_mixer:
            pygame.mixer.quit()
            self._owns_mixer = False
            self.audio_enabled = False
            self._sound = None
