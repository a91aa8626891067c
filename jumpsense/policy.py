"""
Heart-rate zone policy.
Derives the training zone from the user's age and maps live heart rate to a
metronome tempo that pushes the user back toward the zone.
"""
from dataclasses import dataclass

from jumpsense import config as cfg


def hr_max(age: int) -> int:
    """Age-predicted maximum heart rate (220 - age), clamped to a plausible range."""
    if not cfg.MIN_AGE <= age <= cfg.MAX_AGE:
        raise ValueError(f"Age must be within {cfg.MIN_AGE}-{cfg.MAX_AGE}, got {age}")
    return max(cfg.HR_MAX_FLOOR, min(cfg.HR_MAX_CEIL, 220 - age))


@dataclass(frozen=True)
class HeartZone:
    """Target heart-rate band, inclusive on both ends."""
    hr_max: int
    low: int
    high: int

    @classmethod
    def for_age(cls, age: int) -> "HeartZone":
        m = hr_max(age)
        return cls(hr_max=m, low=int(m * cfg.ZONE_LOW_PCT), high=int(m * cfg.ZONE_HIGH_PCT))

    def target_tempo(self, hr: int) -> int:
        """Faster beat below the zone, moderate inside it, slower above it."""
        if hr < self.low:
            return cfg.BELOW_ZONE_BPM
        if hr <= self.high:
            return cfg.IN_ZONE_BPM
        return cfg.ABOVE_ZONE_BPM

    def summary(self) -> str:
        return (f"HRmax: {self.hr_max} bpm | Target zone: {self.low}-{self.high} bpm "
                f"({cfg.ZONE_LOW_PCT:.0%}-{cfg.ZONE_HIGH_PCT:.0%})")
