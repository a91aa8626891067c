"""JumpSense: real-time jump-rope cadence estimation and heart-rate pacing."""
