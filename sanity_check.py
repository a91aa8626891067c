"""
Diagnostic utility tool for the JumpSense project environment.
Verifies the demo data, the audio output and a detector dry run
prior to application launch.
"""
import sys
from pathlib import Path

# Ensure Python can find the 'jumpsense' package from the root directory
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import os
import pygame
from jumpsense import config as cfg
from jumpsense.jpm import DetectorConfig, JpmDetector


def check_step(name: str, filepath: str) -> bool:
    """Verifies absolute file existence."""
    if os.path.exists(filepath):
        print(f"✅ {name:20} -> FOUND")
        return True

    print(f"❌ {name:20} -> MISSING! (Expected: {filepath})")
    return False


def check_detector() -> bool:
    """Feeds a flat signal through the detector and expects a single zero estimate."""
    rates = []
    det = JpmDetector(rates.append, DetectorConfig(threshold=cfg.PHONE_THRESHOLD))
    for k in range(int(cfg.SAMPLE_RATE_HZ)):
        det.ingest(1000 + k * 20, cfg.GRAVITY)
    ok = rates == [0.0, 0.0]
    print(f"{'✅' if ok else '❌'} {'JPM Detector':20} -> {'READY' if ok else f'UNEXPECTED {rates}'}")
    return ok


def run_diagnostics() -> None:
    """Executes the master diagnostic suite."""
    print("=" * 50)
    print("   JUMPSENSE SYSTEM DIAGNOSTICS")
    print("=" * 50 + "\n")

    os.makedirs(cfg.OUT_DIR, exist_ok=True)
    demo_ok = check_step("Demo Data", cfg.SIM_DATA_FILE)
    detector_ok = check_detector()

    print("\n" + "-" * 30)

    audio_ok = True
    try:
        pygame.mixer.init()
        pygame.mixer.quit()
        print("✅ Audio System        -> READY")
    except pygame.error as e:
        audio_ok = False
        print(f"❌ Audio System        -> ERROR: {e} (metronome will run silently)")

    print("\n" + "=" * 50)

    if demo_ok and detector_ok and audio_ok:
        print("STATUS: ALL SYSTEMS GO!")
        print("   Start now: python main.py replay --age 30")
    else:
        print("ACTION REQUIRED:")
        if not demo_ok:
            print("   -> Run: python scripts/generate_demo.py")
        if not audio_ok:
            print("   -> Use --no-sound or check the audio output device.")


if __name__ == "__main__":
    run_diagnostics()
