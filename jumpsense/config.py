"""
Configuration module for the JumpSense system.
Defines central file paths, network endpoints, DSP parameters, and training-zone thresholds.
"""
import os

# --- PATHS ---
BASE_DIR = os.getcwd()
OUT_DIR = os.path.join(BASE_DIR, "outputs")

SIM_DATA_FILE = os.path.join(OUT_DIR, "demo_accel_log.csv")

# --- NETWORK ---
DEFAULT_PHYPHOX_URL = "http://10.9.4.80:8080"
POLL_INTERVAL = 0.03

# --- DSP & SENSORS ---
SAMPLE_RATE_HZ = 50.0
WINDOW_SIZE_SEC = 1.8
STEP_SIZE_MS = 450
RMS_WINDOW = 10
REFRACTORY_SEC = 0.35
MAX_INTERVAL_S = 2.0

# Both values are in use; callers pick one explicitly.
PHONE_THRESHOLD = 15.0
BENCH_THRESHOLD = 18.0

GRAVITY = 9.81

# --- HEART RATE ZONE ---
MIN_AGE = 10
MAX_AGE = 90
HR_MAX_FLOOR = 80
HR_MAX_CEIL = 220
ZONE_LOW_PCT = 0.55
ZONE_HIGH_PCT = 0.65

# --- METRONOME ---
WARMUP_BPM = 100
WARMUP_S = 30.0
BELOW_ZONE_BPM = 135
IN_ZONE_BPM = 120
ABOVE_ZONE_BPM = 100

CLICK_FREQ_HZ = 1000.0
CLICK_MS = 30
MIXER_FREQ = 44100
