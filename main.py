"""
Main Orchestrator for JumpSense.
Feeds accelerometer samples (live Phyphox or recorded log) through the JPM
detector and keeps the metronome aligned with the heart-rate zone.
"""
import argparse
import sys
import time
from typing import Optional

from jumpsense import config as cfg
from jumpsense.jpm import DetectorConfig
from jumpsense.metronome import Metronome
from jumpsense.session import JumpSession
from jumpsense.streams import PhyphoxStream, ReplayStream


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Real-time jump-rope cadence and metronome pacing.")
    sub = parser.add_subparsers(dest="mode", required=True)

    p_replay = sub.add_parser("replay", help="Replay a recorded timestamp,ax,ay,az log")
    p_replay.add_argument("csv", nargs="?", default=cfg.SIM_DATA_FILE)
    p_replay.add_argument("--speed", type=float, default=1.0,
                          help="Playback speed; 0 replays as fast as possible")

    p_live = sub.add_parser("live", help="Poll a Phyphox accelerometer stream")
    p_live.add_argument("url", nargs="?", default=cfg.DEFAULT_PHYPHOX_URL)

    for p in (p_replay, p_live):
        p.add_argument("--age", type=int, required=True)
        p.add_argument("--hr", type=int, default=None, help="Fixed heart rate to drive the tempo policy")
        p.add_argument("--threshold", type=float, default=cfg.PHONE_THRESHOLD)
        p.add_argument("--rate", type=float, default=cfg.SAMPLE_RATE_HZ)
        p.add_argument("--window", type=float, default=cfg.WINDOW_SIZE_SEC)
        p.add_argument("--step", type=int, default=cfg.STEP_SIZE_MS)
        p.add_argument("--warmup", type=float, default=cfg.WARMUP_S)
        p.add_argument("--no-sound", action="store_true")
    return parser


def print_status(session: JumpSession) -> None:
    sys.stdout.write(f"\r[STATUS] {session.mode:6s} | {session.status_line():28s}")
    sys.stdout.flush()


def run_replay(session: JumpSession, stream: ReplayStream, speed: float, hr: Optional[int]) -> None:
    wall0 = time.monotonic()
    t0: Optional[int] = None
    for ts, x, y, z in stream:
        if t0 is None:
            t0 = ts
        if speed > 0:
            due = wall0 + (ts - t0) / 1000.0 / speed
            time.sleep(max(0.0, due - time.monotonic()))
        session.on_accel(ts, x, y, z)
        if hr is not None:
            session.on_heart_rate(hr)


def run_live(session: JumpSession, stream: PhyphoxStream, hr: Optional[int]) -> None:
    while True:
        loop_t0 = time.time()
        for ts, x, y, z in stream.fetch_data():
            session.on_accel(ts, x, y, z)
        if hr is not None:
            session.on_heart_rate(hr)
        session.tick()
        time.sleep(max(0.0, cfg.POLL_INTERVAL - (time.time() - loop_t0)))


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    print("\n=== JUMPSENSE (cadence + heart-rate pacing) ===")

    detector_cfg = DetectorConfig(
        threshold=args.threshold,
        sample_rate_hz=args.rate,
        window_size_sec=args.window,
        step_size_ms=args.step,
    )
    metronome = Metronome(click=(lambda: None) if args.no_sound else None)
    session = JumpSession(metronome, detector_cfg, on_update=print_status, warmup_s=args.warmup)
    session.set_age(args.age)

    if args.mode == "replay":
        print(f"🎬 MODE: REPLAY ({args.csv})")
        stream = ReplayStream(args.csv)
    else:
        print(f"📡 MODE: LIVE SENSOR ({args.url})")
        stream = PhyphoxStream(args.url)

    session.start()
    try:
        if args.mode == "replay":
            run_replay(session, stream, args.speed, args.hr)
        else:
            run_live(session, stream, args.hr)
    except KeyboardInterrupt:
        print("\n[Exit] Shutdown.")
    finally:
        session.stop()
        metronome.release()


if __name__ == "__main__":
    main()
