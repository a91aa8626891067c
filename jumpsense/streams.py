"""
Data Acquisition Module.
Manages network-based live accelerometer ingestion (Phyphox) and offline replay
of recorded accelerometer logs.
"""
import os
from typing import Iterator, List, Tuple

import pandas as pd
import requests

AccelRecord = Tuple[int, float, float, float]

REPLAY_COLUMNS = ["timestamp", "ax", "ay", "az"]


class PhyphoxStream:
    """
    REST client for incremental accelerometer buffers from the Phyphox app.
    Phyphox reports time in seconds; records are returned in milliseconds.
    """

    def __init__(self, base_url: str, timeout: float = 0.5):
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.last_t = -1e9
        self.error_count = 0
        print(f"📡 Connecting to sensor: {self.base_url}")

    def fetch_data(self) -> List[AccelRecord]:
        """Polls the Phyphox endpoint for records newer than the last one seen."""
        pipe = "%7C"
        url = (f"{self.base_url}/get?acc_time={self.last_t}"
               f"&accX={self.last_t}{pipe}acc_time"
               f"&accY={self.last_t}{pipe}acc_time"
               f"&accZ={self.last_t}{pipe}acc_time")
        try:
            r = requests.get(url, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError):
            self.error_count += 1
            if self.error_count % 30 == 0:
                print(f"⚠️ No data from {self.base_url} (Is Phyphox running?)")
            return []

        return self._parse(data.get("buffer", {}))

    def _parse(self, buffer: dict) -> List[AccelRecord]:
        def get_array(key: str) -> list:
            obj = buffer.get(key)
            if isinstance(obj, dict) and "buffer" in obj:
                return obj["buffer"]
            return obj if isinstance(obj, list) else []

        ts = get_array("acc_time")
        xs = get_array("accX")
        ys = get_array("accY")
        zs = get_array("accZ")

        out = []
        for i in range(min(len(ts), len(xs), len(ys), len(zs))):
            if ts[i] is None or xs[i] is None or ys[i] is None or zs[i] is None:
                continue
            self.last_t = float(ts[i])
            out.append((int(round(self.last_t * 1000.0)), float(xs[i]), float(ys[i]), float(zs[i])))
        if out:
            self.error_count = 0
        return out


class ReplayStream:
    """
    Offline source reading a recorded accelerometer log (timestamp,ax,ay,az).
    Timestamps are device-clock milliseconds.
    """

    def __init__(self, csv_path: str):
        if not os.path.exists(csv_path):
            raise FileNotFoundError(f"Replay file missing: {csv_path}")

        df = pd.read_csv(csv_path)
        missing = [c for c in REPLAY_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Replay file {csv_path} lacks columns: {missing}")

        df = df[REPLAY_COLUMNS].apply(pd.to_numeric, errors="coerce").dropna()
        self.df = df.reset_index(drop=True)
        self.n = len(self.df)
        print(f"📼 Replay loaded: {self.n} rows from {csv_path}")

    def __len__(self) -> int:
        return self.n

    def __iter__(self) -> Iterator[AccelRecord]:
        for row in self.df.itertuples(index=False):
            yield int(row.timestamp), float(row.ax), float(row.ay), float(row.az)
