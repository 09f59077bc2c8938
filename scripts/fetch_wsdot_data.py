#!/usr/bin/env python3
"""
wsdot - Snapshot fetch script

Fetches the selected WSDOT endpoints once and writes each result to
<out-dir>/<source>.json, plus a run_report.json describing every source.

    WSDOT_API_KEY=... python3 scripts/fetch_wsdot_data.py --sources cameras,vessels
    WSDOT_API_KEY=... python3 scripts/fetch_wsdot_data.py --sources today --route-id 9
"""

from __future__ import annotations
import argparse
import dataclasses
import datetime as dt
import json
import logging
import os
import sys
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# Make "src/" importable when running as: python3 scripts/fetch_wsdot_data.py
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from wsdot import (  # noqa: E402
    CamerasClient,
    FerriesClient,
    InvalidConfigurationError,
    WSDOTClient,
)

ALL_SOURCES = ["cameras", "vessels", "locations", "schedules", "today"]

# -----------------------------
# Utilities
# -----------------------------


def utc_now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")


def atomic_write_json(dest: Path, obj: Any) -> None:
    """
    Atomic file write: write to temp file in same directory then os.replace.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    data = (json.dumps(obj, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
    with tempfile.NamedTemporaryFile(dir=str(dest.parent), delete=False) as tf:
        tmp_path = Path(tf.name)
        tf.write(data)
        tf.flush()
        os.fsync(tf.fileno())
    os.replace(str(tmp_path), str(dest))


def setup_logging(log_level: str, log_file: Optional[Path]) -> logging.Logger:
    level = getattr(logging, log_level.upper(), logging.INFO)
    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Attach to the package logger too so client warnings (bad timestamps) show up.
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for name in ("fetch_wsdot_data", "wsdot"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.handlers.clear()
        for h in handlers:
            h.setFormatter(fmt)
            h.setLevel(level)
            lg.addHandler(h)

    return logging.getLogger("fetch_wsdot_data")


@dataclasses.dataclass
class SourceResult:
    name: str
    ok: bool
    started_at: str
    finished_at: str
    duration_s: float
    records: int = 0
    output_file: Optional[str] = None
    error: Optional[str] = None


# -----------------------------
# Source runners
# -----------------------------


def dump_records(records: List[Any]) -> List[Dict[str, Any]]:
    return [r.model_dump(mode="json", by_alias=True) for r in records]


def fetch_source(
    name: str,
    wsdot_client: WSDOTClient,
    route_id: Optional[int] = None,
    only_remaining: bool = False,
) -> List[Dict[str, Any]]:
    """Run one endpoint and return its records as JSON-ready dicts."""
    if name == "cameras":
        return dump_records(CamerasClient(wsdot_client).get_cameras())

    ferries = FerriesClient(wsdot_client)
    if name == "vessels":
        return dump_records(ferries.get_vessel_basics())
    if name == "locations":
        return dump_records(ferries.get_vessel_locations())
    if name == "schedules":
        return dump_records(ferries.get_route_schedules())
    if name == "today":
        if route_id is None:
            raise ValueError("--route-id is required for the 'today' source")
        return dump_records(
            [ferries.get_schedule_today_by_route(route_id, only_remaining)]
        )

    raise ValueError(f"Unknown source: {name}. Valid: {ALL_SOURCES}")


def write_source(
    name: str, records: List[Dict[str, Any]], out_dir: Path
) -> Tuple[int, Path]:
    out_path = out_dir / f"{name}.json"
    atomic_write_json(
        out_path, {"source": name, "fetched_at": utc_now_iso(), "records": records}
    )
    return len(records), out_path


# -----------------------------
# Orchestrator
# -----------------------------


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch WSDOT traveler API snapshots")
    p.add_argument(
        "--sources",
        default="all",
        help="Comma-separated list of sources: all, " + ", ".join(ALL_SOURCES),
    )
    p.add_argument(
        "--route-id",
        type=int,
        default=None,
        help="Route id for the 'today' source (see the 'schedules' output).",
    )
    p.add_argument(
        "--only-remaining",
        action="store_true",
        help="For 'today': only sailings that have not departed yet.",
    )
    p.add_argument(
        "--out-dir",
        default="data/wsdot",
        help="Directory the JSON snapshots are written to.",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    p.add_argument(
        "--log-file",
        default="",
        help="Optional log file path (e.g., logs/fetch_wsdot_data.log).",
    )
    p.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop immediately on first source failure (default: continue and report failures).",
    )
    return p.parse_args()


def resolve_sources(arg: str, route_id: Optional[int]) -> List[str]:
    s = [x.strip().lower() for x in arg.split(",") if x.strip()]
    if s == ["all"]:
        # 'today' needs a route; only include it when one was given.
        return [x for x in ALL_SOURCES if x != "today" or route_id is not None]
    return s


def main() -> int:
    args = parse_args()
    sources = resolve_sources(args.sources, args.route_id)

    log_file = Path(args.log_file) if args.log_file.strip() else None
    logger = setup_logging(args.log_level, log_file)

    out_dir = Path(args.out_dir).resolve()
    started_at = utc_now_iso()

    logger.info("Selected sources: %s", sources)
    logger.info("Output dir: %s", out_dir)

    try:
        wsdot_client = WSDOTClient()
    except InvalidConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 2

    results: List[SourceResult] = []
    all_ok = True

    with wsdot_client:
        for name in sources:
            t0 = time.time()
            s0 = utc_now_iso()
            logger.info("==== START source=%s ====", name)
            try:
                records = fetch_source(
                    name,
                    wsdot_client,
                    route_id=args.route_id,
                    only_remaining=args.only_remaining,
                )
                n, out_path = write_source(name, records, out_dir)
                ok, err, out_file = True, None, out_path.name
            except Exception as e:
                n, ok, out_file = 0, False, None
                err = f"{type(e).__name__}: {e}"
                logger.error("Source failed: %s | %s", name, err)
                logger.debug("Exception details", exc_info=True)
            t1 = time.time()
            results.append(
                SourceResult(
                    name=name,
                    ok=ok,
                    started_at=s0,
                    finished_at=utc_now_iso(),
                    duration_s=round(t1 - t0, 3),
                    records=n,
                    output_file=out_file,
                    error=err,
                )
            )
            logger.info(
                "==== END source=%s ok=%s records=%d duration=%.3fs ====",
                name,
                ok,
                n,
                (t1 - t0),
            )
            all_ok = all_ok and ok
            if args.fail_fast and not ok:
                break

    report = {
        "started_at": started_at,
        "finished_at": utc_now_iso(),
        "ok": all_ok,
        "sources": [dataclasses.asdict(r) for r in results],
    }
    atomic_write_json(out_dir / "run_report.json", report)
    logger.info("Wrote run report: %s", out_dir / "run_report.json")

    if not all_ok:
        logger.error("One or more sources failed.")
        return 2 if args.fail_fast else 1

    logger.info("Done. All sources succeeded.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
