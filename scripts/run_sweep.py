import argparse
import csv
import multiprocessing as mp
import os
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import numpy as np
import yaml

from lockedbox.algebra import is_reachable
from lockedbox.box import SecureBox
from lockedbox.config import SolverConfig
from lockedbox.evaluation.metrics import opened, presses_used, success_rate
from lockedbox.solver import apply_presses, check_dimensions, plan_presses

# Limit threads per worker
os.environ["OMP_NUM_THREADS"] = "1"
os.environ["OPENBLAS_NUM_THREADS"] = "1"
os.environ["MKL_NUM_THREADS"] = "1"

ROOT = Path(__file__).resolve().parents[1]

FIELDNAMES = [
    "y_size",
    "x_size",
    "seed",
    "board_id",
    "toggles",
    "initial_locked",
    "reachable",
    "presses_used",
    "opened",
    "time_ms",
]


def _task_seed(base_seed: int, *coords: int) -> int:
    """Generate deterministic seed for each task."""
    ss = np.random.SeedSequence([int(base_seed)] + [int(c) for c in coords])

    return int(
        ss.generate_state(1, dtype=np.uint64)[0] & np.uint64((1 << 63) - 1)
    )


def make_jobs(sizes, n_samples, batch_size, base_seed, max_toggles, solver):
    """Create one job per (size, board range)."""
    for y_size, x_size in sizes:
        for lo in range(0, n_samples, batch_size):
            yield {
                "y_size": int(y_size),
                "x_size": int(x_size),
                "idx_lo": lo,
                "idx_hi": min(lo + batch_size, n_samples),
                "base_seed": base_seed,
                "max_toggles": max_toggles,
                "solver": solver,
            }


def _run_batch(job):
    """Scramble and open one batch of boxes."""
    y_size, x_size = job["y_size"], job["x_size"]
    config = SolverConfig.from_dict(job["solver"])
    rows = []
    for board_id in range(job["idx_lo"], job["idx_hi"]):
        rng = np.random.default_rng(
            _task_seed(job["base_seed"], y_size, x_size, board_id)
        )
        box = SecureBox(y_size, x_size)
        toggles = box.shuffle(rng, max_toggles=job["max_toggles"])
        initial_locked = box.count_locked()
        reachable = is_reachable(y_size, x_size, box.get_state())

        start_time = time.perf_counter()
        press = plan_presses(y_size, x_size, box.get_state(), config)
        still_locked = apply_presses(box, press)
        time_ms = (time.perf_counter() - start_time) * 1000

        rows.append(
            {
                "y_size": y_size,
                "x_size": x_size,
                "seed": job["base_seed"],
                "board_id": board_id,
                "toggles": toggles,
                "initial_locked": initial_locked,
                "reachable": int(reachable),
                "presses_used": presses_used(press),
                "opened": opened(still_locked),
                "time_ms": time_ms,
            }
        )
    return rows


def run_pool(jobs, writer, workers, total_jobs):
    """Run jobs in parallel and write results as they complete."""
    ctx = mp.get_context("spawn")
    done = 0
    all_rows = []
    start_time = time.time()

    with ProcessPoolExecutor(max_workers=workers, mp_context=ctx) as ex:
        futures = [ex.submit(_run_batch, j) for j in jobs]
        for fut in as_completed(futures):
            rows = fut.result()
            writer.writerows(rows)
            all_rows.extend(rows)
            done += 1

            elapsed = time.time() - start_time
            print(
                f"\r[progress] {done}/{total_jobs} batches ({done / total_jobs:>6.1%}) | "
                f"{len(all_rows):>7,} boxes | "
                f"elapsed: {int(elapsed // 60)}m {int(elapsed % 60)}s",
                end="",
                flush=True,
            )
    print()
    return all_rows


def main():
    n_cpus = os.cpu_count() or 1
    default_workers = max(n_cpus - 1, 1)

    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--config",
        default=str(ROOT / "experiments" / "configs" / "sweep.yaml"),
    )
    ap.add_argument("--out", default=None, help="Output CSV path")
    ap.add_argument(
        "--workers", type=int, default=default_workers, help="Number of workers"
    )
    ap.add_argument(
        "--batch-size", type=int, default=50, help="Boxes per batch"
    )
    args = ap.parse_args()

    with open(args.config, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    cfg = raw["experiment"]
    solver = dict(raw.get("solver") or {})
    solver_config = SolverConfig.from_dict(solver)

    sizes = [tuple(s) for s in cfg["sizes"]]
    for y_size, x_size in sizes:
        check_dimensions(y_size, x_size, solver_config.max_cells)
    n_samples = int(cfg["initial_states"]["n_samples"])
    base_seed = int(cfg["initial_states"].get("seed", 0))
    max_toggles = int(cfg["initial_states"].get("max_toggles", 1000))
    out_dir = Path(cfg.get("output_dir", "results/runs"))
    out_dir.mkdir(parents=True, exist_ok=True)
    out_csv = args.out or str(out_dir / "sweep.csv")

    jobs = list(
        make_jobs(sizes, n_samples, args.batch_size, base_seed, max_toggles, solver)
    )
    print(
        f"\nStarting {len(jobs):,} batches ({len(sizes)} sizes x {n_samples:,} boxes) "
        f"with {args.workers} workers...\n"
    )

    start_time = time.time()
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        rows = run_pool(jobs, writer, workers=args.workers, total_jobs=len(jobs))

    elapsed = time.time() - start_time
    print(f"\nDone in {int(elapsed/60)}m {int(elapsed%60)}s")
    print(f"Opened: {success_rate(rows):.1%}")
    print(f"Output: {out_csv}\n")


if __name__ == "__main__":
    mp.freeze_support()
    main()
