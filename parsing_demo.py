"""
Example: drive an ASC parse the way a poll-driven host would.

The first pass submits the file to a background thread, later passes poll
until the grid is ready. With --sync the submit step is skipped and the
cache falls back to parsing on the calling thread.

Usage:
    python3 parsing_demo.py --path /path/to/dem.asc
"""

import argparse
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from asc_grid.parsing import AscParsingEngine, AsyncComputeCache, ParseError


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--path", required=True, type=Path, help="Path to input .asc file")
    parser.add_argument("--workers", default=2, type=int, help="Background worker threads")
    parser.add_argument("--poll-interval", default=0.05, type=float, help="Seconds between polls")
    parser.add_argument("--encoding", default="utf-8", help="Text encoding of the grid file")
    parser.add_argument("--sync", action="store_true", help="Skip the background submit")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    args = parser.parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger("parsing_demo")

    engine = AscParsingEngine(encoding=args.encoding)
    with ThreadPoolExecutor(max_workers=args.workers, thread_name_prefix="grid-parse") as pool:
        cache = AsyncComputeCache(pool, compute=engine.parse)
        if not args.sync:
            request_id = cache.submit(args.path)
            logger.info("Submitted %s as request %s", args.path, request_id)

        passes = 0
        try:
            while True:
                passes += 1
                grid = cache.resolve(args.path)
                if grid is not None:
                    break
                time.sleep(args.poll_interval)
        except ParseError as exc:
            logger.error("Parse failed (%s): %s", exc.kind, exc)
            raise SystemExit(1)

    print(f"Resolved after {passes} pass(es)")
    print(f"columns={grid.columns} rows={grid.rows} cell_size={grid.cell_size} no_data={grid.no_data}")
    print(f"lower_left_corner={grid.lower_left_corner} lower_left_center={grid.lower_left_center}")
    print(f"values={len(grid.values)}")


if __name__ == "__main__":
    main()
