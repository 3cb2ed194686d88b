"""
One-off sync run from the command line.

Usage:
    python -m adsync run                       # all eligible projects, paced
    python -m adsync run --project-id 3 -p 7   # only projects 3 and 7
    python -m adsync run --no-delay            # skip pacing (small accounts only)

Prints the run report as JSON. Exit code 1 if the run was aborted.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

logger = logging.getLogger(__name__)


async def _run_once(project_ids: Optional[List[int]], paced: bool) -> dict:
    from adsync.config import get_settings
    from adsync.db.engine import get_engine
    from adsync.sync.orchestrator import build_orchestrator

    orchestrator = build_orchestrator(get_engine(), get_settings(), paced=paced)
    report = await orchestrator.run(project_ids)
    return report.to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m adsync run",
        description="Run one Meta Ads sync pass",
    )
    parser.add_argument(
        "--project-id",
        "-p",
        dest="project_ids",
        type=int,
        action="append",
        help="Restrict the run to this project id (repeatable)",
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Disable the inter-window and inter-project delays",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    report = asyncio.run(_run_once(args.project_ids, paced=not args.no_delay))
    print(json.dumps(report, indent=2, default=str))
    return 0 if report.get("success") else 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    sys.exit(main())
