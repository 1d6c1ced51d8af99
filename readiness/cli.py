#!/usr/bin/env python
# ============================================================================
# READINESS VALIDATION CLI
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# PURPOSE: Gate a deployment on the readiness verdict
# USAGE:
#   validate-readiness                           # Text report, exit 0/1
#   validate-readiness --json                    # JSON verdict on stdout
#   validate-readiness --artifact-dir reports    # Also write audit JSON
# ============================================================================

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from core.config import Defaults
from core.logging import configure_logging
from health.aggregator import HealthAggregator
from health.registry import build_default_registry
from readiness.classifier import ReadinessService
from readiness.report import exit_code, render_text, write_artifact

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate-readiness",
        description="Score deployment readiness and exit non-zero when not deployable",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0   ready or ready-with-warnings
  1   not-ready

Environment Variables:
  APP_ENV                 Deployment environment (production expected)
  DATABASE_URL            PostgreSQL connection string
  SECRET_KEY              Application secret (>= 32 characters)
  READINESS_WEIGHT_<CAT>  Override a category weight
        """,
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the verdict as JSON instead of the text report",
    )
    parser.add_argument(
        "--artifact-dir",
        type=str,
        help="Write deployment-validation-<timestamp>.json into this directory",
    )
    parser.add_argument(
        "--project-root",
        type=str,
        default=".",
        help="Directory holding pyproject.toml, dist/ and Dockerfile (default: .)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Log level for diagnostics on stderr (default: WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, stream=sys.stderr)

    defaults = Defaults.from_env()
    aggregator = HealthAggregator(
        build_default_registry(defaults),
        environment=defaults.service.environment,
        version=defaults.service.version,
        started_at=time.monotonic(),
        overall_timeout=defaults.timeouts.overall_timeout,
    )
    service = ReadinessService(
        aggregator,
        settings=defaults.readiness,
        project_root=Path(args.project_root),
    )

    verdict = asyncio.run(service.evaluate())

    if args.json:
        print(json.dumps(verdict.to_dict(), indent=2, default=str))
    else:
        print(render_text(verdict))

    if args.artifact_dir:
        path = write_artifact(verdict, args.artifact_dir)
        if not args.json:
            print(f"\nReport saved: {path}")

    return exit_code(verdict)


if __name__ == "__main__":
    sys.exit(main())
