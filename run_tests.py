#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Single entry point for CI and local runs of the practice login suites.
#
# Suites:
#   unit  offline framework tests (fake page, mock HTTP transport)
#   ui    browser tests against the routed mock site; the live practice
#         site is added with --run-external
#   api   audit API requests (need a reachable api.base_url, --run-external)
#   all   everything above
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --browser firefox --no-headless
#   python run_tests.py --suite all --tags P0 smoke --parallel 4 --run-external
#
# ================================================================================

import argparse
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List

from loguru import logger

from practice_autotest.common import init_logger


ROOT_DIR = Path(__file__).parent
REPORTS_DIR = ROOT_DIR / "reports"

SUITE_PATHS = {
    "unit": ["practice_autotest/unit"],
    "ui": ["practice_autotest/ui_testing/tests"],
    "api": ["practice_autotest/api_testing/tests"],
    "all": ["practice_autotest"],
}
BROWSER_SUITES = ("ui", "all")


@dataclass
class RunPlan:
    """What to run and how; turned into one pytest invocation."""
    suite: str = "all"
    tags: List[str] = field(default_factory=list)
    parallel: int = 1
    browser: str = "chromium"
    headless: bool = True
    allure: bool = True
    run_external: bool = False
    verbose: bool = False

    @property
    def allure_results(self) -> Path:
        return REPORTS_DIR / "allure-results"

    def pytest_command(self) -> List[str]:
        cmd = [sys.executable, "-m", "pytest", *SUITE_PATHS[self.suite]]
        cmd.append("-v" if self.verbose else "-q")

        if self.tags:
            cmd += ["-m", " or ".join(self.tags)]
        if self.parallel > 1:
            cmd += ["-n", str(self.parallel)]  # pytest-xdist
        if self.allure:
            cmd += ["--alluredir", str(self.allure_results)]
        if self.run_external:
            cmd.append("--run-external")

        if self.suite in BROWSER_SUITES:
            cmd.append(f"--ui-browser={self.browser}")
            if not self.headless:
                cmd.append("--ui-headed")
        return cmd

    def describe(self) -> None:
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite} | Tags: {' '.join(self.tags) or 'all'} | Workers: {self.parallel}")
        logger.info(f"External tests: {'included' if self.run_external else 'skipped'}")
        if self.suite in BROWSER_SUITES:
            logger.info(f"Browser: {self.browser} ({'headless' if self.headless else 'headed'})")
        logger.info("=" * 60)


def generate_allure_report(results_dir: Path) -> None:
    """Render Allure results to reports/allure-report-<ts> and link reports/allure-report to it."""
    report_dir = REPORTS_DIR / f"allure-report-{datetime.now():%Y%m%d_%H%M%S}"
    try:
        subprocess.run(
            ["allure", "generate", str(results_dir), "-o", str(report_dir), "--clean"],
            check=True,
        )
    except FileNotFoundError:
        logger.warning("Allure CLI not installed; skipping HTML report")
        return
    except subprocess.CalledProcessError as e:
        logger.error(f"allure generate failed: {e}")
        return

    latest = REPORTS_DIR / "allure-report"
    if latest.is_symlink():
        latest.unlink()
    elif latest.exists():
        shutil.rmtree(latest)
    latest.symlink_to(report_dir.name)
    logger.info(f"📊 Allure report: {latest}")


def execute(plan: RunPlan) -> int:
    """Run the plan; returns the pytest exit code."""
    plan.describe()
    if plan.allure:
        plan.allure_results.mkdir(parents=True, exist_ok=True)

    cmd = plan.pytest_command()
    logger.info(f"Executing: {' '.join(cmd)}")
    try:
        exit_code = subprocess.run(cmd, cwd=str(ROOT_DIR)).returncode
    except OSError as e:
        logger.error(f"Could not start pytest: {e}")
        exit_code = 1

    if plan.allure:
        generate_allure_report(plan.allure_results)

    if exit_code == 0:
        logger.info("✅ All selected tests passed")
    else:
        logger.error(f"❌ Test run failed (exit code {exit_code})")
    return exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Practice login test runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_tests.py --suite unit\n"
            "  python run_tests.py --suite ui --no-headless --browser firefox\n"
            "  python run_tests.py --suite all --run-external --parallel 4\n"
        ),
    )
    parser.add_argument("--suite", choices=sorted(SUITE_PATHS), default="all",
                        help="Suite to run (default: all)")
    parser.add_argument("--tags", nargs="+", default=[],
                        help="Markers to select, OR-ed (e.g. P0 smoke)")
    parser.add_argument("--parallel", "-n", type=int, default=1,
                        help="pytest-xdist workers (default: 1)")
    parser.add_argument("--browser", choices=["chromium", "firefox", "webkit"], default="chromium",
                        help="Browser for UI tests (default: chromium)")
    parser.add_argument("--no-headless", action="store_true",
                        help="Show the browser window")
    parser.add_argument("--no-allure", action="store_true",
                        help="Do not collect Allure results or build the report")
    parser.add_argument("--run-external", action="store_true",
                        help="Include tests against the live practice site and API")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose pytest output")
    return parser


def plan_from_args(args: argparse.Namespace) -> RunPlan:
    return RunPlan(
        suite=args.suite,
        tags=list(args.tags),
        parallel=args.parallel,
        browser=args.browser,
        headless=not args.no_headless,
        allure=not args.no_allure,
        run_external=args.run_external,
        verbose=args.verbose,
    )


def main():
    args = build_parser().parse_args()
    init_logger()
    sys.exit(execute(plan_from_args(args)))


if __name__ == "__main__":
    main()
