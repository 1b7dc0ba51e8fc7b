"""
Command-line entry point: run scenarios from the test-data CSV.
"""
import argparse
import os
import sys

from .config import config
from .core import run_scenarios
from .reporting import RunReport
from .testdata import read_scenarios
from .utils import init_logger, now_iso, run_timestamp


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="HamroBazaar search/filter/sort UI suite with CSV export")
    ap.add_argument("--testdata", type=str, default=config.TESTDATA_CSV, help="Scenario CSV file")
    ap.add_argument("--rows", type=int, nargs="*", default=None,
                    help="Row indexes to run (default: every row)")
    ap.add_argument("--target", type=int, default=config.TARGET_COUNT, help="Products to collect per scenario")
    ap.add_argument("--max-rounds", type=int, default=config.MAX_ROUNDS, help="Maximum scrolls per collection")
    ap.add_argument("--no-progress-limit", type=int, default=config.NO_PROGRESS_LIMIT,
                    help="Stop after this many scrolls without new products")
    ap.add_argument("--headless", action="store_true", default=config.HEADLESS, help="Run without UI")
    ap.add_argument("--workers", type=int, default=1,
                    help="Scenarios to run in parallel, each in its own browser")
    ap.add_argument("--base-url", type=str, default=config.BASE_URL, help="Site under test")
    ap.add_argument("--out-dir", type=str, default=config.OUTPUT_DIR, help="Directory for CSV and report output")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Global log level for both console and file (overrides --log-console/--log-file).")
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", config.LOG_LEVEL),
                    help="Console log level (default from env LOG_CONSOLE or LOG_LEVEL).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE", "DEBUG"),
                    help="File log level (default from env LOG_FILE or DEBUG).")
    ap.add_argument("--log-file-path", default=os.getenv("LOG_FILE_PATH", "bazaar_suite.log"),
                    help="Path to log file (default from env LOG_FILE_PATH or bazaar_suite.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    logger = init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(
        f"Logger initialized: console={eff_console}, "
        f"file={'DISABLED' if args.no_file_log else eff_file}, "
        f"path={'N/A' if args.no_file_log else args.log_file_path}"
    )
    config.validate()
    logger.info(f">>> Run started at {now_iso()}")

    try:
        scenarios = read_scenarios(args.testdata)
    except ValueError as e:
        logger.error(f"Invalid test data: {e}")
        return 2
    indexes = args.rows if args.rows is not None else range(len(scenarios))
    selected = []
    for i in indexes:
        if not 0 <= i < len(scenarios):
            logger.error(f"Invalid row index: {i}. Available rows: {len(scenarios)}")
            return 2
        selected.append((f"row{i}_{scenarios[i].keyword.replace(' ', '_')}", scenarios[i]))

    report = RunReport()
    outcomes = run_scenarios(
        selected, report,
        workers=args.workers,
        headless=args.headless,
        target_count=args.target,
        max_rounds=args.max_rounds,
        no_progress_limit=args.no_progress_limit,
        output_dir=args.out_dir,
        base_url=args.base_url,
    )
    report.save_json(os.path.join(args.out_dir, f"report_{run_timestamp()}.json"))

    for o in outcomes:
        status = "PASSED" if o.passed else "FAILED"
        detail = o.error or (o.verification.summary() if o.verification else "no verification")
        logger.info(f">>> {o.name}: {status} - {o.record_count} products - {detail}")

    failed = [o.name for o in outcomes if not o.passed]
    if failed:
        logger.error(f">>> {len(failed)} of {len(outcomes)} scenarios failed: {', '.join(failed)}")
        return 1
    logger.info(f">>> All {len(outcomes)} scenarios passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
