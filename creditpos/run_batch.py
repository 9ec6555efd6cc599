"""
run_batch.py - Main Application Entry Point
============================================
This is the main script that runs one credit-position batch.

What it does:
-------------
1. Loads configuration from environment variables (.env file)
2. Reads the input workbook and groups its values into records
3. For each record, posts a retrieveCreditPosition request to the SOAP endpoint
4. Writes each response payload to its own file and to the aggregate file
5. Logs errors to a timestamped logError_*.log file

Usage:
------
    python -m creditpos.run_batch
    python -m creditpos.run_batch input.xlsx --output positions.xml
    python -m creditpos.run_batch input.xlsx --continue-on-error
    python -m creditpos.run_batch input.xlsx --dry-run

Command Line Options:
---------------------
    input_file          : Input workbook (default: CREDITPOS_INPUT_FILE or input.xlsx)
    --output            : Aggregate XML file (default: CREDITPOS_OUTPUT_FILE)
    --continue-on-error : Skip failed records instead of stopping the batch
    --dry-run           : Load and group the input without calling the endpoint
    --debug             : Enable debug logging

Exit Status:
------------
    0   : every record was processed and the aggregate file is complete
    1   : configuration/input problem, or at least one record failed
    130 : interrupted by the user
"""

import sys
import logging
import time
import argparse
from datetime import datetime
from functools import partial
from pathlib import Path

from .config import load_settings
from .envelope import build_envelope
from .error_log import attach_error_log, detach_error_log, error_log_path
from .errors import BatchError
from .http_client import SoapClient
from .loader import load_cell_values
from .processor import BatchPaths, CreditPositionProcessor, group_records
from .sink import OutputSink


# =============================================================================
# LOGGING SETUP
# =============================================================================

LOG_LEVEL = logging.INFO

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else LOG_LEVEL,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )


# =============================================================================
# COMMAND LINE ARGUMENT PARSING
# =============================================================================

def parse_arguments(argv=None):
    """
    Parse command-line arguments.

    Returns:
        Namespace with input_file, output, continue_on_error, dry_run, debug
    """
    parser = argparse.ArgumentParser(
        description='Retrieve credit positions for the records of a workbook',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m creditpos.run_batch
  python -m creditpos.run_batch input.xlsx --output positions.xml
  python -m creditpos.run_batch input.xlsx --dry-run
        """
    )

    parser.add_argument(
        'input_file',
        nargs='?',
        default=None,
        help='Input workbook (.xlsx); defaults to CREDITPOS_INPUT_FILE or input.xlsx'
    )

    parser.add_argument(
        '--output',
        default=None,
        help='Aggregate XML output file; defaults to CREDITPOS_OUTPUT_FILE'
    )

    parser.add_argument(
        '--continue-on-error',
        action='store_true',
        help='Log and skip a failing record instead of stopping the batch'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Load and group the input without calling the endpoint'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


# =============================================================================
# MAIN EXECUTION FUNCTION
# =============================================================================

def run_batch(argv=None) -> int:
    """
    Run one batch and return the process exit status.
    """
    args = parse_arguments(argv)
    configure_logging(args.debug)

    # The log file name is fixed once, from the time the run started
    started_at = datetime.now()
    client = None
    handler = None

    try:
        settings = load_settings()
        input_file = Path(args.input_file or settings.input_file)
        output_file = Path(args.output or settings.output_file)
        continue_on_error = args.continue_on_error or settings.continue_on_error

        logger.info(f"Endpoint: {settings.endpoint_url}")
        logger.info(f"Input: {input_file}  Output: {output_file}")

        reader = partial(load_cell_values, cell_range=settings.cell_range)

        if args.dry_run:
            logger.info("DRY RUN MODE - No requests will be sent")
            records = group_records(reader(input_file))
            logger.info(f"{len(records)} record(s) would be processed")
            if records:
                logger.info(f"First record: {records[0]}")
            return 0

        log_path = error_log_path(settings.log_dir, started_at)
        handler = attach_error_log(log_path)

        client = SoapClient(settings)
        processor = CreditPositionProcessor(
            reader=reader,
            transport=client,
            sink=OutputSink(),
            paths=BatchPaths(input_file=input_file, output_file=output_file),
            envelope_factory=partial(
                build_envelope,
                adr_code=settings.adr_code,
                escape_values=settings.escape_values,
            ),
            continue_on_error=continue_on_error,
        )

        start_time = time.time()
        result = processor.run()
        elapsed = time.time() - start_time

        logger.info("-" * 50)
        logger.info(f"Finished in {elapsed:.1f} seconds ({processor.state.value})")
        logger.info(f"Records: {result.records_total}")
        logger.info(f"Processed: {result.processed}")
        logger.info(f"Failed: {len(result.failures)}")
        logger.info("-" * 50)

        if not result.ok:
            logger.warning(f"Batch did not complete cleanly; see {log_path}")
            return 1
        logger.info(f"Results written to {output_file.resolve()}")
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Output files may be incomplete.")
        return 130

    except (RuntimeError, BatchError) as e:
        # Configuration errors, or input errors in dry-run mode
        logger.error(f"Fatal error: {e}")
        return 1

    finally:
        if client:
            client.close()
        if handler:
            detach_error_log(handler)


# =============================================================================
# SCRIPT ENTRY POINT
# =============================================================================

def main():
    sys.exit(run_batch())


if __name__ == '__main__':
    main()
