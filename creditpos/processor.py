"""
processor.py - Batch Processing
================================
Drives one run: read the workbook, group its values into records, and for
each record build the request, call the endpoint, extract the payload and
persist it.

Outputs:
--------
- Aggregate file (e.g. united_output_file.xml):
      <?xml version='1.0'?><messaggi> + one payload per record + </messaggi>
- One file per record next to it, named after the client code
  (e.g. united_output_file_100.xml), holding just that record's payload.

Failure handling:
-----------------
By default the first error stops the batch: it is logged as
"Error: <message>", nothing more is processed, and the aggregate file is
left without its closing tag. With continue_on_error=True a record whose
request, call, extraction or per-record write fails is logged and skipped
and the batch goes on. Either way run() returns a BatchResult instead of
raising, and the caller decides what to report.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .envelope import build_envelope
from .errors import BatchError, InputReadError, OutputWriteError
from .extractor import extract_body
from .sink import OutputSink


logger = logging.getLogger(__name__)

AGGREGATE_HEADER = "<?xml version='1.0'?><messaggi>"
AGGREGATE_FOOTER = "</messaggi>"

# action, client code, lot code
RECORD_WIDTH = 3


# =============================================================================
# DATA TYPES
# =============================================================================

class BatchState(Enum):
    INIT = "init"
    LOADING = "loading"
    PROCESSING = "processing"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Record:
    """One unit of work: three consecutive workbook values."""

    index: int
    action: str
    client_code: str
    lot_code: str


@dataclass
class BatchPaths:
    input_file: Path
    output_file: Path

    def record_file(self, client_code: str) -> Path:
        """united_output_file.xml + "100" -> united_output_file_100.xml"""
        out = Path(self.output_file)
        try:
            return out.with_name(f"{out.stem}_{client_code}.xml")
        except ValueError as e:
            # e.g. a client code containing a path separator
            raise OutputWriteError(
                f"Client code {client_code!r} cannot be used in a file name: {e}"
            ) from e


@dataclass
class RecordFailure:
    record: Optional[Record]
    error: BatchError


@dataclass
class BatchResult:
    """Outcome of a run. `ok` is True only for a complete run without failures."""

    records_total: int = 0
    processed: int = 0
    failures: List[RecordFailure] = field(default_factory=list)
    completed: bool = False

    @property
    def ok(self) -> bool:
        return self.completed and not self.failures

    @property
    def error(self) -> Optional[BatchError]:
        return self.failures[0].error if self.failures else None


def group_records(values: Sequence[str]) -> List[Record]:
    """
    Split the flat value list into records of three.

    A trailing group of one or two values is not a record; it is dropped
    with a warning.
    """
    full = len(values) - len(values) % RECORD_WIDTH
    if full != len(values):
        logger.warning(
            f"Ignoring {len(values) - full} trailing value(s) that do not "
            f"form a complete record: {list(values[full:])}"
        )

    return [
        Record(i // RECORD_WIDTH, values[i], values[i + 1], values[i + 2])
        for i in range(0, full, RECORD_WIDTH)
    ]


# =============================================================================
# PROCESSOR
# =============================================================================

class CreditPositionProcessor:
    """
    Runs the batch. Every collaborator is passed in:

        reader           : input path -> flat list of cell strings
        transport        : object with send(envelope) -> response text
        sink             : OutputSink (write / append / delete)
        paths            : BatchPaths with input and aggregate output paths
        envelope_factory : (action, client_code, lot_code) -> request envelope
    """

    def __init__(
        self,
        reader: Callable[[Path], Sequence[str]],
        transport,
        sink: OutputSink,
        paths: BatchPaths,
        envelope_factory: Callable[[str, str, str], str] = build_envelope,
        continue_on_error: bool = False,
    ):
        self.reader = reader
        self.transport = transport
        self.sink = sink
        self.paths = paths
        self.envelope_factory = envelope_factory
        self.continue_on_error = continue_on_error
        self.state = BatchState.INIT

    def run(self) -> BatchResult:
        result = BatchResult()
        current: Optional[Record] = None

        try:
            self.state = BatchState.LOADING
            values = self._load()
            records = group_records(values)
            result.records_total = len(records)
            logger.info(f"Loaded {len(values)} values -> {len(records)} records")

            aggregate = self.paths.output_file
            self.sink.delete(aggregate)
            self.sink.write(aggregate, AGGREGATE_HEADER)

            self.state = BatchState.PROCESSING
            start_time = time.time()

            for current in records:
                if current.index > 0 and current.index % 10 == 0:
                    elapsed = time.time() - start_time
                    logger.info(
                        f"Progress: {current.index}/{len(records)} "
                        f"({elapsed:.1f}s elapsed)"
                    )

                try:
                    body = self._fetch_and_store(current)
                except Exception as e:
                    if not self.continue_on_error:
                        raise
                    logger.warning(
                        f"Skipping record {current.index + 1} "
                        f"(client {current.client_code!r})"
                    )
                    self._fail(result, current, self._as_batch_error(e))
                    continue

                self.sink.append(aggregate, body)
                result.processed += 1

            current = None
            self.state = BatchState.FINALIZING
            self.sink.append(aggregate, AGGREGATE_FOOTER)
            result.completed = True
            self.state = BatchState.DONE

        except Exception as e:
            self._fail(result, current, self._as_batch_error(e))
            self.state = BatchState.FAILED

        return result

    def _as_batch_error(self, error: Exception) -> BatchError:
        """Map anything raised during the run onto the BatchError taxonomy."""
        if isinstance(error, BatchError):
            return error
        if isinstance(error, OSError):
            # A sink that lets filesystem errors through
            return OutputWriteError(str(error))
        return BatchError(f"{type(error).__name__}: {error}")

    def _load(self) -> Sequence[str]:
        try:
            return self.reader(self.paths.input_file)
        except OSError as e:
            raise InputReadError(f"Could not read {self.paths.input_file}: {e}") from e

    def _fetch_and_store(self, record: Record) -> str:
        """Request, call, extract and write the per-record file; returns the payload."""
        envelope = self.envelope_factory(record.action, record.client_code, record.lot_code)
        response = self.transport.send(envelope)
        body = extract_body(response)
        self.sink.write(self.paths.record_file(record.client_code), body)
        logger.debug(f"Record {record.index + 1} (client {record.client_code}) stored")
        return body

    def _fail(self, result: BatchResult, record: Optional[Record], error: BatchError):
        logger.error(f"Error: {error.message}")
        result.failures.append(RecordFailure(record, error))
