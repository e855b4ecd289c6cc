# backend/app/services/ingest.py

# CSV upload -> validated, INR-converted rows -> one batch insert.
#
# Each parsed record gets its own row task (validate -> convert -> append).
# Tasks run concurrently on the event loop and are joined before anything is
# written. Bad rows are dropped and reported; only stream-level and
# store-level failures abort the whole upload.

import asyncio
import csv
import itertools
import logging
import uuid
from dataclasses import dataclass, field
from io import TextIOWrapper
from typing import Any, Dict, List, Optional, Protocol

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NoFileProvided, NoValidRows, PersistenceFailed, StreamError
from app.db.models import Transaction
from app.services.currency import Conversion
from app.services.validation import Rejected, ValidRow, validate_row

logger = logging.getLogger(__name__)

CONVERSION_FAILED = "conversion_failed"

READ_BATCH_SIZE = 256


class Converter(Protocol):
    async def convert(self, amount: float, currency: str) -> Conversion: ...


@dataclass(frozen=True)
class RowRejection:
    row: int      # 1-based line in the file (header is line 1)
    reason: str


@dataclass
class IngestReport:
    inserted: int = 0
    degraded: int = 0
    rejected: List[RowRejection] = field(default_factory=list)


async def ingest_csv(
    upload: Optional[UploadFile],
    converter: Converter,
    session: AsyncSession,
) -> IngestReport:
    if upload is None or not upload.filename:
        raise NoFileProvided()

    report = IngestReport()
    accumulator: List[Dict[str, Any]] = []

    await _stream_rows(upload, converter, accumulator, report)

    if not accumulator:
        logger.info("upload %s: no valid rows (%d rejected)", upload.filename, len(report.rejected))
        raise NoValidRows()

    report.inserted = await _persist(accumulator, session)
    logger.info(
        "upload %s: inserted=%d rejected=%d degraded=%d",
        upload.filename, report.inserted, len(report.rejected), report.degraded,
    )
    return report


async def _stream_rows(
    upload: UploadFile,
    converter: Converter,
    accumulator: List[Dict[str, Any]],
    report: IngestReport,
) -> None:
    # utf-8-sig strips a BOM on the header; newline="" for correct CSV parsing
    wrapper = TextIOWrapper(upload.file, encoding="utf-8-sig", newline="")
    tasks: List[asyncio.Task] = []
    row_number = 1
    try:
        reader = csv.DictReader(wrapper)
        while True:
            # file reads (possibly from disk once spooled) stay off the event loop
            batch = await run_in_threadpool(_read_batch, reader, READ_BATCH_SIZE)
            if not batch:
                break
            for raw in batch:
                row_number += 1
                tasks.append(asyncio.create_task(
                    _process_row(row_number, _normalize_csv_row(raw), converter, accumulator, report)
                ))
            # let started row tasks make progress while the next batch is read
            await asyncio.sleep(0)
    except (UnicodeDecodeError, csv.Error) as exc:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.error("File processing error in %s: %s", upload.filename, exc)
        raise StreamError(error=str(exc)) from exc
    finally:
        # leave upload.file open; the route closes the UploadFile
        wrapper.detach()

    # Row tasks never raise, so gather is a plain "wait for all" barrier.
    await asyncio.gather(*tasks)


async def _process_row(
    row_number: int,
    raw: Dict[str, Any],
    converter: Converter,
    accumulator: List[Dict[str, Any]],
    report: IngestReport,
) -> None:
    checked = validate_row(raw)
    if isinstance(checked, Rejected):
        logger.warning("row %d rejected: %s (%r)", row_number, checked.reason, checked.value)
        report.rejected.append(RowRejection(row_number, checked.reason))
        return

    try:
        conversion = await converter.convert(checked.amount, checked.currency)
    except Exception:
        logger.exception("row %d: currency conversion error", row_number)
        report.rejected.append(RowRejection(row_number, CONVERSION_FAILED))
        return

    if conversion.degraded:
        report.degraded += 1

    # single-threaded loop: append happens between awaits, no lock needed
    accumulator.append(_to_record(checked, conversion))


def _to_record(row: ValidRow, conversion: Conversion) -> Dict[str, Any]:
    return {
        "date": row.date,
        "description": row.description,
        "amount": row.amount,
        "currency": row.currency,
        "converted_amount": conversion.amount,
    }


async def _persist(records: List[Dict[str, Any]], session: AsyncSession) -> int:
    rows = [Transaction(id=str(uuid.uuid4()), **r) for r in records]
    session.add_all(rows)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        cause = str(getattr(exc, "orig", None) or exc)
        logger.error("Database error while saving %d transactions: %s", len(rows), cause)
        raise PersistenceFailed(error=cause) from exc
    return len(rows)


def _read_batch(reader: csv.DictReader, size: int) -> List[Dict[Any, Any]]:
    return list(itertools.islice(reader, size))


def _normalize_csv_row(row: Dict[Any, Any]) -> Dict[str, Any]:
    """
    Trim header names and values.
    DictReader puts overflow values under key None; those are dropped.
    """
    fixed: Dict[str, Any] = {}
    for k, v in row.items():
        if not isinstance(k, str):
            continue
        fixed[k.strip()] = v.strip() if isinstance(v, str) else v
    return fixed
