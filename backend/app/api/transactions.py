# backend/app/api/transactions.py

from fastapi import APIRouter, Depends, UploadFile, File, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from app.core.errors import (
    InvalidTransactionId, NotFoundError, PersistenceFailed, ValidationError,
)
from app.db.deps import get_session
from app.db.models import Transaction
from app.schemas.transactions import (
    TransactionCreate, TransactionUpdate, TransactionOut, TransactionListOut, UploadResult,
)
from app.services.currency import RateClient, get_rate_client
from app.services.ingest import ingest_csv
from app.services.query import TransactionFilters, query_transactions
from app.services.validation import (
    INVALID_AMOUNT, INVALID_DATE, MISSING_CURRENCY,
    Rejected, parse_amount, parse_body_date, parse_currency, validate_row,
)

import logging
import uuid
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

REJECTION_MESSAGES = {
    INVALID_DATE: "Invalid date format",
    INVALID_AMOUNT: "Invalid amount",
    MISSING_CURRENCY: "Currency is required",
}

# -----------------------------
# UPLOAD CSV
# -----------------------------
@router.post("/upload", response_model=UploadResult, status_code=201)
async def upload_csv(
    file: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(get_session),
    rates: RateClient = Depends(get_rate_client),
):
    """
    Bulk import. Expected header: Date, Description, Amount, Currency (Date as DD-MM-YYYY).
    Bad rows are skipped and listed in `rejected`; the good ones are saved in one batch.
    """
    try:
        report = await ingest_csv(file, rates, session)
    finally:
        if file is not None:
            await file.close()

    return UploadResult(
        message="File processed and transactions saved",
        inserted=report.inserted,
        degraded=report.degraded,
        rejected=[{"row": r.row, "reason": r.reason} for r in report.rejected],
    )

# -----------------------------
# LIST (accept /transactions and /transactions/)
# -----------------------------
@router.get("", response_model=TransactionListOut)
@router.get("/", response_model=TransactionListOut)
async def list_transactions(
    startDate: Optional[date] = None,
    endDate: Optional[date] = None,
    minAmount: Optional[float] = None,
    maxAmount: Optional[float] = None,
    description: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    session: AsyncSession = Depends(get_session),
):
    filters = TransactionFilters(
        date_from=startDate,
        date_to=endDate,
        amount_min=minAmount,
        amount_max=maxAmount,
        description_contains=description,
    )
    result = await query_transactions(session, filters, page=page, page_size=limit)
    return {"total": result.total, "transactions": result.items}

# -----------------------------
# CREATE (accept /transactions and /transactions/)
# -----------------------------
@router.post("", response_model=TransactionOut, status_code=201)
@router.post("/", response_model=TransactionOut, status_code=201)
async def create_txn(
    payload: TransactionCreate,
    session: AsyncSession = Depends(get_session),
    rates: RateClient = Depends(get_rate_client),
):
    if not payload.date or payload.amount in (None, "") or not payload.currency:
        raise ValidationError("Date, amount, and currency are required")

    checked = validate_row({
        "Date": payload.date,
        "Description": payload.description,
        "Amount": payload.amount,
        "Currency": payload.currency,
    })
    if isinstance(checked, Rejected):
        raise ValidationError(REJECTION_MESSAGES[checked.reason])
    _require_description(checked.description)

    converted = await rates.convert_to_base(checked.amount, checked.currency)
    obj = Transaction(
        id=str(uuid.uuid4()),
        date=checked.date,
        description=checked.description,
        amount=checked.amount,
        currency=checked.currency,
        converted_amount=converted,
    )
    session.add(obj)
    await _commit(session)
    return obj

# -----------------------------
# GET ONE
# -----------------------------
@router.get("/{transaction_id}", response_model=TransactionOut)
async def get_txn(transaction_id: str, session: AsyncSession = Depends(get_session)):
    return await _get_or_404(session, _parse_id(transaction_id))

# -----------------------------
# UPDATE
# -----------------------------
@router.put("/{transaction_id}", response_model=TransactionOut)
async def update_txn(
    transaction_id: str,
    payload: TransactionUpdate,
    session: AsyncSession = Depends(get_session),
    rates: RateClient = Depends(get_rate_client),
):
    """
    Partial or full update. convertedAmount is never taken from the body;
    it is recomputed whenever amount or currency changes.
    """
    tx_id = _parse_id(transaction_id)
    obj = await _get_or_404(session, tx_id)
    changes = payload.model_dump(exclude_unset=True)

    if "date" in changes:
        parsed = parse_body_date(changes["date"])
        if parsed is None:
            raise ValidationError(REJECTION_MESSAGES[INVALID_DATE])
        obj.date = parsed

    if "description" in changes:
        _require_description(changes["description"])
        obj.description = changes["description"]

    if "amount" in changes:
        amount = parse_amount(changes["amount"])
        if amount is None:
            raise ValidationError(REJECTION_MESSAGES[INVALID_AMOUNT])
        obj.amount = amount

    if "currency" in changes:
        currency = parse_currency(changes["currency"])
        if currency is None:
            raise ValidationError(REJECTION_MESSAGES[MISSING_CURRENCY])
        obj.currency = currency

    if "amount" in changes or "currency" in changes:
        obj.converted_amount = await rates.convert_to_base(obj.amount, obj.currency)

    await _commit(session)
    return obj

# -----------------------------
# DELETE
# -----------------------------
@router.delete("/{transaction_id}", status_code=204)
async def delete_txn(transaction_id: str, session: AsyncSession = Depends(get_session)):
    obj = await _get_or_404(session, _parse_id(transaction_id))
    await session.delete(obj)
    await _commit(session)
    return Response(status_code=204)

# -------- Helpers --------

def _parse_id(transaction_id: str) -> str:
    # Reject malformed ids before touching the DB
    try:
        return str(uuid.UUID(transaction_id))
    except ValueError:
        raise InvalidTransactionId()

def _require_description(description) -> None:
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("Description is required")

async def _get_or_404(session: AsyncSession, tx_id: str) -> Transaction:
    obj = await session.get(Transaction, tx_id)
    if obj is None:
        raise NotFoundError()
    return obj

async def _commit(session: AsyncSession) -> None:
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Database error: %s", exc)
        raise PersistenceFailed("Error saving transaction", error=str(exc)) from exc
