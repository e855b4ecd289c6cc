# backend/app/services/query.py

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidPagination
from app.db.models import Transaction


@dataclass(frozen=True)
class TransactionFilters:
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    amount_min: Optional[float] = None
    amount_max: Optional[float] = None
    description_contains: Optional[str] = None


@dataclass
class TransactionPage:
    total: int
    items: List[Transaction]


def build_filters(filters: TransactionFilters) -> list:
    """Translate the optional filters into WHERE clauses (ANDed by the caller)."""
    clauses = []

    if filters.date_from is not None:
        clauses.append(Transaction.date >= filters.date_from)
    if filters.date_to is not None:
        clauses.append(Transaction.date <= filters.date_to)

    if filters.amount_min is not None:
        clauses.append(Transaction.amount >= filters.amount_min)
    if filters.amount_max is not None:
        clauses.append(Transaction.amount <= filters.amount_max)

    if filters.description_contains:
        pattern = f"%{_escape_like(filters.description_contains)}%"
        clauses.append(Transaction.description.ilike(pattern, escape="\\"))

    return clauses


async def query_transactions(
    session: AsyncSession,
    filters: TransactionFilters,
    page: int = 1,
    page_size: int = 10,
) -> TransactionPage:
    """
    One page of matching transactions plus the total match count.

    Ordered newest first with id as tie-breaker so paging is stable.
    """
    if page < 1 or page_size < 1:
        raise InvalidPagination()

    clauses = build_filters(filters)

    total = await session.scalar(
        select(func.count()).select_from(Transaction).where(*clauses)
    )

    res = await session.execute(
        select(Transaction)
        .where(*clauses)
        .order_by(Transaction.date.desc(), Transaction.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return TransactionPage(total=total or 0, items=list(res.scalars().all()))


def _escape_like(value: str) -> str:
    # match % and _ literally
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
