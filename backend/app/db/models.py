from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, String, Date, Float, Text, CheckConstraint, Index

# Base class for all ORM models
Base = declarative_base()

class Transaction(Base):
    __tablename__ = "transactions"

    # Opaque id handed out at creation (uuid4 string)
    id                = Column(String(36), primary_key=True)

    # Day granularity only; CSV/body input is DD-MM-YYYY
    date              = Column(Date, nullable=False)

    # Free-text label; empty strings are rejected by the DB, not the row validator
    description       = Column(Text, nullable=False)

    # Amount in the original currency (always > 0)
    amount            = Column(Float, nullable=False, index=True)
    currency          = Column(String(8), nullable=False)

    # Same amount in the base currency (INR), computed on every write
    converted_amount  = Column(Float, nullable=False)

    __table_args__ = (
        CheckConstraint("description <> ''", name="ck_transactions_description_not_empty"),
    )

# Matches the default list ordering (newest first, id as tie-breaker)
Index("ix_transactions_date_id", Transaction.date.desc(), Transaction.id)
