from pydantic import BaseModel, ConfigDict, Field
import datetime
from typing import List, Optional, Union

class TransactionCreate(BaseModel):
    date: Optional[str] = None           # DD-MM-YYYY, checked by the row validator
    description: Optional[str] = None
    amount: Optional[Union[float, str]] = None
    currency: Optional[str] = None

class TransactionUpdate(TransactionCreate):
    # Same fields, all optional. Anything else (e.g. convertedAmount) is ignored:
    # the converted value is always recomputed server-side.
    model_config = ConfigDict(extra="ignore")

class TransactionOut(BaseModel):
    id: str
    date: datetime.date
    description: str
    amount: float
    currency: str
    converted_amount: float = Field(serialization_alias="convertedAmount")
    model_config = ConfigDict(from_attributes=True)

class TransactionListOut(BaseModel):
    total: int
    transactions: List[TransactionOut]

class RejectedRowOut(BaseModel):
    row: int
    reason: str

class UploadResult(BaseModel):
    message: str
    inserted: int
    degraded: int
    rejected: List[RejectedRowOut]
