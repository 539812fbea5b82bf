# kurso/schemas/credit.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from kurso.models.credit import MOVEMENT_TYPES

MOVEMENT_TYPE_PATTERN = "^(" + "|".join(MOVEMENT_TYPES) + ")$"

class CreditMovementBase(BaseModel):
    student_id: int
    amount: float
    type: str = Field(..., pattern=MOVEMENT_TYPE_PATTERN)
    description: str = ""
    source_payment_id: Optional[int] = None

class CreditMovementCreate(CreditMovementBase):
    pass

class CreditMovementRead(CreditMovementBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentRedirect(BaseModel):
    payment_id: int
    # "credit" deja el monto como saldo a favor; "debts" lo aplica a las cuotas
    target: str = Field("credit", pattern="^(credit|debts)$")

class CreditBalance(BaseModel):
    student_id: int
    amount: float
