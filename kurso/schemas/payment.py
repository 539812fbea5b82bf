# kurso/schemas/payment.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date

class PaymentBase(BaseModel):
    student_id: Optional[int] = None
    activity_id: Optional[int] = None
    concept: str = Field(..., max_length=255)
    amount: float
    payment_date: Optional[date] = None
    month_period: Optional[str] = Field(None, max_length=50)
    folio: Optional[int] = None
    tenant_id: Optional[int] = None

class PaymentCreate(PaymentBase):
    pass

class PaymentRead(PaymentBase):
    id: int

    class Config:
        from_attributes = True
