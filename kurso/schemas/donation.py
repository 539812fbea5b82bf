# kurso/schemas/donation.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date

class DonationItemCreate(BaseModel):
    name: str = Field(..., max_length=150)
    unit: str = Field("", max_length=50)
    quantity: float = Field(..., gt=0)

class ScheduledActivityBase(BaseModel):
    name: str = Field(..., max_length=150)
    scheduled_date: date
    completed: bool = False
    is_with_donations: bool = False
    is_with_fee: bool = False
    tenant_id: Optional[int] = None

class ScheduledActivityCreate(ScheduledActivityBase):
    donation_items: List[DonationItemCreate] = []

class ScheduledActivityRead(ScheduledActivityBase):
    id: int
    completed_count: float = 0
    total_count: float = 0

    class Config:
        from_attributes = True


class DonationRead(BaseModel):
    id: int
    scheduled_activity_id: int
    name: str
    unit: str
    quantity: float
    student_id: Optional[int] = None
    donated_at: Optional[date] = None

    class Config:
        from_attributes = True

class DonationItemStatus(BaseModel):
    name: str
    unit: str
    required: float = 0
    committed: float = 0
    fulfilled: float = 0
    available: float = 0

class DonationCommitItem(BaseModel):
    name: str
    unit: str = ""
    quantity: float = Field(..., gt=0)

class DonationCommit(BaseModel):
    student_id: int
    items: List[DonationCommitItem]
