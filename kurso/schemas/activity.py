# kurso/schemas/activity.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

class ActivityBase(BaseModel):
    name: str = Field(..., max_length=150)
    amount: float = Field(0.0, ge=0)
    activity_date: Optional[date] = None
    tenant_id: Optional[int] = None

class ActivityCreate(ActivityBase):
    pass

class ActivityUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=150)
    amount: Optional[float] = Field(None, ge=0)
    activity_date: Optional[date] = None

class ActivityRead(ActivityBase):
    id: int

    class Config:
        from_attributes = True


class ExclusionCreate(BaseModel):
    student_id: int
    reason: Optional[str] = Field(None, max_length=255)

class ExclusionRead(ExclusionCreate):
    id: int
    activity_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
