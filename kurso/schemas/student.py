# kurso/schemas/student.py
from pydantic import BaseModel, Field, EmailStr, validator
from typing import Optional, List
from datetime import date, datetime

from kurso.rut_utils import validate_rut, clean_rut
from kurso.schemas.debt import DebtDetail
from kurso.schemas.donation import DonationRead


class StudentBase(BaseModel):
    first_name: str = Field(..., max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    rut: Optional[str] = Field(None, max_length=12)
    email: Optional[EmailStr] = None
    enrollment_date: date
    tenant_id: Optional[int] = None

    @validator('email', pre=True)
    def empty_str_to_none(cls, v):
        if isinstance(v, str) and v.strip() == '':
            return None
        return v

    @validator('rut')
    def rut_valido(cls, v):
        """Guarda el RUT como 12345678-9; rechaza dígitos verificadores incorrectos."""
        if v is None or v.strip() == '':
            return None
        if not validate_rut(v):
            raise ValueError("RUT inválido")
        return clean_rut(v)

class StudentCreate(StudentBase):
    pass

class StudentUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    rut: Optional[str] = Field(None, max_length=12)
    email: Optional[EmailStr] = None
    enrollment_date: Optional[date] = None

    @validator('rut')
    def rut_valido_update(cls, v):
        if v is None or v.strip() == '':
            return None
        if not validate_rut(v):
            raise ValueError("RUT inválido")
        return clean_rut(v)

class StudentRead(StudentBase):
    id: int
    full_name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UpcomingActivity(BaseModel):
    id: int
    name: str
    scheduled_date: date
    donations: List[DonationRead] = []

class StudentDashboard(BaseModel):
    student_id: int
    student_name: str
    total_paid: float
    credit_balance: float
    debt: DebtDetail
    upcoming_activities: List[UpcomingActivity] = []
