# -*- coding: utf-8 -*-
"""
Schemas Pydantic del cálculo de deudas.

`DebtSnapshot` es la foto de solo lectura que se entrega al cálculo y
`DebtDetail` el desglose que recibe el dashboard, el perfil y los reportes.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date


class ActivityRow(BaseModel):
    id: int
    name: str
    amount: float = 0.0
    activity_date: Optional[date] = None

    class Config:
        from_attributes = True

class PaymentRow(BaseModel):
    activity_id: Optional[int] = None
    concept: str = ""
    amount: float = 0.0

    class Config:
        from_attributes = True

class CreditMovementRow(BaseModel):
    amount: float
    type: str

    class Config:
        from_attributes = True

class DebtSnapshot(BaseModel):
    student_id: int
    student_name: Optional[str] = None
    enrollment_date: date
    today: date
    monthly_fee: float
    activities: List[ActivityRow] = []
    exclusions: List[int] = []  # ids de actividades excluidas
    payments: List[PaymentRow] = []
    credit_movements: List[CreditMovementRow] = []


class PaymentClassification(BaseModel):
    monthly_payments: List[PaymentRow] = []
    activity_paid: Dict[int, float] = {}


class ActivityDebt(BaseModel):
    name: str
    amount: float

class DebtDetail(BaseModel):
    monthly_debt: float = 0.0
    activity_debts: List[ActivityDebt] = []
    total_debt: float = 0.0


class CreditApplication(BaseModel):
    detail: DebtDetail
    credit_used: float = 0.0


class DebtReportRow(BaseModel):
    student_id: int
    student_name: str
    monthly_debt: float = 0.0
    months_owed: List[str] = []
    activity_debts: List[ActivityDebt] = []
    credit_applied: float = 0.0
    total_debt: float = 0.0

class DebtReport(BaseModel):
    period: str = Field("current", pattern="^(current|year)$")
    report_type: str = Field("both", pattern="^(monthly|activities|both)$")
    today: date
    total: float = 0.0
    rows: List[DebtReportRow] = []
