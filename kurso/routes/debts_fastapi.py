# -*- coding: utf-8 -*-
"""
Rutas FastAPI para consultar deudas de alumnos y el reporte de morosidad.
"""
from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from kurso.database import get_db
from kurso.debt_utils import build_debt_report, calculate_debt
from kurso.exceptions import StudentNotFoundError
from kurso.schemas.debt import DebtDetail, DebtReport
from kurso.snapshot import load_debt_snapshot, load_tenant_snapshots

router = APIRouter(
    tags=["Deudas"],
    responses={404: {"description": "No encontrado"}},
)


@router.get("/students/{student_id}", response_model=DebtDetail)
def read_student_debt(student_id: int, today: Optional[date] = None, db: Session = Depends(get_db)):
    try:
        snapshot = load_debt_snapshot(db, student_id, today)
    except StudentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return calculate_debt(snapshot)


@router.get("/report", response_model=DebtReport)
def read_debt_report(
    tenant_id: Optional[int] = None,
    period: str = Query("current", pattern="^(current|year)$"),
    report_type: str = Query("both", pattern="^(monthly|activities|both)$"),
    today: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """
    Reporte de deudas del curso. `period=year` proyecta las cuotas hasta
    diciembre; el saldo a favor de cada alumno se descuenta antes de listar.
    """
    today = today or date.today()
    snapshots, credits = load_tenant_snapshots(db, tenant_id, today)
    return build_debt_report(snapshots, credits, today, period=period, report_type=report_type)
