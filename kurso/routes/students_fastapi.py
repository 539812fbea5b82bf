# -*- coding: utf-8 -*-
"""
Rutas FastAPI para alumnos y su dashboard.
"""
from typing import List, Optional
from datetime import date
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kurso.database import get_db
from kurso.debt_utils import calculate_debt
from kurso.exceptions import StudentNotFoundError
from kurso.models.student import Student
from kurso.models.payment import Payment
from kurso.models.credit import StudentCredit
from kurso.models.donation import ScheduledActivity, ActivityDonation
from kurso.schemas.donation import DonationRead
from kurso.schemas.student import (
    StudentCreate, StudentRead, StudentUpdate, StudentDashboard, UpcomingActivity,
)
from kurso.snapshot import load_debt_snapshot

router = APIRouter(
    tags=["Alumnos"],
    responses={404: {"description": "No encontrado"}},
)

UPCOMING_ACTIVITIES_LIMIT = 2


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    db_student = Student(**student.dict())
    db.add(db_student)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logging.error(f"Error de integridad al guardar alumno: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un alumno con ese RUT.")
    db.refresh(db_student)
    return db_student


@router.get("", response_model=List[StudentRead])
def read_students(
    skip: int = 0,
    limit: int = 100,
    tenant_id: Optional[int] = None,
    busca: Optional[str] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Student)
    if tenant_id is not None:
        query = query.filter(Student.tenant_id == tenant_id)
    if busca:
        query = query.filter(or_(Student.first_name.ilike(f"%{busca}%"), Student.last_name.ilike(f"%{busca}%")))
    return query.order_by(Student.last_name, Student.first_name).offset(skip).limit(limit).all()


@router.get("/{student_id}", response_model=StudentRead)
def read_student(student_id: int, db: Session = Depends(get_db)):
    db_student = db.query(Student).filter(Student.id == student_id).first()
    if db_student is None:
        raise HTTPException(status_code=404, detail="Alumno no encontrado")
    return db_student


@router.put("/{student_id}", response_model=StudentRead)
def update_student(student_id: int, datos: StudentUpdate, db: Session = Depends(get_db)):
    db_student = db.query(Student).filter(Student.id == student_id).first()
    if db_student is None:
        raise HTTPException(status_code=404, detail="Alumno no encontrado")

    for key, value in datos.dict(exclude_unset=True).items():
        setattr(db_student, key, value)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logging.error(f"Error de integridad al actualizar alumno {student_id}: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un alumno con ese RUT.")
    db.refresh(db_student)
    return db_student


@router.get("/{student_id}/dashboard", response_model=StudentDashboard)
def student_dashboard(student_id: int, today: Optional[date] = None, db: Session = Depends(get_db)):
    """
    Resumen del alumno: deuda al día, saldo a favor, total pagado y las
    próximas actividades pendientes con lo que comprometió donar.
    """
    try:
        snapshot = load_debt_snapshot(db, student_id, today)
    except StudentNotFoundError:
        raise HTTPException(status_code=404, detail="Alumno no encontrado")

    total_paid = sum(p.amount for p in db.query(Payment).filter(Payment.student_id == student_id).all())
    credit = db.query(StudentCredit).filter(StudentCredit.student_id == student_id).first()

    student = db.query(Student).filter(Student.id == student_id).first()
    pending = db.query(ScheduledActivity).filter(
        ScheduledActivity.tenant_id == student.tenant_id,
        ScheduledActivity.completed == False
    ).order_by(ScheduledActivity.scheduled_date.asc()).limit(UPCOMING_ACTIVITIES_LIMIT).all()

    upcoming = []
    for activity in pending:
        donations = db.query(ActivityDonation).filter(
            ActivityDonation.scheduled_activity_id == activity.id,
            ActivityDonation.student_id == student_id
        ).order_by(ActivityDonation.created_at.desc()).all()
        upcoming.append(UpcomingActivity(
            id=activity.id,
            name=activity.name,
            scheduled_date=activity.scheduled_date,
            donations=[DonationRead.model_validate(d) for d in donations],
        ))

    return StudentDashboard(
        student_id=student_id,
        student_name=snapshot.student_name,
        total_paid=total_paid,
        credit_balance=credit.amount if credit else 0.0,
        debt=calculate_debt(snapshot),
        upcoming_activities=upcoming,
    )
