# -*- coding: utf-8 -*-
"""
Carga desde la base de datos las filas que necesita el cálculo de deudas.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from kurso.config import settings
from kurso.models.activity import Activity, ActivityExclusion
from kurso.models.credit import CreditMovement, StudentCredit
from kurso.models.payment import Payment
from kurso.models.student import Student
from kurso.models.tenant import Tenant
from kurso.exceptions import StudentNotFoundError
from kurso.schemas.debt import ActivityRow, CreditMovementRow, DebtSnapshot, PaymentRow


def tenant_monthly_fee(db: Session, tenant_id: Optional[int]) -> float:
    if tenant_id is None:
        return settings.DEFAULT_MONTHLY_FEE
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if tenant is None:
        return settings.DEFAULT_MONTHLY_FEE
    return tenant.monthly_fee


def _tenant_activities(db: Session, tenant_id: Optional[int]) -> List[ActivityRow]:
    activities = db.query(Activity).filter(Activity.tenant_id == tenant_id).order_by(Activity.id).all()
    return [
        ActivityRow(id=a.id, name=a.name, amount=a.amount or 0.0, activity_date=a.activity_date)
        for a in activities
    ]


def _payment_row(payment: Payment) -> PaymentRow:
    return PaymentRow(activity_id=payment.activity_id, concept=payment.concept or "", amount=payment.amount or 0.0)


def _movement_row(movement: CreditMovement) -> CreditMovementRow:
    return CreditMovementRow(amount=movement.amount, type=movement.type)


def _redirected_payment_ids(movements) -> set:
    # Un pago traspasado vive en su movimiento de crédito, ya no en su concepto
    return {m.source_payment_id for m in movements if m.source_payment_id is not None}


def load_debt_snapshot(db: Session, student_id: int, today: Optional[date] = None) -> DebtSnapshot:
    student = db.query(Student).filter(Student.id == student_id).first()
    if student is None:
        raise StudentNotFoundError(student_id)

    payments = db.query(Payment).filter(Payment.student_id == student_id).all()
    exclusions = db.query(ActivityExclusion.activity_id).filter(ActivityExclusion.student_id == student_id).all()
    movements = db.query(CreditMovement).filter(CreditMovement.student_id == student_id).all()
    redirected = _redirected_payment_ids(movements)

    return DebtSnapshot(
        student_id=student.id,
        student_name=student.full_name,
        enrollment_date=student.enrollment_date,
        today=today or date.today(),
        monthly_fee=tenant_monthly_fee(db, student.tenant_id),
        activities=_tenant_activities(db, student.tenant_id),
        exclusions=[e.activity_id for e in exclusions],
        payments=[_payment_row(p) for p in payments if p.id not in redirected],
        credit_movements=[_movement_row(m) for m in movements],
    )


def load_tenant_snapshots(db: Session, tenant_id: Optional[int], today: Optional[date] = None) -> Tuple[List[DebtSnapshot], Dict[int, float]]:
    """
    Fotos de todos los alumnos del tenant y su saldo a favor, con una
    consulta por tabla en lugar de una por alumno.
    """
    today = today or date.today()
    students = db.query(Student).filter(Student.tenant_id == tenant_id)\
                                .order_by(Student.last_name, Student.first_name).all()
    student_ids = [s.id for s in students]
    if not student_ids:
        return [], {}

    activities = _tenant_activities(db, tenant_id)
    monthly_fee = tenant_monthly_fee(db, tenant_id)

    movements = db.query(CreditMovement).filter(CreditMovement.student_id.in_(student_ids)).all()
    movements_by_student = defaultdict(list)
    for m in movements:
        movements_by_student[m.student_id].append(_movement_row(m))
    redirected = _redirected_payment_ids(movements)

    payments_by_student = defaultdict(list)
    for p in db.query(Payment).filter(Payment.student_id.in_(student_ids)).all():
        if p.id not in redirected:
            payments_by_student[p.student_id].append(_payment_row(p))

    exclusions_by_student = defaultdict(list)
    for e in db.query(ActivityExclusion).filter(ActivityExclusion.student_id.in_(student_ids)).all():
        exclusions_by_student[e.student_id].append(e.activity_id)

    credits = {
        c.student_id: c.amount
        for c in db.query(StudentCredit).filter(StudentCredit.student_id.in_(student_ids)).all()
    }

    snapshots = [
        DebtSnapshot(
            student_id=s.id,
            student_name=s.full_name,
            enrollment_date=s.enrollment_date,
            today=today,
            monthly_fee=monthly_fee,
            activities=activities,
            exclusions=exclusions_by_student[s.id],
            payments=payments_by_student[s.id],
            credit_movements=movements_by_student[s.id],
        )
        for s in students
    ]
    return snapshots, credits
