# -*- coding: utf-8 -*-
"""
Cálculo de la deuda de un alumno a partir de una foto de sus datos.

Todas las funciones son puras: reciben filas ya cargadas (ver
`kurso.snapshot`) y devuelven el desglose. El dashboard del alumno, su perfil,
el asistente y los reportes de deuda usan este mismo módulo.
"""

import logging
import math
from datetime import date
from typing import Dict, Iterable, List, Optional

from kurso.config import settings
from kurso.schemas.debt import (
    ActivityDebt, CreditApplication, DebtDetail, DebtReport, DebtReportRow,
    DebtSnapshot, PaymentClassification,
)

MONTH_NAMES = [
    "ENERO", "FEBRERO", "MARZO", "ABRIL", "MAYO", "JUNIO",
    "JULIO", "AGOSTO", "SEPTIEMBRE", "OCTUBRE", "NOVIEMBRE", "DICIEMBRE",
]
MONTHLY_FEE_KEYWORD = "cuota"
REDIRECT_TYPE = "payment_redirect"
LAST_BILLABLE_MONTH = 12
PERIODS = ("current", "year")
REPORT_TYPES = ("monthly", "activities", "both")


# --- Cuotas mensuales ---

def first_billable_month(enrollment_date: date, today: date, start_month: int = settings.BILLING_START_MONTH) -> int:
    """
    Mes (1-12) desde el que se cobra la cuota en el año de `today`.

    Quien se matriculó este año después de marzo paga desde su mes de matrícula.
    Matrículas de años anteriores se cobran solo desde marzo del año actual.
    """
    if enrollment_date.year == today.year and enrollment_date.month > start_month:
        return enrollment_date.month
    return start_month


def months_accrued(enrollment_date: date, today: date, start_month: int = settings.BILLING_START_MONTH,
                   until_month: Optional[int] = None) -> int:
    last_month = today.month if until_month is None else until_month
    first_month = first_billable_month(enrollment_date, today, start_month)
    return max(0, last_month - first_month + 1)


def accrue_monthly_fees(enrollment_date: date, today: date, monthly_fee: float,
                        start_month: int = settings.BILLING_START_MONTH,
                        until_month: Optional[int] = None) -> float:
    return months_accrued(enrollment_date, today, start_month, until_month) * monthly_fee


def pending_months(monthly_debt: float, monthly_fee: float) -> int:
    if monthly_debt <= 0 or monthly_fee <= 0:
        return 0
    return math.ceil(monthly_debt / monthly_fee)


def months_owed(monthly_debt: float, monthly_fee: float, first_month: int, last_month: int) -> List[str]:
    """Nombres de los últimos meses cobrables que la deuda alcanza a cubrir."""
    count = pending_months(monthly_debt, monthly_fee)
    if count == 0 or last_month < first_month:
        return []
    payable = MONTH_NAMES[first_month - 1:last_month]
    return payable[-count:]


# --- Clasificación de pagos ---

def normalize_name(text: Optional[str]) -> str:
    return " ".join((text or "").upper().split())


def is_monthly_fee_payment(payment) -> bool:
    return MONTHLY_FEE_KEYWORD in (payment.concept or "").lower()


def payment_matches_activity(payment, activity) -> bool:
    """
    Un pago pertenece a la actividad si la referencia por id, o si no tiene
    actividad asignada y su concepto contiene el nombre de la actividad.
    """
    if payment.activity_id is not None:
        return payment.activity_id == activity.id

    activity_name = normalize_name(activity.name)
    if not activity_name:
        return False
    return activity_name in normalize_name(payment.concept)


def classify_payments(payments: Iterable, activities: Iterable) -> PaymentClassification:
    payments = list(payments)
    monthly_payments = [p for p in payments if is_monthly_fee_payment(p)]

    # Un mismo pago puede sumar en varias actividades si el concepto las contiene a todas
    activity_paid: Dict[int, float] = {}
    for activity in activities:
        activity_paid[activity.id] = sum(
            float(p.amount) for p in payments if payment_matches_activity(p, activity)
        )

    return PaymentClassification(monthly_payments=monthly_payments, activity_paid=activity_paid)


# --- Actividades ---

def calculate_activity_debts(activities: Iterable, excluded_ids: Iterable[int], enrollment_date: date,
                             today: date, activity_paid: Dict[int, float]) -> List[ActivityDebt]:
    excluded = set(excluded_ids)
    debts = []

    for activity in activities:
        # Sin fecha nunca vence
        if activity.activity_date is None:
            continue
        if activity.activity_date > today:
            continue
        if activity.id in excluded:
            continue
        if enrollment_date > activity.activity_date:
            continue

        paid = activity_paid.get(activity.id, 0.0)
        owed = max(0.0, float(activity.amount) - paid)
        logging.debug(f"Evaluando '{activity.name}': esperado {activity.amount}, pagado {paid}, adeudado {owed}")

        if owed > 0:
            debts.append(ActivityDebt(name=activity.name, amount=owed))

    return debts


# --- Créditos ---

def is_fee_redirect(movement) -> bool:
    return movement.type == REDIRECT_TYPE and movement.amount < 0


def adjusted_monthly_paid(monthly_payments: Iterable, credit_movements: Iterable) -> float:
    paid = sum(float(p.amount) for p in monthly_payments)
    redirected = sum(abs(float(m.amount)) for m in credit_movements if is_fee_redirect(m))
    return paid + redirected


def credit_balance(movements: Iterable) -> float:
    """Saldo a favor: todos los movimientos salvo los traspasos ya aplicados a cuotas."""
    return sum(float(m.amount) for m in movements if not is_fee_redirect(m))


def apply_credit(detail: DebtDetail, credit: float) -> CreditApplication:
    """Descuenta el saldo a favor primero de las cuotas y luego de cada actividad, en orden."""
    available = max(0.0, credit)

    applied = min(detail.monthly_debt, available)
    monthly_debt = detail.monthly_debt - applied
    available -= applied

    activity_debts = []
    for debt in detail.activity_debts:
        amount = debt.amount
        if available > 0:
            applied = min(amount, available)
            amount -= applied
            available -= applied
        if amount > 0:
            activity_debts.append(ActivityDebt(name=debt.name, amount=amount))

    return CreditApplication(
        detail=aggregate_debt(monthly_debt, 0.0, activity_debts),
        credit_used=max(0.0, credit) - available,
    )


# --- Total ---

def aggregate_debt(accrued_monthly: float, monthly_paid: float, activity_debts: List[ActivityDebt]) -> DebtDetail:
    monthly_debt = max(0.0, accrued_monthly - monthly_paid)
    total_debt = monthly_debt + sum(d.amount for d in activity_debts)
    return DebtDetail(monthly_debt=monthly_debt, activity_debts=activity_debts, total_debt=total_debt)


def calculate_debt(snapshot: DebtSnapshot, until_month: Optional[int] = None) -> DebtDetail:
    """
    Deuda del alumno al día `snapshot.today`.

    `until_month` extiende el devengo de cuotas hasta ese mes (los reportes
    anuales usan diciembre); por defecto se cobra hasta el mes actual.
    """
    classification = classify_payments(snapshot.payments, snapshot.activities)

    accrued = accrue_monthly_fees(snapshot.enrollment_date, snapshot.today, snapshot.monthly_fee,
                                  until_month=until_month)
    monthly_paid = adjusted_monthly_paid(classification.monthly_payments, snapshot.credit_movements)

    activity_debts = calculate_activity_debts(
        snapshot.activities,
        snapshot.exclusions,
        snapshot.enrollment_date,
        snapshot.today,
        classification.activity_paid,
    )
    return aggregate_debt(accrued, monthly_paid, activity_debts)


def build_debt_report(snapshots: Iterable[DebtSnapshot], credits: Dict[int, float], today: date,
                      period: str = "current", report_type: str = "both") -> DebtReport:
    """
    Reporte de morosidad del curso: solo aparecen los alumnos que siguen
    debiendo después de aplicar su saldo a favor.
    """
    if period not in PERIODS:
        raise ValueError(f"Periodo inválido: {period}")
    if report_type not in REPORT_TYPES:
        raise ValueError(f"Tipo de reporte inválido: {report_type}")

    until_month = LAST_BILLABLE_MONTH if period == "year" else None
    rows = []

    for snapshot in snapshots:
        detail = calculate_debt(snapshot, until_month=until_month)
        if report_type == "monthly":
            detail = aggregate_debt(detail.monthly_debt, 0.0, [])
        elif report_type == "activities":
            detail = aggregate_debt(0.0, 0.0, detail.activity_debts)

        application = apply_credit(detail, credits.get(snapshot.student_id, 0.0))
        final = application.detail
        if final.total_debt <= 0:
            continue

        first_month = first_billable_month(snapshot.enrollment_date, snapshot.today)
        last_month = until_month or snapshot.today.month
        rows.append(DebtReportRow(
            student_id=snapshot.student_id,
            student_name=snapshot.student_name or "Sin Nombre",
            monthly_debt=final.monthly_debt,
            months_owed=months_owed(final.monthly_debt, snapshot.monthly_fee, first_month, last_month),
            activity_debts=final.activity_debts,
            credit_applied=application.credit_used,
            total_debt=final.total_debt,
        ))

    return DebtReport(
        period=period,
        report_type=report_type,
        today=today,
        total=sum(r.total_debt for r in rows),
        rows=rows,
    )
