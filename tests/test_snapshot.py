from datetime import date

import pytest

from conftest import add
from kurso.debt_utils import calculate_debt
from kurso.exceptions import StudentNotFoundError
from kurso.models.activity import Activity, ActivityExclusion
from kurso.models.credit import CreditMovement, StudentCredit
from kurso.models.payment import Payment
from kurso.models.student import Student
from kurso.models.tenant import Tenant
from kurso.snapshot import load_debt_snapshot, load_tenant_snapshots, tenant_monthly_fee


def test_snapshot_reads_only_the_students_rows(db_session, course):
    tenant, student, rifa = course
    other = add(db_session, Student(tenant_id=tenant.id, first_name="Luis", enrollment_date=date(2025, 3, 1)))
    other_tenant = add(db_session, Tenant(name="Otro curso"))
    add(db_session, Activity(tenant_id=other_tenant.id, name="Bingo", amount=500, activity_date=date(2025, 4, 1)))

    add(db_session, Payment(student_id=student.id, concept="Cuota marzo", amount=2000))
    add(db_session, Payment(student_id=other.id, concept="Rifa", amount=2000))
    add(db_session, Payment(student_id=None, concept="Rifa", amount=2000))
    add(db_session, ActivityExclusion(student_id=other.id, activity_id=rifa.id))
    add(db_session, CreditMovement(student_id=student.id, amount=-1000, type="payment_redirect"))

    snapshot = load_debt_snapshot(db_session, student.id, date(2025, 4, 30))

    assert snapshot.student_name == "Ana Rojas"
    assert snapshot.monthly_fee == 2000
    assert [a.name for a in snapshot.activities] == ["Rifa"]
    assert snapshot.exclusions == []
    assert [p.concept for p in snapshot.payments] == ["Cuota marzo"]
    assert snapshot.credit_movements[0].amount == -1000

    detail = calculate_debt(snapshot)
    assert detail.monthly_debt == 1000
    assert detail.total_debt == 3000


def test_missing_student_raises(db_session):
    with pytest.raises(StudentNotFoundError):
        load_debt_snapshot(db_session, 999)


def test_monthly_fee_defaults_when_tenant_has_no_setting(db_session):
    tenant = add(db_session, Tenant(name="Sin configuración", settings=None))
    assert tenant_monthly_fee(db_session, tenant.id) == 3000
    assert tenant_monthly_fee(db_session, None) == 3000


def test_tenant_snapshots_group_rows_per_student(db_session, course):
    tenant, student, rifa = course
    other = add(db_session, Student(tenant_id=tenant.id, first_name="Luis", last_name="Araya",
                                    enrollment_date=date(2025, 3, 1)))
    add(db_session, Payment(student_id=other.id, concept="Rifa", amount=2000))
    add(db_session, ActivityExclusion(student_id=student.id, activity_id=rifa.id))
    add(db_session, StudentCredit(student_id=other.id, amount=500))

    snapshots, credits = load_tenant_snapshots(db_session, tenant.id, date(2025, 4, 30))

    by_id = {s.student_id: s for s in snapshots}
    assert [s.student_name for s in snapshots] == ["Luis Araya", "Ana Rojas"]
    assert by_id[student.id].exclusions == [rifa.id]
    assert by_id[student.id].payments == []
    assert [p.amount for p in by_id[other.id].payments] == [2000]
    assert credits == {other.id: 500}


def test_tenant_without_students(db_session):
    tenant = add(db_session, Tenant(name="Vacío"))
    assert load_tenant_snapshots(db_session, tenant.id) == ([], {})


def test_redirected_payments_leave_the_snapshot(db_session, course):
    tenant, student, rifa = course
    fee = add(db_session, Payment(student_id=student.id, concept="Cuota marzo", amount=2000))
    add(db_session, Payment(student_id=student.id, activity_id=rifa.id, concept="Pago rifa", amount=2000))
    add(db_session, CreditMovement(student_id=student.id, amount=-2000, type="payment_redirect",
                                   source_payment_id=fee.id))

    single = load_debt_snapshot(db_session, student.id, date(2025, 4, 30))
    snapshots, _ = load_tenant_snapshots(db_session, tenant.id, date(2025, 4, 30))

    assert [p.concept for p in single.payments] == ["Pago rifa"]
    assert snapshots[0].payments == single.payments
    assert calculate_debt(single).total_debt == 2000
