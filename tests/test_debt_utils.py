from datetime import date

import pytest

from kurso.debt_utils import (
    accrue_monthly_fees, adjusted_monthly_paid, aggregate_debt, apply_credit, build_debt_report,
    calculate_activity_debts, calculate_debt, classify_payments, credit_balance, first_billable_month,
    months_owed, normalize_name, payment_matches_activity, pending_months,
)
from kurso.schemas.debt import ActivityDebt, ActivityRow, CreditMovementRow, DebtDetail, DebtSnapshot, PaymentRow

TODAY = date(2025, 5, 15)


def snapshot(**kwargs):
    data = dict(
        student_id=1,
        student_name="Ana Rojas",
        enrollment_date=date(2025, 3, 1),
        today=TODAY,
        monthly_fee=3000,
    )
    data.update(kwargs)
    return DebtSnapshot(**data)


# --- Cuotas mensuales ---

def test_billing_starts_in_march_for_early_enrollment():
    assert first_billable_month(date(2025, 1, 20), TODAY) == 3
    assert accrue_monthly_fees(date(2025, 1, 20), TODAY, 3000) == 9000


def test_billing_starts_at_enrollment_month_later_in_the_year():
    assert first_billable_month(date(2025, 4, 28), TODAY) == 4
    assert accrue_monthly_fees(date(2025, 4, 28), TODAY, 3000) == 6000


def test_prior_year_enrollment_only_bills_current_year():
    assert first_billable_month(date(2024, 8, 1), TODAY) == 3
    assert accrue_monthly_fees(date(2024, 8, 1), TODAY, 3000) == 9000


def test_nothing_accrues_before_march():
    assert accrue_monthly_fees(date(2024, 3, 1), date(2025, 2, 10), 3000) == 0


def test_accrual_until_december():
    assert accrue_monthly_fees(date(2025, 3, 1), TODAY, 3000, until_month=12) == 30000


# --- Clasificación de pagos ---

def test_normalize_name_collapses_spaces_and_case():
    assert normalize_name("  paseo   fin de\taño ") == "PASEO FIN DE AÑO"
    assert normalize_name(None) == ""


def test_monthly_payments_match_cuota_case_insensitive():
    payments = [
        PaymentRow(concept="CUOTA MARZO", amount=3000),
        PaymentRow(concept="pago cuota abril", amount=3000),
        PaymentRow(concept="Rifa", amount=2000),
    ]
    classification = classify_payments(payments, [])
    assert [p.concept for p in classification.monthly_payments] == ["CUOTA MARZO", "pago cuota abril"]


def test_activity_id_takes_precedence_over_concept():
    rifa = ActivityRow(id=1, name="Rifa", amount=2000, activity_date=date(2025, 4, 1))
    paseo = ActivityRow(id=2, name="Paseo", amount=5000, activity_date=date(2025, 4, 1))
    payment = PaymentRow(activity_id=2, concept="Rifa", amount=1000)

    assert payment_matches_activity(payment, paseo)
    assert not payment_matches_activity(payment, rifa)


def test_substring_match_attributes_payment_to_every_matching_activity():
    activities = [
        ActivityRow(id=1, name="Rifa", amount=2000, activity_date=date(2025, 4, 1)),
        ActivityRow(id=2, name="Rifa  navidad", amount=3000, activity_date=date(2025, 4, 1)),
        ActivityRow(id=3, name="Paseo", amount=5000, activity_date=date(2025, 4, 1)),
    ]
    payments = [PaymentRow(concept="rifa NAVIDAD", amount=1500)]

    classification = classify_payments(payments, activities)

    assert classification.activity_paid == {1: 1500, 2: 1500, 3: 0}


def test_activity_with_blank_name_never_matches():
    blank = ActivityRow(id=1, name="   ", amount=1000, activity_date=date(2025, 4, 1))
    assert not payment_matches_activity(PaymentRow(concept="Cuota marzo", amount=3000), blank)


# --- Actividades ---

def test_activity_debt_skip_rules():
    activities = [
        ActivityRow(id=1, name="Sin fecha", amount=1000, activity_date=None),
        ActivityRow(id=2, name="Futura", amount=1000, activity_date=date(2025, 6, 1)),
        ActivityRow(id=3, name="Excluida", amount=1000, activity_date=date(2025, 4, 1)),
        ActivityRow(id=4, name="Antes de matrícula", amount=1000, activity_date=date(2025, 2, 1)),
        ActivityRow(id=5, name="Hoy", amount=1000, activity_date=TODAY),
        ActivityRow(id=6, name="Pagada", amount=1000, activity_date=date(2025, 4, 1)),
    ]
    debts = calculate_activity_debts(activities, [3], date(2025, 3, 1), TODAY, {6: 1000})

    assert debts == [ActivityDebt(name="Hoy", amount=1000)]


def test_activity_shortfall_is_non_increasing_in_paid():
    activity = [ActivityRow(id=1, name="Paseo", amount=5000, activity_date=date(2025, 4, 1))]
    owed = []
    for paid in (0, 1000, 4999, 5000, 7000):
        debts = calculate_activity_debts(activity, [], date(2025, 3, 1), TODAY, {1: paid})
        owed.append(debts[0].amount if debts else 0)

    assert owed == sorted(owed, reverse=True)
    assert owed == [5000, 4000, 1, 0, 0]


def test_exclusion_removes_activity_regardless_of_state():
    activity = [ActivityRow(id=1, name="Paseo", amount=5000, activity_date=date(2025, 4, 1))]
    for paid in (0, 2500, 9000):
        assert calculate_activity_debts(activity, [1], date(2025, 3, 1), TODAY, {1: paid}) == []


def test_activity_before_enrollment_is_never_owed():
    activity = [ActivityRow(id=1, name="Paseo", amount=5000, activity_date=date(2025, 3, 31))]
    assert calculate_activity_debts(activity, [], date(2025, 4, 1), TODAY, {}) == []


# --- Créditos ---

def test_only_negative_redirects_count_as_monthly_payments():
    movements = [
        CreditMovementRow(amount=-2000, type="payment_redirect"),
        CreditMovementRow(amount=1500, type="payment_redirect"),
        CreditMovementRow(amount=-700, type="payment_deduction"),
        CreditMovementRow(amount=-300, type="manual_adjustment"),
    ]
    monthly = [PaymentRow(concept="Cuota marzo", amount=3000)]

    assert adjusted_monthly_paid(monthly, movements) == 5000


def test_credit_balance_excludes_redirects_applied_to_fees():
    movements = [
        CreditMovementRow(amount=-2000, type="payment_redirect"),
        CreditMovementRow(amount=1500, type="payment_redirect"),
        CreditMovementRow(amount=-500, type="payment_deduction"),
        CreditMovementRow(amount=800, type="activity_refund"),
    ]
    assert credit_balance(movements) == 1800


@pytest.mark.parametrize("redirect, expected_reduction", [(2000, 2000), (6000, 6000), (10000, 6000)])
def test_redirect_reduces_monthly_debt_up_to_the_debt(redirect, expected_reduction):
    base = snapshot(enrollment_date=date(2025, 3, 1), today=date(2025, 4, 30))
    before = calculate_debt(base).monthly_debt
    after = calculate_debt(base.model_copy(update={
        "credit_movements": [CreditMovementRow(amount=-redirect, type="payment_redirect")],
    })).monthly_debt

    assert before == 6000
    assert before - after == expected_reduction


def test_apply_credit_covers_monthly_then_activities_in_order():
    detail = aggregate_debt(1000, 0, [ActivityDebt(name="A", amount=500), ActivityDebt(name="B", amount=700)])

    application = apply_credit(detail, 1800)

    assert application.credit_used == 1800
    assert application.detail.monthly_debt == 0
    assert application.detail.activity_debts == [ActivityDebt(name="B", amount=400)]
    assert application.detail.total_debt == 400


def test_apply_credit_ignores_negative_balance():
    detail = aggregate_debt(1000, 0, [])
    application = apply_credit(detail, -500)
    assert application.credit_used == 0
    assert application.detail.total_debt == 1000


# --- Total ---

def test_aggregate_never_negative():
    detail = aggregate_debt(3000, 9000, [])
    assert detail == DebtDetail(monthly_debt=0, activity_debts=[], total_debt=0)


def test_scenario_fees_only():
    detail = calculate_debt(snapshot(enrollment_date=date(2025, 3, 1), today=date(2025, 4, 30)))

    assert detail.monthly_debt == 6000
    assert detail.activity_debts == []
    assert detail.total_debt == 6000


def test_scenario_activity_paid_in_full():
    detail = calculate_debt(snapshot(
        today=date(2025, 4, 30),
        activities=[ActivityRow(id=1, name="RIFA", amount=2000, activity_date=date(2025, 4, 10))],
        payments=[PaymentRow(concept="RIFA", amount=2000)],
    ))

    assert detail.activity_debts == []
    assert detail.total_debt == detail.monthly_debt


def test_scenario_partial_payment_with_other_activity_excluded():
    detail = calculate_debt(snapshot(
        monthly_fee=0,
        activities=[
            ActivityRow(id=1, name="Paseo fin de año", amount=5000, activity_date=date(2025, 4, 10)),
            ActivityRow(id=2, name="Bingo", amount=1000, activity_date=date(2025, 4, 20)),
        ],
        exclusions=[2],
        payments=[PaymentRow(concept="Abono PASEO FIN DE  AÑO", amount=2000)],
    ))

    assert detail.activity_debts == [ActivityDebt(name="Paseo fin de año", amount=3000)]
    assert detail.total_debt == 3000


def test_cuota_payment_naming_an_activity_counts_for_both():
    detail = calculate_debt(snapshot(
        today=date(2025, 3, 31),
        activities=[ActivityRow(id=1, name="Rifa", amount=2000, activity_date=date(2025, 3, 10))],
        payments=[PaymentRow(concept="Cuota marzo + rifa", amount=3000)],
    ))

    assert detail.monthly_debt == 0
    assert detail.activity_debts == []


# --- Reporte ---

def test_months_owed_returns_latest_payable_months():
    assert months_owed(5000, 3000, 3, 5) == ["ABRIL", "MAYO"]
    assert months_owed(90000, 3000, 4, 5) == ["ABRIL", "MAYO"]
    assert months_owed(0, 3000, 3, 5) == []
    assert pending_months(3001, 3000) == 2


def report_snapshots():
    rifa = ActivityRow(id=1, name="Rifa", amount=2000, activity_date=date(2025, 4, 10))
    debtor = snapshot(
        student_id=1, student_name="Ana Rojas", enrollment_date=date(2024, 3, 1),
        activities=[rifa], payments=[PaymentRow(concept="Cuota marzo", amount=3000)],
    )
    up_to_date = snapshot(
        student_id=2, student_name="Benja Soto", enrollment_date=date(2025, 3, 1),
        activities=[rifa],
        payments=[PaymentRow(concept="Cuotas marzo-mayo", amount=9000), PaymentRow(concept="Rifa", amount=2000)],
    )
    return [debtor, up_to_date]


def test_report_lists_only_students_still_owing_after_credit():
    report = build_debt_report(report_snapshots(), {1: 1000}, TODAY)

    assert len(report.rows) == 1
    row = report.rows[0]
    assert row.student_name == "Ana Rojas"
    assert row.monthly_debt == 5000
    assert row.months_owed == ["ABRIL", "MAYO"]
    assert row.activity_debts == [ActivityDebt(name="Rifa", amount=2000)]
    assert row.credit_applied == 1000
    assert row.total_debt == 7000
    assert report.total == 7000


def test_year_report_projects_fees_until_december():
    report = build_debt_report(report_snapshots(), {1: 1000}, TODAY, period="year", report_type="monthly")

    rows = {r.student_id: r for r in report.rows}
    assert rows[1].monthly_debt == 26000
    assert rows[1].months_owed[0] == "ABRIL"
    assert rows[1].months_owed[-1] == "DICIEMBRE"
    assert rows[1].activity_debts == []
    assert rows[2].monthly_debt == 21000


def test_activities_report_uses_whole_credit_on_activities():
    report = build_debt_report(report_snapshots(), {1: 1000}, TODAY, report_type="activities")

    assert len(report.rows) == 1
    assert report.rows[0].monthly_debt == 0
    assert report.rows[0].activity_debts == [ActivityDebt(name="Rifa", amount=1000)]


def test_report_rejects_unknown_options():
    with pytest.raises(ValueError):
        build_debt_report([], {}, TODAY, period="semester")
    with pytest.raises(ValueError):
        build_debt_report([], {}, TODAY, report_type="all")
