# backfill_payment_activities.py
"""
Asigna activity_id a los pagos antiguos que solo identifican la actividad por
el concepto. Solo se actualizan pagos que coinciden con exactamente una
actividad del mismo curso; los ambiguos quedan en el log para revisión manual.
"""

import argparse
import logging
from collections import defaultdict

from kurso.database import SessionLocal
from kurso.debt_utils import is_monthly_fee_payment, payment_matches_activity

# --- Importaciones de todos los modelos ---
from kurso.models.tenant import Tenant
from kurso.models.student import Student
from kurso.models.activity import Activity, ActivityExclusion
from kurso.models.payment import Payment
from kurso.models.credit import CreditMovement, StudentCredit
from kurso.models.donation import ScheduledActivity, ActivityDonation
# ------------------------------------------

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def match_payments(payments, activities_by_tenant):
    """
    Devuelve ({payment_id: activity_id}, {payment_id: [activity_ids]}) con los
    pagos de coincidencia única y los ambiguos.
    """
    matched, ambiguous = {}, {}
    for payment in payments:
        if payment.activity_id is not None or is_monthly_fee_payment(payment):
            continue
        candidates = [a.id for a in activities_by_tenant.get(payment.tenant_id, [])
                      if payment_matches_activity(payment, a)]
        if len(candidates) == 1:
            matched[payment.id] = candidates[0]
        elif len(candidates) > 1:
            ambiguous[payment.id] = candidates
    return matched, ambiguous


def backfill(dry_run=False):
    db = SessionLocal()
    try:
        activities_by_tenant = defaultdict(list)
        for activity in db.query(Activity).all():
            activities_by_tenant[activity.tenant_id].append(activity)

        payments = db.query(Payment).filter(Payment.activity_id == None).all()
        logging.info(f"Revisando {len(payments)} pagos sin actividad asignada...")

        matched, ambiguous = match_payments(payments, activities_by_tenant)
        for payment_id, candidates in ambiguous.items():
            logging.warning(f"Pago {payment_id} coincide con varias actividades {candidates}. Sin cambios.")

        if dry_run:
            logging.info(f"MODO PRUEBA: {len(matched)} pagos se asignarían.")
            return

        by_id = {p.id: p for p in payments}
        for payment_id, activity_id in matched.items():
            by_id[payment_id].activity_id = activity_id
        db.commit()
        logging.info(f"ÉXITO: {len(matched)} pagos asignados, {len(ambiguous)} ambiguos.")
    except Exception as e:
        logging.error(f"Error durante el backfill: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Asigna activity_id a pagos antiguos')
    parser.add_argument('--dry-run', action='store_true', help='Solo informa, no guarda cambios')
    args = parser.parse_args()
    backfill(args.dry_run)
