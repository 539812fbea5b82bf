import logging
import argparse
from datetime import date
from dateutil.relativedelta import relativedelta

from kurso.database import SessionLocal
from kurso.debt_utils import build_debt_report
from kurso.snapshot import load_tenant_snapshots

# --- Importaciones de todos los modelos ---
from kurso.models.tenant import Tenant
from kurso.models.student import Student
from kurso.models.activity import Activity, ActivityExclusion
from kurso.models.payment import Payment
from kurso.models.credit import CreditMovement, StudentCredit
from kurso.models.donation import ScheduledActivity, ActivityDonation
# ------------------------------------------

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def report_date(month, year, today=None):
    """Último día del mes pedido; sin parámetros, la fecha de hoy."""
    if month and year:
        return date(year, month, 1) + relativedelta(months=1, days=-1)
    return today or date.today()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Reporte de deudas del curso')
    parser.add_argument('--tenant', type=int, help='ID del curso (tenant)')
    parser.add_argument('--period', choices=['current', 'year'], default='current', help='Cuotas hasta hoy o todo el año')
    parser.add_argument('--type', dest='report_type', choices=['monthly', 'activities', 'both'], default='both')
    parser.add_argument('--month', type=int, choices=range(1, 13), metavar="MES", help='Mes de corte (1-12)')
    parser.add_argument('--year', type=int, help='Año de corte (ej: 2025)')
    args = parser.parse_args(argv)
    if (args.month is None) != (args.year is None):
        parser.error("--month y --year deben indicarse juntos")
    return args


def generate_report(argv=None):
    """
    Muestra la morosidad del curso. Acepta --month y --year para calcular
    la deuda al cierre de un mes específico.
    """
    args = parse_args(argv)

    try:
        cutoff = report_date(args.month, args.year)
    except ValueError:
        logging.error("Fecha inválida entregada en los parámetros.")
        return

    db = SessionLocal()
    try:
        snapshots, credits = load_tenant_snapshots(db, args.tenant, cutoff)
        logging.info(f"Calculando deudas de {len(snapshots)} alumnos al {cutoff.strftime('%d/%m/%Y')}")

        report = build_debt_report(snapshots, credits, cutoff, period=args.period, report_type=args.report_type)
        for row in report.rows:
            months = ", ".join(row.months_owed) or "-"
            activities = ", ".join(f"{d.name} ${d.amount:,.0f}" for d in row.activity_debts) or "-"
            logging.info(f"-> {row.student_name} | Cuotas: ${row.monthly_debt:,.0f} ({months}) | Actividades: {activities} | Total: ${row.total_debt:,.0f}")

        if report.rows:
            logging.info(f"TOTAL ADEUDADO: ${report.total:,.0f} ({len(report.rows)} alumnos)")
        else:
            logging.info("Ningún alumno con deuda pendiente.")
    except Exception as e:
        logging.error(f"Error durante la generación del reporte: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    generate_report()
