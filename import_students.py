import argparse
from datetime import date

import pandas as pd
from sqlalchemy.orm import Session

from kurso.database import SessionLocal
from kurso.rut_utils import clean_rut, validate_rut

# --- Importar todos los modelos para resolver relaciones ---
from kurso.models.tenant import Tenant
from kurso.models.student import Student
from kurso.models.activity import Activity, ActivityExclusion
from kurso.models.payment import Payment
from kurso.models.credit import CreditMovement, StudentCredit
from kurso.models.donation import ScheduledActivity, ActivityDonation
# -----------------------------------------------------------

EXCEL_FILE_PATH = "plantilla_alumnos.xlsx"
NAME_COLUMNS = ("Nombre", "Nombres", "Name")
RUT_COLUMNS = ("RUT", "Rut", "rut")


def _first_column(df, candidates):
    return next((c for c in candidates if c in df.columns), None)


def split_name(full_name):
    """'Juan Pérez Soto' -> ('Juan', 'Pérez Soto')."""
    parts = str(full_name).split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def parse_students(df):
    """
    Filas válidas del Excel como dicts. Los RUT inválidos se descartan y
    se devuelven aparte para informarlos.
    """
    name_col = _first_column(df, NAME_COLUMNS)
    rut_col = _first_column(df, RUT_COLUMNS)
    if name_col is None:
        raise ValueError(f"No se encontró la columna de nombre. Columnas: {list(df.columns)}")

    valid, invalid = [], []
    for _, row in df.iterrows():
        name = row[name_col]
        if pd.isna(name) or not str(name).strip():
            continue
        rut = None
        if rut_col is not None and not pd.isna(row[rut_col]) and str(row[rut_col]).strip():
            rut = str(row[rut_col]).strip()
            if not validate_rut(rut):
                invalid.append((str(name).strip(), rut))
                continue
            rut = clean_rut(rut)
        first_name, last_name = split_name(name)
        valid.append({"first_name": first_name, "last_name": last_name, "rut": rut})
    return valid, invalid


def import_students(path, tenant_id=None, enrollment_date=None):
    print("Iniciando la importación de alumnos desde Excel...")

    db: Session = SessionLocal()
    try:
        try:
            df = pd.read_excel(path)
            print(f"Archivo '{path}' leído con éxito.")
        except FileNotFoundError:
            print(f"ERROR: No se encontró el archivo '{path}'.")
            return
        except Exception as e:
            print(f"ERROR al leer el archivo Excel: {e}")
            return

        try:
            rows, invalid = parse_students(df)
        except ValueError as e:
            print(f"ERROR: {e}")
            return

        new_students = 0
        existing = 0
        for data in rows:
            query = db.query(Student).filter(Student.tenant_id == tenant_id)
            if data["rut"]:
                query = query.filter(Student.rut == data["rut"])
            else:
                query = query.filter(Student.first_name == data["first_name"], Student.last_name == data["last_name"])

            if query.first():
                existing += 1
                continue

            db.add(Student(tenant_id=tenant_id, enrollment_date=enrollment_date or date.today(), **data))
            new_students += 1
            print(f"  + Agregando: {data['first_name']} {data['last_name']}")

        if new_students > 0:
            db.commit()
            print("¡Alumnos guardados con éxito!")
        else:
            print("\nNingún alumno nuevo para agregar.")

        print("\n--- RESUMEN DE LA IMPORTACIÓN ---")
        print(f"Alumnos nuevos: {new_students}")
        print(f"Alumnos que ya existían: {existing}")
        for name, rut in invalid:
            print(f"RUT inválido, omitido: {name} ({rut})")
        print("---------------------------------")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Importa alumnos desde Excel (columnas Nombre y RUT)')
    parser.add_argument('path', nargs='?', default=EXCEL_FILE_PATH)
    parser.add_argument('--tenant', type=int, help='ID del curso (tenant)')
    parser.add_argument('--enrollment-date', type=date.fromisoformat, help='Fecha de matrícula (YYYY-MM-DD)')
    args = parser.parse_args()
    import_students(args.path, args.tenant, args.enrollment_date)
