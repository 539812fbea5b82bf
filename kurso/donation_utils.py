# -*- coding: utf-8 -*-
"""
Seguimiento de donaciones comprometidas para actividades programadas.

Cada actividad con donaciones tiene una fila base por ítem (sin alumno) con la
cantidad requerida, y una fila por compromiso de alumno. `donated_at` marca
que el admin recibió lo comprometido.
"""

from typing import Iterable, List, Tuple

from kurso.exceptions import DonationUnavailableError
from kurso.schemas.donation import DonationItemStatus


def item_key(name, unit):
    return (name or "").strip().upper(), (unit or "").strip().upper()


def summarize_donation_items(rows: Iterable) -> List[DonationItemStatus]:
    rows = list(rows)
    items = {}

    for row in rows:
        if row.student_id is not None:
            continue
        key = item_key(row.name, row.unit)
        # Si hay filas base repetidas vale la primera
        if key not in items:
            items[key] = DonationItemStatus(name=row.name, unit=row.unit or "", required=float(row.quantity or 0))

    for row in rows:
        if row.student_id is None:
            continue
        key = item_key(row.name, row.unit)
        item = items.setdefault(key, DonationItemStatus(name=row.name, unit=row.unit or ""))
        item.committed += float(row.quantity or 0)
        if row.donated_at is not None:
            item.fulfilled += float(row.quantity or 0)

    for item in items.values():
        item.available = max(0.0, item.required - item.committed)

    return list(items.values())


def donation_completion(rows: Iterable) -> Tuple[float, float]:
    """(comprometido, requerido) sumando todos los ítems de la actividad."""
    summary = summarize_donation_items(rows)
    return sum(i.committed for i in summary), sum(i.required for i in summary)


def validate_commitment(summary: List[DonationItemStatus], name: str, unit: str, quantity: float) -> DonationItemStatus:
    if quantity <= 0:
        raise DonationUnavailableError("La cantidad debe ser mayor que cero")

    key = item_key(name, unit)
    item = next((i for i in summary if item_key(i.name, i.unit) == key), None)
    if item is None or item.required <= 0:
        raise DonationUnavailableError(f"No se encontró el ítem {name}")
    if quantity > item.available:
        raise DonationUnavailableError(f"No hay suficientes unidades de {name}")
    return item
