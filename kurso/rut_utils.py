# -*- coding: utf-8 -*-
"""
Utilidades para el RUT chileno (formato guardado en BD: 12345678-9).
"""
import re

def _rut_chars(rut):
    return re.sub(r"[^0-9kK]", "", rut or "").upper()

def compute_dv(body: str) -> str:
    total = 0
    multiplier = 2
    for digit in reversed(body):
        total += int(digit) * multiplier
        multiplier = 2 if multiplier == 7 else multiplier + 1
    rest = 11 - (total % 11)
    if rest == 11:
        return "0"
    if rest == 10:
        return "K"
    return str(rest)

def validate_rut(rut: str) -> bool:
    clean = _rut_chars(rut)
    if len(clean) < 8:
        return False
    body, dv = clean[:-1], clean[-1]
    if not body.isdigit():
        return False
    return compute_dv(body) == dv

def clean_rut(rut: str) -> str:
    clean = _rut_chars(rut)
    if len(clean) < 2:
        return clean
    return f"{clean[:-1]}-{clean[-1]}"
