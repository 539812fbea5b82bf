# -*- coding: utf-8 -*-
"""
Errores de dominio; las rutas los convierten en HTTPException.
"""

class StudentNotFoundError(LookupError):
    def __init__(self, student_id):
        super().__init__(f"Estudiante {student_id} no encontrado")
        self.student_id = student_id


class DonationUnavailableError(ValueError):
    pass
