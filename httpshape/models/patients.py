from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class PatientIn(BaseModel):
    first_name: str = ""
    last_name: str = ""
    birth_date: datetime | None = None
    gender: str = ""
    email: str = ""
    phone: str = ""


class Patient(PatientIn):
    id: int
