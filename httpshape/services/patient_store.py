from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta, timezone
from threading import Lock

from httpshape.models.patients import Patient, PatientIn

logger = logging.getLogger(__name__)

_FIRST_NAMES = ["James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda", "William", "Elizabeth"]
_LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez"]
_GENDERS = ["Male", "Female", "Other"]

_MIN_BIRTH = datetime(1940, 1, 1, tzinfo=timezone.utc)
_MAX_BIRTH = datetime(2020, 12, 31, tzinfo=timezone.utc)


def generate_random_patient(rng: random.Random) -> PatientIn:
    first_name = rng.choice(_FIRST_NAMES)
    last_name = rng.choice(_LAST_NAMES)

    span = int((_MAX_BIRTH - _MIN_BIRTH).total_seconds())
    birth_date = _MIN_BIRTH + timedelta(seconds=rng.randrange(span))

    return PatientIn(
        first_name=first_name,
        last_name=last_name,
        birth_date=birth_date,
        gender=rng.choice(_GENDERS),
        email=f"{first_name.lower()}.{last_name.lower()}@example.com",
        phone=f"{rng.randrange(1000):03d}-{rng.randrange(1000):03d}-{rng.randrange(10000):04d}",
    )


class PatientStore:
    """In-memory patient records keyed by sequential integer ids.

    The random generator used for seed data is seeded once, at construction.
    """

    def __init__(self, seed_count: int = 5, rng: random.Random | None = None) -> None:
        self._lock = Lock()
        self._patients: dict[int, Patient] = {}
        self._next_id = 1
        self._rng = rng or random.Random()

        for _ in range(seed_count):
            self.create(generate_random_patient(self._rng))
        logger.info("patient_store.seeded", extra={"count": seed_count})

    def create(self, data: PatientIn) -> Patient:
        with self._lock:
            patient = Patient(id=self._next_id, **data.model_dump())
            self._patients[patient.id] = patient
            self._next_id += 1
            return patient

    def get(self, patient_id: int) -> Patient | None:
        with self._lock:
            return self._patients.get(patient_id)

    def list_all(self) -> list[Patient]:
        with self._lock:
            return [self._patients[key] for key in sorted(self._patients)]

    def update(self, patient_id: int, data: PatientIn) -> Patient | None:
        with self._lock:
            if patient_id not in self._patients:
                return None
            patient = Patient(id=patient_id, **data.model_dump())
            self._patients[patient_id] = patient
            return patient

    def delete(self, patient_id: int) -> bool:
        with self._lock:
            return self._patients.pop(patient_id, None) is not None
