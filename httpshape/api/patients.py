from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import ValidationError

from httpshape.models.patients import Patient, PatientIn
from httpshape.services.patient_store import PatientStore

router = APIRouter(tags=["patients"])


def get_patient_store(request: Request) -> PatientStore:
    return request.app.state.patient_store


def _parse_patient_id(patient_id: str) -> int:
    try:
        return int(patient_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid patient ID") from exc


async def _read_patient(request: Request) -> PatientIn:
    try:
        return PatientIn.model_validate_json(await request.body())
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid request body") from exc


@router.get("/patients", response_model=list[Patient])
async def list_patients(store: PatientStore = Depends(get_patient_store)) -> list[Patient]:
    return store.list_all()


@router.post("/patients", response_model=Patient, status_code=201)
async def create_patient(request: Request, store: PatientStore = Depends(get_patient_store)) -> Patient:
    data = await _read_patient(request)
    return store.create(data)


@router.get("/patients/{patient_id}", response_model=Patient)
async def get_patient(patient_id: str, store: PatientStore = Depends(get_patient_store)) -> Patient:
    patient = store.get(_parse_patient_id(patient_id))
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.put("/patients/{patient_id}", response_model=Patient)
async def update_patient(
    patient_id: str,
    request: Request,
    store: PatientStore = Depends(get_patient_store),
) -> Patient:
    pid = _parse_patient_id(patient_id)
    data = await _read_patient(request)
    patient = store.update(pid, data)
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.delete("/patients/{patient_id}", status_code=204)
async def delete_patient(patient_id: str, store: PatientStore = Depends(get_patient_store)) -> Response:
    if not store.delete(_parse_patient_id(patient_id)):
        raise HTTPException(status_code=404, detail="Patient not found")
    return Response(status_code=204)
