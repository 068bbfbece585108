from fastapi import APIRouter, Depends, Request, Response, status

from .. import schemas
from ..database import get_store
from ..responses import success
from ..services.store import RecordStore

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("")
def list_patients(store: RecordStore = Depends(get_store)):
    return success(store.list_patients())


@router.get("/{patient_id}")
def get_patient(patient_id: int, store: RecordStore = Depends(get_store)):
    return success(store.get_patient(patient_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_patient(req: schemas.PatientIn, request: Request, response: Response,
                   store: RecordStore = Depends(get_store)):
    patient = store.create_patient(req)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{patient.id}"
    return success(patient)


@router.put("/{patient_id}")
def update_patient(patient_id: int, req: schemas.PatientIn, store: RecordStore = Depends(get_store)):
    return success(store.update_patient(patient_id, req))


@router.delete("/{patient_id}")
def delete_patient(patient_id: int, store: RecordStore = Depends(get_store)):
    # consultas que apontam para o paciente continuam existindo
    store.delete_patient(patient_id)
    return success(message="Paciente removido com sucesso")
