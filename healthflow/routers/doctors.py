from fastapi import APIRouter, Depends, Request, Response, status

from .. import schemas
from ..database import get_store
from ..responses import success
from ..services.store import RecordStore

router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get("")
def list_doctors(store: RecordStore = Depends(get_store)):
    return success(store.list_doctors())


@router.get("/{doctor_id}")
def get_doctor(doctor_id: int, store: RecordStore = Depends(get_store)):
    return success(store.get_doctor(doctor_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_doctor(req: schemas.DoctorIn, request: Request, response: Response,
                  store: RecordStore = Depends(get_store)):
    doctor = store.create_doctor(req)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{doctor.id}"
    return success(doctor)
