from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status

from .. import schemas
from ..database import get_store
from ..responses import success
from ..services.store import RecordStore

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("")
def list_appointments(store: RecordStore = Depends(get_store)):
    return success(store.list_appointments())


@router.get("/{appointment_id}")
def get_appointment(appointment_id: int, store: RecordStore = Depends(get_store)):
    return success(store.get_appointment(appointment_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_appointment(req: schemas.AppointmentIn, request: Request, response: Response,
                       store: RecordStore = Depends(get_store)):
    # paciente/médico inexistente → RecordValidationError → 400
    appt = store.create_appointment(req)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{appt.id}"
    return success(appt)


@router.patch("/{appointment_id}/status")
def transition_status(
    appointment_id: int,
    req: Optional[schemas.StatusUpdate] = Body(default=None),
    novo_status: Optional[str] = Query(default=None, alias="novoStatus",
                                       description="Compatibilidade: status via query string"),
    store: RecordStore = Depends(get_store),
):
    new_status = req.status if req is not None else novo_status
    if new_status is None:
        raise HTTPException(status_code=400, detail="Informe o novo status")
    return success(store.transition_appointment_status(appointment_id, new_status))
