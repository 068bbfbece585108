from pydantic import BaseModel
from datetime import date, datetime

from .models import AppointmentType


class PatientIn(BaseModel):
    name: str
    email: str = ""
    phone: str = ""
    birth_date: date


class DoctorIn(BaseModel):
    name: str
    license_number: str = ""
    specialty: str = ""
    email: str = ""
    phone: str = ""
    available: bool = True


class AppointmentIn(BaseModel):
    patient_id: int
    doctor_id: int
    scheduled_at: datetime
    appointment_type: str = AppointmentType.teleconsultation.value
    # aceito por compatibilidade, mas o store sempre grava "Scheduled"
    status: str | None = None
    notes: str | None = None


class StatusUpdate(BaseModel):
    # str e não AppointmentStatus: quem valida é o store (400, não 422)
    status: str
