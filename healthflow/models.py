# healthflow/models.py
from typing import Optional
from datetime import date, datetime
import enum

from pydantic import BaseModel


class AppointmentStatus(str, enum.Enum):
    scheduled = "Scheduled"
    in_progress = "InProgress"
    completed = "Completed"
    cancelled = "Cancelled"


class AppointmentType(str, enum.Enum):
    teleconsultation = "Teleconsultation"
    in_person = "InPerson"


class Patient(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    birth_date: date
    # carimbado pelo store, nunca vem do cliente
    registered_at: datetime


class Doctor(BaseModel):
    id: int
    name: str
    license_number: str  # CRM
    specialty: str
    email: str
    phone: str
    available: bool = True


class Appointment(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    scheduled_at: datetime
    # texto livre; os valores conhecidos estão em AppointmentType
    appointment_type: str = AppointmentType.teleconsultation.value
    status: AppointmentStatus = AppointmentStatus.scheduled
    notes: Optional[str] = None
    created_at: datetime


class Statistics(BaseModel):
    total_patients: int = 0
    total_doctors: int = 0
    total_appointments: int = 0
    appointments_today: int = 0
    scheduled_appointments: int = 0
    completed_appointments: int = 0
