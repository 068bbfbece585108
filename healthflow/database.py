# healthflow/database.py
from __future__ import annotations
import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from fastapi import Request

from .config import Settings
from .models import Appointment, AppointmentStatus, AppointmentType, Doctor, Patient
from .services.store import RecordStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings, clock: Optional[Callable[[], datetime]] = None) -> RecordStore:
    """
    Cria o store em memória da aplicação (um por app, guardado em app.state).
    Nada persiste: reiniciar o processo volta ao estado inicial.
    """
    store = RecordStore(tz_name=settings.TIMEZONE, clock=clock)
    if settings.SEED_DEMO_DATA:
        seed_demo_data(store)
    return store


def seed_demo_data(store: RecordStore) -> None:
    """Dois pacientes, dois médicos e uma teleconsulta de rotina daqui a 2 dias."""
    now = store.now()
    consult_day = (now + timedelta(days=2)).date()
    consult_at = datetime.combine(consult_day, time(14, 0), tzinfo=now.tzinfo)

    patients = [
        Patient(
            id=1,
            name="João Silva",
            email="joao.silva@email.com",
            phone="(11) 98765-4321",
            birth_date=date(1985, 5, 15),
            registered_at=now - timedelta(days=30),
        ),
        Patient(
            id=2,
            name="Maria Santos",
            email="maria.santos@email.com",
            phone="(11) 97654-3210",
            birth_date=date(1990, 8, 22),
            registered_at=now - timedelta(days=15),
        ),
    ]
    doctors = [
        Doctor(
            id=1,
            name="Dr. Carlos Mendes",
            license_number="123456-SP",
            specialty="Cardiologia",
            email="carlos.mendes@healthflow.com",
            phone="(11) 3456-7890",
            available=True,
        ),
        Doctor(
            id=2,
            name="Dra. Ana Paula",
            license_number="789012-SP",
            specialty="Clínica Geral",
            email="ana.paula@healthflow.com",
            phone="(11) 3456-7891",
            available=True,
        ),
    ]
    appointments = [
        Appointment(
            id=1,
            patient_id=1,
            doctor_id=1,
            scheduled_at=consult_at,
            appointment_type=AppointmentType.teleconsultation.value,
            status=AppointmentStatus.scheduled,
            notes="Consulta de rotina",
            created_at=now,
        ),
    ]
    store.load(patients=patients, doctors=doctors, appointments=appointments)
    logger.info("Dados de demonstração carregados")


def get_store(request: Request) -> RecordStore:
    """Dependência FastAPI: o store da app que atende a requisição."""
    return request.app.state.store
