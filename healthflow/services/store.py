# healthflow/services/store.py
from __future__ import annotations
import logging
import threading
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, Iterable, List, Optional, Union
from zoneinfo import ZoneInfo

from ..exceptions import RecordNotFoundError, RecordValidationError
from ..models import Appointment, AppointmentStatus, Doctor, Patient, Statistics
from ..schemas import AppointmentIn, DoctorIn, PatientIn

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND = "Paciente não encontrado"
DOCTOR_NOT_FOUND = "Médico não encontrado"
APPOINTMENT_NOT_FOUND = "Consulta não encontrada"
INVALID_STATUS = "Status inválido"


def resolve_timezone(name: str) -> tzinfo:
    """Resolve o nome da TZ; cai para UTC se for inválido."""
    try:
        return ZoneInfo(name)
    except Exception:
        logger.warning("TZ inválida '%s'; usando UTC", name)
        return timezone.utc


class RecordStore:
    """
    Dono das três coleções em memória (pacientes, médicos, consultas).

    - Ids vêm de um contador por coleção (começa em 1, nunca reaproveita
      após delete).
    - Toda operação roda sob um único RLock: endpoints síncronos do FastAPI
      rodam num threadpool.
    - Os registros devolvidos são cópias; alterá-los não altera o store.
    - Excluir um paciente NÃO mexe nas consultas que o referenciam
      (referência pendente é permitida).
    """

    def __init__(self, tz_name: str = "UTC", clock: Optional[Callable[[], datetime]] = None):
        self._tz = resolve_timezone(tz_name)
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._lock = threading.RLock()

        self._patients: List[Patient] = []
        self._doctors: List[Doctor] = []
        self._appointments: List[Appointment] = []

        self._next_patient_id = 1
        self._next_doctor_id = 1
        self._next_appointment_id = 1

    # ------------------ internos ------------------

    def now(self) -> datetime:
        return self._clock()

    def _local_date(self, dt: datetime) -> date:
        """Data no calendário da clínica (naive = já é hora local)."""
        if dt.tzinfo is None:
            return dt.date()
        return dt.astimezone(self._tz).date()

    @staticmethod
    def _find(items: List, record_id: int) -> Optional[int]:
        for idx, item in enumerate(items):
            if item.id == record_id:
                return idx
        return None

    def load(
        self,
        patients: Iterable[Patient] = (),
        doctors: Iterable[Doctor] = (),
        appointments: Iterable[Appointment] = (),
    ) -> None:
        """
        Substitui o conteúdo do store por registros já montados (ex.: dados demo).
        Os contadores continuam depois do maior id carregado.
        Consultas precisam apontar para pacientes/médicos do mesmo lote.
        """
        patients = [p.model_copy() for p in patients]
        doctors = [d.model_copy() for d in doctors]
        appointments = [a.model_copy() for a in appointments]
        for items in (patients, doctors, appointments):
            ids = [item.id for item in items]
            if len(ids) != len(set(ids)) or any(i <= 0 for i in ids):
                raise ValueError("ids devem ser únicos e positivos")

        patient_ids = {p.id for p in patients}
        doctor_ids = {d.id for d in doctors}
        for appt in appointments:
            if appt.patient_id not in patient_ids or appt.doctor_id not in doctor_ids:
                raise ValueError(f"consulta {appt.id} referencia paciente/médico ausente")

        with self._lock:
            self._patients = patients
            self._doctors = doctors
            self._appointments = appointments
            self._next_patient_id = max((p.id for p in patients), default=0) + 1
            self._next_doctor_id = max((d.id for d in doctors), default=0) + 1
            self._next_appointment_id = max((a.id for a in appointments), default=0) + 1
        logger.info(
            "Store carregado: %d pacientes, %d médicos, %d consultas",
            len(patients), len(doctors), len(appointments),
        )

    # ------------------ pacientes ------------------

    def list_patients(self) -> List[Patient]:
        with self._lock:
            return [p.model_copy() for p in self._patients]

    def get_patient(self, patient_id: int) -> Patient:
        with self._lock:
            idx = self._find(self._patients, patient_id)
            if idx is None:
                raise RecordNotFoundError("Paciente", patient_id, PATIENT_NOT_FOUND)
            return self._patients[idx].model_copy()

    def create_patient(self, data: PatientIn) -> Patient:
        with self._lock:
            patient = Patient(
                id=self._next_patient_id,
                name=data.name,
                email=data.email,
                phone=data.phone,
                birth_date=data.birth_date,
                registered_at=self.now(),
            )
            self._next_patient_id += 1
            self._patients.append(patient)
        logger.info("Paciente criado: id=%s", patient.id)
        return patient.model_copy()

    def update_patient(self, patient_id: int, data: PatientIn) -> Patient:
        with self._lock:
            idx = self._find(self._patients, patient_id)
            if idx is None:
                logger.warning("Update de paciente inexistente: id=%s", patient_id)
                raise RecordNotFoundError("Paciente", patient_id, PATIENT_NOT_FOUND)
            # id e registered_at ficam intocados
            updated = self._patients[idx].model_copy(update={
                "name": data.name,
                "email": data.email,
                "phone": data.phone,
                "birth_date": data.birth_date,
            })
            self._patients[idx] = updated
        logger.info("Paciente atualizado: id=%s", patient_id)
        return updated.model_copy()

    def delete_patient(self, patient_id: int) -> None:
        with self._lock:
            idx = self._find(self._patients, patient_id)
            if idx is None:
                logger.warning("Delete de paciente inexistente: id=%s", patient_id)
                raise RecordNotFoundError("Paciente", patient_id, PATIENT_NOT_FOUND)
            del self._patients[idx]
        logger.info("Paciente removido: id=%s", patient_id)

    # ------------------ médicos ------------------

    def list_doctors(self) -> List[Doctor]:
        with self._lock:
            return [d.model_copy() for d in self._doctors]

    def get_doctor(self, doctor_id: int) -> Doctor:
        with self._lock:
            idx = self._find(self._doctors, doctor_id)
            if idx is None:
                raise RecordNotFoundError("Médico", doctor_id, DOCTOR_NOT_FOUND)
            return self._doctors[idx].model_copy()

    def create_doctor(self, data: DoctorIn) -> Doctor:
        with self._lock:
            doctor = Doctor(id=self._next_doctor_id, **data.model_dump())
            self._next_doctor_id += 1
            self._doctors.append(doctor)
        logger.info("Médico criado: id=%s", doctor.id)
        return doctor.model_copy()

    # ------------------ consultas ------------------

    def list_appointments(self) -> List[Appointment]:
        with self._lock:
            return [a.model_copy() for a in self._appointments]

    def get_appointment(self, appointment_id: int) -> Appointment:
        with self._lock:
            idx = self._find(self._appointments, appointment_id)
            if idx is None:
                raise RecordNotFoundError("Consulta", appointment_id, APPOINTMENT_NOT_FOUND)
            return self._appointments[idx].model_copy()

    def create_appointment(self, data: AppointmentIn) -> Appointment:
        with self._lock:
            if self._find(self._patients, data.patient_id) is None:
                logger.warning("Consulta recusada: paciente %s não existe", data.patient_id)
                raise RecordValidationError(PATIENT_NOT_FOUND, field="patient_id")
            if self._find(self._doctors, data.doctor_id) is None:
                logger.warning("Consulta recusada: médico %s não existe", data.doctor_id)
                raise RecordValidationError(DOCTOR_NOT_FOUND, field="doctor_id")

            # status do cliente é ignorado: toda consulta nasce agendada
            appt = Appointment(
                id=self._next_appointment_id,
                patient_id=data.patient_id,
                doctor_id=data.doctor_id,
                scheduled_at=data.scheduled_at,
                appointment_type=data.appointment_type,
                status=AppointmentStatus.scheduled,
                notes=data.notes,
                created_at=self.now(),
            )
            self._next_appointment_id += 1
            self._appointments.append(appt)
        logger.info(
            "Consulta criada: id=%s paciente=%s médico=%s em=%s",
            appt.id, appt.patient_id, appt.doctor_id, appt.scheduled_at.isoformat(),
        )
        return appt.model_copy()

    def transition_appointment_status(
        self, appointment_id: int, new_status: Union[str, AppointmentStatus]
    ) -> Appointment:
        """
        Troca o status. Qualquer um dos quatro status pode seguir qualquer outro;
        só valores desconhecidos são recusados.
        """
        with self._lock:
            idx = self._find(self._appointments, appointment_id)
            if idx is None:
                raise RecordNotFoundError("Consulta", appointment_id, APPOINTMENT_NOT_FOUND)
            try:
                status = AppointmentStatus(new_status)
            except ValueError:
                logger.warning("Status inválido para consulta %s: %r", appointment_id, new_status)
                raise RecordValidationError(INVALID_STATUS, field="status")

            previous = self._appointments[idx].status
            updated = self._appointments[idx].model_copy(update={"status": status})
            self._appointments[idx] = updated
        logger.info(
            "Consulta %s: %s → %s", appointment_id, previous.value, status.value
        )
        return updated.model_copy()

    # ------------------ dashboard ------------------

    def compute_statistics(self) -> Statistics:
        today = self._local_date(self.now())
        with self._lock:
            return Statistics(
                total_patients=len(self._patients),
                total_doctors=len(self._doctors),
                total_appointments=len(self._appointments),
                appointments_today=sum(
                    1 for a in self._appointments if self._local_date(a.scheduled_at) == today
                ),
                scheduled_appointments=sum(
                    1 for a in self._appointments if a.status == AppointmentStatus.scheduled
                ),
                completed_appointments=sum(
                    1 for a in self._appointments if a.status == AppointmentStatus.completed
                ),
            )
