import datetime as dt
from concurrent.futures import ThreadPoolExecutor
from zoneinfo import ZoneInfo

import pytest

from healthflow.exceptions import RecordNotFoundError, RecordValidationError
from healthflow.models import AppointmentStatus
from healthflow.schemas import AppointmentIn, DoctorIn, PatientIn
from healthflow.services.store import RecordStore

# Fixtures (clock, store, seeded_store) provided by tests/conftest.py

SP = ZoneInfo("America/Sao_Paulo")


def _patient(name: str = "João Silva") -> PatientIn:
    return PatientIn(
        name=name,
        email="joao.silva@email.com",
        phone="(11) 98765-4321",
        birth_date=dt.date(1985, 5, 15),
    )


def _doctor(name: str = "Dr. Carlos Mendes") -> DoctorIn:
    return DoctorIn(
        name=name,
        license_number="123456-SP",
        specialty="Cardiologia",
        email="carlos.mendes@healthflow.com",
        phone="(11) 3456-7890",
    )


def _appointment(patient_id: int = 1, doctor_id: int = 1, **kwargs) -> AppointmentIn:
    kwargs.setdefault("scheduled_at", dt.datetime(2026, 10, 20, 14, 0, tzinfo=SP))
    return AppointmentIn(patient_id=patient_id, doctor_id=doctor_id, **kwargs)


class TestIdAssignment:
    @pytest.mark.parametrize("collection", ["patients", "doctors", "appointments"])
    def test_ids_are_sequential_from_one(self, store: RecordStore, collection: str) -> None:
        if collection == "patients":
            create = lambda i: store.create_patient(_patient(f"P{i}"))
        elif collection == "doctors":
            create = lambda i: store.create_doctor(_doctor(f"Dr. {i}"))
        else:
            store.create_patient(_patient())
            store.create_doctor(_doctor())
            create = lambda i: store.create_appointment(_appointment())

        ids = [create(i).id for i in range(5)]

        assert ids == [1, 2, 3, 4, 5]


class TestPatients:
    def test_create_then_get_returns_equal_record(self, store: RecordStore) -> None:
        created = store.create_patient(_patient())

        assert store.get_patient(created.id) == created

    def test_create_stamps_registration_time(self, store: RecordStore, clock) -> None:
        created = store.create_patient(_patient())

        assert created.registered_at == clock()

    def test_list_keeps_insertion_order(self, store: RecordStore) -> None:
        store.create_patient(_patient("B"))
        store.create_patient(_patient("A"))

        assert [p.name for p in store.list_patients()] == ["B", "A"]

    def test_get_unknown_raises_not_found(self, store: RecordStore) -> None:
        with pytest.raises(RecordNotFoundError, match="Paciente não encontrado"):
            store.get_patient(99)

    def test_update_overwrites_fields_but_keeps_identity(self, store: RecordStore) -> None:
        created = store.create_patient(_patient())

        updated = store.update_patient(
            created.id,
            PatientIn(name="João S.", email="j@x.com", phone="1", birth_date=dt.date(1985, 5, 16)),
        )

        assert updated.id == created.id
        assert updated.registered_at == created.registered_at
        assert updated.name == "João S."
        assert updated.birth_date == dt.date(1985, 5, 16)
        assert store.get_patient(created.id) == updated

    def test_update_unknown_raises_not_found(self, store: RecordStore) -> None:
        with pytest.raises(RecordNotFoundError):
            store.update_patient(7, _patient())

    def test_delete_then_get_raises_not_found(self, store: RecordStore) -> None:
        created = store.create_patient(_patient())

        store.delete_patient(created.id)

        with pytest.raises(RecordNotFoundError):
            store.get_patient(created.id)

    def test_delete_unknown_leaves_collection_unchanged(self, store: RecordStore) -> None:
        store.create_patient(_patient())

        with pytest.raises(RecordNotFoundError):
            store.delete_patient(42)

        assert len(store.list_patients()) == 1

    def test_ids_are_not_reused_after_delete(self, store: RecordStore) -> None:
        store.create_patient(_patient("A"))
        second = store.create_patient(_patient("B"))
        store.delete_patient(second.id)

        assert store.create_patient(_patient("C")).id == 3

    def test_returned_records_are_copies(self, store: RecordStore) -> None:
        created = store.create_patient(_patient())
        created.name = "Outro"

        assert store.get_patient(created.id).name == "João Silva"


class TestDoctors:
    def test_create_and_get(self, store: RecordStore) -> None:
        doctor = store.create_doctor(_doctor())

        assert doctor.id == 1
        assert doctor.available is True
        assert store.get_doctor(1) == doctor
        assert store.list_doctors() == [doctor]

    def test_get_unknown_raises_not_found(self, store: RecordStore) -> None:
        with pytest.raises(RecordNotFoundError, match="Médico não encontrado"):
            store.get_doctor(1)


class TestAppointments:
    @pytest.fixture
    def populated(self, store: RecordStore) -> RecordStore:
        store.create_patient(_patient())
        store.create_doctor(_doctor())
        return store

    def test_create_forces_scheduled_status(self, populated: RecordStore) -> None:
        appt = populated.create_appointment(_appointment(status="Completed"))

        assert appt.id == 1
        assert appt.status == AppointmentStatus.scheduled
        assert appt.appointment_type == "Teleconsultation"

    def test_create_stamps_creation_time(self, populated: RecordStore, clock) -> None:
        appt = populated.create_appointment(_appointment(notes="Retorno"))

        assert appt.created_at == clock()
        assert appt.notes == "Retorno"

    def test_unknown_patient_is_rejected(self, populated: RecordStore) -> None:
        with pytest.raises(RecordValidationError, match="Paciente não encontrado") as exc:
            populated.create_appointment(_appointment(patient_id=9))

        assert exc.value.field == "patient_id"
        assert populated.list_appointments() == []

    def test_unknown_doctor_is_rejected(self, populated: RecordStore) -> None:
        with pytest.raises(RecordValidationError, match="Médico não encontrado"):
            populated.create_appointment(_appointment(doctor_id=9))

        assert populated.list_appointments() == []

    def test_rejected_creation_does_not_consume_an_id(self, populated: RecordStore) -> None:
        with pytest.raises(RecordValidationError):
            populated.create_appointment(_appointment(patient_id=9))

        assert populated.create_appointment(_appointment()).id == 1

    def test_get_unknown_raises_not_found(self, populated: RecordStore) -> None:
        with pytest.raises(RecordNotFoundError, match="Consulta não encontrada"):
            populated.get_appointment(1)

    def test_deleting_patient_leaves_dangling_reference(self, populated: RecordStore) -> None:
        appt = populated.create_appointment(_appointment())

        populated.delete_patient(1)

        assert populated.get_appointment(appt.id).patient_id == 1


class TestStatusTransition:
    @pytest.fixture
    def appointment_id(self, store: RecordStore) -> int:
        store.create_patient(_patient())
        store.create_doctor(_doctor())
        return store.create_appointment(_appointment()).id

    @pytest.mark.parametrize("target", ["InProgress", "Completed", "Cancelled", "Scheduled"])
    def test_accepts_every_known_status(
        self, store: RecordStore, appointment_id: int, target: str
    ) -> None:
        appt = store.transition_appointment_status(appointment_id, target)

        assert appt.status.value == target
        assert store.get_appointment(appointment_id).status.value == target

    def test_any_status_may_follow_any_other(self, store: RecordStore, appointment_id: int) -> None:
        store.transition_appointment_status(appointment_id, "Cancelled")

        appt = store.transition_appointment_status(appointment_id, "Scheduled")

        assert appt.status == AppointmentStatus.scheduled

    def test_invalid_status_leaves_appointment_unchanged(
        self, store: RecordStore, appointment_id: int
    ) -> None:
        with pytest.raises(RecordValidationError, match="Status inválido"):
            store.transition_appointment_status(appointment_id, "Invalid")

        assert store.get_appointment(appointment_id).status == AppointmentStatus.scheduled

    def test_unknown_appointment_raises_not_found(self, store: RecordStore) -> None:
        with pytest.raises(RecordNotFoundError):
            store.transition_appointment_status(5, "Completed")


class TestStatistics:
    def test_empty_store_reports_zeros(self, store: RecordStore) -> None:
        stats = store.compute_statistics()

        assert stats.model_dump() == {
            "total_patients": 0,
            "total_doctors": 0,
            "total_appointments": 0,
            "appointments_today": 0,
            "scheduled_appointments": 0,
            "completed_appointments": 0,
        }

    def test_today_uses_clinic_calendar(self, store: RecordStore) -> None:
        store.create_patient(_patient())
        store.create_doctor(_doctor())
        today_slots = [
            dt.datetime(2026, 10, 17, 23, 30, tzinfo=SP),
            # 22:00 em São Paulo, ainda dia 17
            dt.datetime(2026, 10, 18, 1, 0, tzinfo=dt.timezone.utc),
            # naive = hora local
            dt.datetime(2026, 10, 17, 8, 0),
        ]
        other_slots = [
            dt.datetime(2026, 10, 18, 9, 0, tzinfo=SP),
            dt.datetime(2026, 10, 16, 23, 59),
        ]
        for slot in today_slots + other_slots:
            store.create_appointment(_appointment(scheduled_at=slot))

        assert store.compute_statistics().appointments_today == 3

    def test_seeded_scenario(self, seeded_store: RecordStore) -> None:
        appt = seeded_store.create_appointment(
            _appointment(patient_id=2, doctor_id=2, scheduled_at=dt.datetime(2026, 10, 17, 15, 0, tzinfo=SP))
        )
        assert appt.id == 2
        assert appt.status == AppointmentStatus.scheduled

        done = seeded_store.transition_appointment_status(2, "Completed")
        assert done.id == 2
        assert done.status == AppointmentStatus.completed

        stats = seeded_store.compute_statistics()
        assert stats.total_patients == 2
        assert stats.total_doctors == 2
        assert stats.total_appointments == 2
        assert stats.appointments_today == 1
        assert stats.scheduled_appointments == 1
        assert stats.completed_appointments == 1


class TestConcurrency:
    def test_concurrent_creations_get_unique_ids(self, store: RecordStore) -> None:
        with ThreadPoolExecutor(max_workers=8) as pool:
            created = list(pool.map(lambda i: store.create_patient(_patient(f"P{i}")), range(200)))

        assert sorted(p.id for p in created) == list(range(1, 201))
        assert len(store.list_patients()) == 200
