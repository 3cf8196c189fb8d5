"""
Shared fixtures.
"""

import json

import pytest

SAMPLE_DATA = {
    "barbers": [
        {
            "id": "b1",
            "name": "joao",
            "work_days": [1, 2, 3, 4, 5, 6],
            "schedule_config": {
                "workHours": {"start": "09:00", "end": "19:00"},
                "lunchBreak": {"start": "12:00", "end": "13:00"},
            },
        },
        {
            "id": "b2",
            "name": "pedro",
            "work_hours_start": "10:00",
            "work_hours_end": "14:00",
        },
    ],
    "bookings": [
        {"barber_id": "b1", "date": "2026-10-20", "start_time": "10:00:00", "duration": 45, "status": "confirmado"},
        {"barber_id": "b1", "date": "2026-10-20", "start_time": "15:00:00", "duration": 30, "status": "cancelado"},
        {"barber_id": "b1", "date": "2026-10-20", "start_time": "bad", "duration": 30},
        {"barber_id": "b1", "date": "2026-10-21", "start_time": "09:00:00", "duration": 30},
        {"barber_id": "b2", "date": "2026-10-20", "start_time": "11:00:00", "duration": 60},
    ],
    "overrides": [
        {"barber_id": "b1", "date": "2026-10-20", "type": "custom_slot", "start_time": "17:00", "end_time": "18:00"},
        {"barber_id": "b1", "date": "2026-10-20", "type": "custom_slot", "start_time": "18:00"},
        {"barber_id": "b2", "date": "2026-10-22", "type": "full_day", "reason": "Dia Bloqueado"},
    ],
}


@pytest.fixture
def sample_data():
    return json.loads(json.dumps(SAMPLE_DATA))


@pytest.fixture
def data_file(tmp_path, sample_data):
    path = tmp_path / "bookings.json"
    path.write_text(json.dumps(sample_data), encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path, data_file):
    path = tmp_path / "config.yaml"
    path.write_text(
        "timezone: America/Sao_Paulo\n"
        "source:\n"
        "  kind: json\n"
        f"  data_file: {data_file.name}\n"
        "defaults:\n"
        "  slot_interval_minutes: 30\n"
        "  service_duration_minutes: 30\n"
        "barbers:\n"
        "  - id: b1\n"
        "    name: joao\n"
        "  - id: b2\n"
        "    name: pedro\n",
        encoding="utf-8",
    )
    return path
