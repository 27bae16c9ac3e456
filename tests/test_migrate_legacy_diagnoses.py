"""
Tests for the legacy diagnosis export migration script.
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "scripts"))

from migrate_legacy_diagnoses import LegacyDiagnosisMigration  # noqa: E402

EXPORT = {
    "patients": [
        {
            "patient_id": "P-1001",
            "patient_type": "cash",
            "visits": [
                {"visit_id": "V-P-1001-1", "diagnosis": "With Pharmacy: Malaria"},
                {"visit_id": "V-P-1001-2", "diagnosis": "Pending"},
            ],
        },
        {
            "patient_id": "P-1002",
            "patient_type": "HMO",
            "visits": [
                {"visit_id": "V-P-1002-1", "diagnosis": "Hypertension"},
                {"visit_id": "V-P-1002-2", "diagnosis": "Cancelled"},
                {
                    "visit_id": "V-P-1002-3",
                    "diagnosis": "Resolved",
                    "location": {"department": "completed", "diagnosis_text": "Resolved"},
                },
            ],
        },
    ]
}


def _write_export(tmp_path):
    source = tmp_path / "export.json"
    source.write_text(json.dumps(EXPORT), encoding="utf-8")
    return source


def test_analyze_counts_destinations(tmp_path):
    migration = LegacyDiagnosisMigration(_write_export(tmp_path))
    departments = migration.analyze_current_state()
    assert departments == {"pharmacy": 1, "doctor_queue": 1, "hmo_desk": 1, "completed": 1}


def test_execute_writes_locations(tmp_path):
    output = tmp_path / "migrated.json"
    LegacyDiagnosisMigration(_write_export(tmp_path)).execute_migration(output)

    patients = json.loads(output.read_text(encoding="utf-8"))["patients"]
    cash_visits, hmo_visits = patients[0]["visits"], patients[1]["visits"]

    assert cash_visits[0]["location"] == {"department": "pharmacy", "diagnosis_text": "Malaria"}
    assert cash_visits[0]["original_diagnosis"] == "With Pharmacy: Malaria"
    assert cash_visits[1]["location"] == {"department": "doctor_queue", "diagnosis_text": ""}
    assert hmo_visits[0]["location"]["department"] == "hmo_desk"
    assert hmo_visits[1]["location"] == {"department": "completed", "diagnosis_text": "Cancelled"}
    assert "original_diagnosis" not in hmo_visits[2]


def test_plain_list_export_stays_a_list(tmp_path):
    source = tmp_path / "list.json"
    source.write_text(json.dumps(EXPORT["patients"]), encoding="utf-8")
    output = tmp_path / "out.json"

    LegacyDiagnosisMigration(source).execute_migration(output)
    assert isinstance(json.loads(output.read_text(encoding="utf-8")), list)
