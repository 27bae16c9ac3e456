#!/usr/bin/env python3
"""
Migration script to move legacy prefixed diagnosis strings onto structured
visit locations.

Older exports stored where a patient was waiting inside ``visit.diagnosis``
(``"With Pharmacy: Malaria"``, ``"Pending"``...). This script reads such a
JSON export (a list of patient records, or ``{"patients": [...]}``) and adds a
``location`` object plus ``original_diagnosis`` to every visit.

Usage:
    python scripts/migrate_legacy_diagnoses.py export.json --dry-run
    python scripts/migrate_legacy_diagnoses.py export.json --execute --output migrated.json
"""

import argparse
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add the src directory to the Python path
sys.path.insert(0, "src")

from hospitalflow.domain.entities.visit import Visit
from hospitalflow.domain.enums.workflow import PatientType


def _patient_type(raw: Optional[str]) -> Optional[PatientType]:
    if not raw:
        return None
    try:
        return PatientType(str(raw).strip().lower())
    except ValueError:
        return None


class LegacyDiagnosisMigration:
    """Handles migration of legacy diagnosis strings in an exported patient file."""

    def __init__(self, source: Path):
        self.source = source
        payload = json.loads(source.read_text(encoding="utf-8"))
        self.wrapped = isinstance(payload, dict)
        self.patients: List[Dict[str, Any]] = payload.get("patients", []) if self.wrapped else payload

    def _migrate_visit(self, raw_visit: Dict[str, Any], patient_type: Optional[PatientType]) -> Dict[str, Any]:
        diagnosis = raw_visit.get("diagnosis")
        visit = Visit.from_legacy(
            raw_visit.get("visit_id") or raw_visit.get("id") or "",
            diagnosis,
            patient_type,
        )
        migrated = dict(raw_visit)
        migrated["original_diagnosis"] = diagnosis
        migrated["location"] = {
            "department": visit.department.value,
            "diagnosis_text": visit.diagnosis_text,
        }
        return migrated

    def analyze_current_state(self) -> Counter:
        """Count where each visit would land after migration."""
        print("🔍 Analyzing export...")
        departments: Counter = Counter()
        pending = 0
        for patient in self.patients:
            patient_type = _patient_type(patient.get("patient_type") or patient.get("type"))
            for raw_visit in patient.get("visits", []):
                if "location" in raw_visit:
                    continue
                pending += 1
                migrated = self._migrate_visit(raw_visit, patient_type)
                departments[migrated["location"]["department"]] += 1

        print("📊 Analysis Results:")
        print(f"   Patients: {len(self.patients)}")
        print(f"   Visits needing migration: {pending}")
        for department, count in sorted(departments.items()):
            print(f"   {department}: {count}")
        return departments

    def dry_run(self) -> None:
        """Perform a dry run of the migration."""
        print("🧪 Performing dry run...")
        departments = self.analyze_current_state()
        if not departments:
            print("✅ No visits need migration. All visits already have a location.")
        else:
            print("🚀 Ready to migrate. Use --execute to write the migrated export.")

    def execute_migration(self, output: Path) -> None:
        """Write the migrated export to ``output``."""
        print("🚀 Starting legacy diagnosis migration...")
        updated = 0
        for patient in self.patients:
            patient_type = _patient_type(patient.get("patient_type") or patient.get("type"))
            visits = []
            for raw_visit in patient.get("visits", []):
                if "location" in raw_visit:
                    visits.append(raw_visit)
                    continue
                visits.append(self._migrate_visit(raw_visit, patient_type))
                updated += 1
            patient["visits"] = visits

        payload: Any = {"patients": self.patients} if self.wrapped else self.patients
        output.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
        print("✅ Migration completed!")
        print(f"   Updated visits: {updated}")
        print(f"   Written to: {output}")


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Migrate legacy diagnosis strings in a patient export")
    parser.add_argument("source", type=Path, help="JSON export of patient records")
    parser.add_argument("--dry-run", action="store_true", help="Perform a dry run")
    parser.add_argument("--execute", action="store_true", help="Execute the migration")
    parser.add_argument("--output", type=Path, default=None, help="Where to write the migrated export")

    args = parser.parse_args()

    if not any([args.dry_run, args.execute]):
        parser.print_help()
        return

    migration = LegacyDiagnosisMigration(args.source)
    if args.dry_run:
        migration.dry_run()
    elif args.execute:
        output = args.output or args.source.with_name(f"{args.source.stem}.migrated.json")
        migration.execute_migration(output)


if __name__ == "__main__":
    main()
