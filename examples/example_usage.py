"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the rules live in the store, ledger and services.
"""

import importlib

from face_attendance.container import build_container
from face_attendance.settings import get_settings_module


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    svc = container.attendance_service

    for identity in svc.list_identities():
        print(identity.to_dict(), svc.check_status(identity.identity_id).to_dict())

    print(container.report_service.export_csv(svc.list_attendance()))


if __name__ == "__main__":
    main()
