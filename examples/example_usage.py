"""Example: use the service layer directly (without Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib
import sys

from config import get_settings_module

from src.classroom_attendance.classroom_attendance.container import build_container


def main():
    roll_number = sys.argv[1] if len(sys.argv) > 1 else "21CS001"
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone=settings.TIMEZONE)

    feed = container.notification_service.get_notifications(roll_number)
    print(feed.to_dict())
    print([row.to_dict() for row in container.history_service.get_history(roll_number)])


if __name__ == "__main__":
    main()
