"""Example: drive the service layer directly, without Flask.

Controllers are thin; every rule lives in the services wired by the container.
"""

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_operations.hr_operations.container import build_container

logger = logging.getLogger("example_usage")


def main():
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        settings={name: getattr(settings, name) for name in dir(settings) if name.isupper()},
    )

    for view in container.calendar_service.week(actor_id=1, employee_id=1):
        schedule = view.display_schedule
        shift = f"{schedule.start_time}-{schedule.end_time}" if schedule else "-"
        logger.info("%s %-11s %s", view.work_date.isoformat(), view.status.value, shift)

    pending = container.adjustment_workflow.list_pending_for_approver(approver_id=1)
    logger.info("%d adjustment(s) waiting for a decision", len(pending))


if __name__ == "__main__":
    main()
