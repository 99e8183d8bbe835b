import logging
from celery import shared_task
from flask import current_app, has_app_context
from hokies.config import get_config_class
from hokies.services.scheduler import get_scheduler

logger = logging.getLogger(__name__)

_worker_app = None


def worker_config():
    """Active config with the in-process scheduler off; beat drives the work."""
    return type("WorkerConfig", (get_config_class(),), {"SCHEDULER_AUTOSTART": False})


def _app():
    """App for the task: the active one, else one built once per worker."""
    global _worker_app
    if has_app_context():
        return current_app._get_current_object()
    if _worker_app is None:
        from hokies import create_app
        _worker_app = create_app(worker_config())
    return _worker_app


@shared_task(bind=True, max_retries=2, default_retry_delay=5)
def activate_due_drops_task(self) -> list:
    """Promote scheduled drops whose countdown has run out."""
    app = _app()
    with app.app_context():
        scheduler = get_scheduler(app)
        scheduler.sync()
        activated = scheduler.tick()
    if activated:
        logger.info("Activated drops: %s", ", ".join(activated))
    return activated


@shared_task(bind=True, max_retries=2, default_retry_delay=30)
def sweep_sold_out_drops_task(self) -> list:
    """Complete live drops whose items have all sold."""
    app = _app()
    with app.app_context():
        completed = get_scheduler(app).sweep()
    if completed:
        logger.info("Completed sold-out drops: %s", ", ".join(completed))
    return completed
