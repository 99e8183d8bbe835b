"""Countdown driver for scheduled drops.

Keeps an in-memory map of drop id -> scheduled time for display, armed and
disarmed by the drop signals. Each tick promotes due drops read from the
database.
"""
import atexit
import logging
import threading
import time
from flask import current_app
from models.drop import Drop, DropStatus
from hokies.metrics import SCHEDULER_FAILURES
from hokies.utils.clock import utcnow, isoformat
from hokies.utils.db import transactional
from . import drops as drop_service

logger = logging.getLogger(__name__)


def countdown_parts(target, now):
    """Split the time left until ``target`` into display units."""
    remaining = (target - now).total_seconds()
    if remaining <= 0:
        return {"days": 0, "hours": 0, "minutes": 0, "seconds": 0, "total_seconds": 0, "live_now": True}
    total = int(remaining)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return {
        "days": days,
        "hours": hours,
        "minutes": minutes,
        "seconds": seconds,
        "total_seconds": total,
        "live_now": False,
    }


class DropScheduler:
    def __init__(self, app=None):
        self.app = None
        self._countdowns = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        app.extensions["drop_scheduler"] = self
        drop_service.drop_status_changed.connect(self._on_status_changed, sender=app)
        drop_service.drop_deleted.connect(self._on_deleted, sender=app)
        atexit.register(self.stop)

    # -- countdown map

    @property
    def countdowns(self):
        with self._lock:
            return dict(self._countdowns)

    def arm(self, drop_id, when):
        with self._lock:
            self._countdowns[drop_id] = when
        logger.debug("Countdown armed for drop %s at %s", drop_id, when)

    def disarm(self, drop_id):
        with self._lock:
            removed = self._countdowns.pop(drop_id, None)
        if removed is not None:
            logger.debug("Countdown disarmed for drop %s", drop_id)

    def _on_status_changed(self, sender, drop_id, new_status, scheduled_date, **kwargs):
        if new_status is DropStatus.SCHEDULED and scheduled_date is not None:
            self.arm(drop_id, scheduled_date)
        else:
            self.disarm(drop_id)

    def _on_deleted(self, sender, drop_id, **kwargs):
        self.disarm(drop_id)

    def sync(self):
        """Rebuild the countdown map from the database. Needs an app context."""
        rows = Drop.query.filter_by(status=DropStatus.SCHEDULED).all()
        fresh = {d.id: d.scheduled_date for d in rows if d.scheduled_date is not None}
        with self._lock:
            self._countdowns = fresh
        return len(fresh)

    def due(self, now):
        """Scheduled drops whose date has passed, read from the database.

        The countdown map only feeds the display.
        """
        rows = (
            Drop.query.filter(Drop.status == DropStatus.SCHEDULED, Drop.scheduled_date <= now)
            .order_by(Drop.scheduled_date)
            .all()
        )
        return [(d.id, d.scheduled_date) for d in rows]

    def _drop_stale(self, now, keep):
        with self._lock:
            stale = [drop_id for drop_id, when in self._countdowns.items() if when <= now and drop_id not in keep]
            for drop_id in stale:
                del self._countdowns[drop_id]
        return stale

    # -- work

    def tick(self, now=None):
        """Activate every scheduled drop whose date has passed. Needs an app context.

        Each activation runs in its own transaction. A failed one is re-armed
        so the next tick tries again.
        """
        now = now or utcnow()
        activated = []
        due = self.due(now)
        self._drop_stale(now, {drop_id for drop_id, _ in due})
        for drop_id, when in due:
            try:
                with transactional("Scheduled drop activation failed"):
                    changed = drop_service.activate_scheduled_drop(drop_id, now=now)
            except Exception:
                SCHEDULER_FAILURES.labels("activate").inc()
                logger.warning("Activation of drop %s failed, retrying on next tick", drop_id)
                self.arm(drop_id, when)
                continue
            if changed:
                activated.append(drop_id)
            else:
                self.disarm(drop_id)
        return activated

    def sweep(self, now=None):
        """Complete sold-out live drops and resync countdowns. Needs an app context."""
        now = now or utcnow()
        try:
            with transactional("Sold-out sweep failed"):
                completed = drop_service.complete_sold_out_drops(now=now)
        except Exception:
            SCHEDULER_FAILURES.labels("sweep").inc()
            logger.warning("Sold-out sweep failed, retrying on next sweep")
            return []
        self.sync()
        return completed

    def snapshot(self, now=None):
        now = now or utcnow()
        with self._lock:
            entries = sorted(self._countdowns.items(), key=lambda kv: kv[1])
        return [
            {"drop_id": drop_id, "scheduled_date": isoformat(when), **countdown_parts(when, now)}
            for drop_id, when in entries
        ]

    # -- background thread

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="drop-scheduler", daemon=True)
        self._thread.start()
        logger.info("Drop scheduler started")

    def stop(self, timeout=5):
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread.is_alive():
            thread.join(timeout)
            logger.info("Drop scheduler stopped")

    def _run(self):
        interval = self.app.config.get("SCHEDULER_DISPLAY_INTERVAL", 1)
        sweep_every = self.app.config.get("SCHEDULER_SWEEP_INTERVAL", 30)
        try:
            with self.app.app_context():
                self.sync()
        except Exception:
            logger.exception("Initial countdown sync failed")
        last_sweep = time.monotonic()
        while not self._stop.wait(interval):
            try:
                with self.app.app_context():
                    self.tick()
                    if time.monotonic() - last_sweep >= sweep_every:
                        self.sweep()
                        last_sweep = time.monotonic()
            except Exception:
                logger.exception("Drop scheduler loop error")


def get_scheduler(app=None) -> DropScheduler:
    app = app or current_app
    return app.extensions["drop_scheduler"]
