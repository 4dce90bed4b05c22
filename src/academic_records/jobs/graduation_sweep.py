"""Background scheduler for the nightly graduation sweep."""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from ..core.config import get_settings
from ..core.database import SessionLocal
from ..services.workflow_service import sweep_graduations

logger = logging.getLogger(__name__)

_scheduler = AsyncIOScheduler(timezone="UTC")


async def _execute_graduation_sweep() -> None:
    session = SessionLocal()
    try:
        summary = sweep_graduations(session)
        session.commit()
        logger.info("graduation sweep completed: %s", summary)
    except Exception:  # pragma: no cover - safeguard for background job
        session.rollback()
        logger.exception("graduation sweep job failed")
        raise
    finally:
        session.close()


def register_scheduler(app: FastAPI) -> None:
    """Attach APScheduler lifecycle hooks to the FastAPI app."""

    @app.on_event("startup")
    async def start_scheduler() -> None:
        if not _scheduler.running:
            _scheduler.add_job(
                _execute_graduation_sweep,
                "cron",
                hour=get_settings().graduation_sweep_hour,
                minute=0,
                id="graduation_sweep",
                misfire_grace_time=3600,
                replace_existing=True,
            )
            _scheduler.start()
            logger.info("graduation sweep scheduler started")

    @app.on_event("shutdown")
    async def shutdown_scheduler() -> None:
        if _scheduler.running:
            _scheduler.shutdown(wait=False)
            logger.info("graduation sweep scheduler stopped")


def run_sweep_once(required_credits: int | None = None) -> dict[str, int]:
    """Convenience helper to run the sweep synchronously for manual testing."""

    session = SessionLocal()
    try:
        summary = sweep_graduations(session, required_credits=required_credits)
        session.commit()
        return summary
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
