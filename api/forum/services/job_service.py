"""
Job service - a database backed queue for background work.

Jobs are rows in ``scheduled_job`` with a name and JSON arguments. Handlers
register themselves with ``@job("name")`` (see ``forum.services.jobs``) and
are executed by ``run_due_jobs`` from the worker script.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlmodel import Session, select

from forum.models.models import ScheduledJob, JobStatus

logger = logging.getLogger(__name__)

JOB_HANDLERS: Dict[str, Callable[..., Any]] = {}


def job(name: str):
    """Register a function as the handler of a named job."""
    def decorator(func):
        JOB_HANDLERS[name] = func
        return func
    return decorator


def enqueue(session: Session, job_name: str, **args) -> ScheduledJob:
    """Queue a job to run as soon as a worker picks it up."""
    return enqueue_at(session, datetime.utcnow(), job_name, **args)


def enqueue_at(session: Session, run_at: datetime, job_name: str, **args) -> ScheduledJob:
    """
    Queue a job to run at a given time.

    The job is added to the session; it is persisted with the caller's commit.
    """
    scheduled = ScheduledJob(job_name=job_name, args=dict(args), run_at=run_at)
    session.add(scheduled)
    logger.info(f"Scheduled job {job_name} at {run_at.isoformat()} with {args}")
    return scheduled


def cancel_scheduled_job(session: Session, job_name: str, **args) -> int:
    """
    Cancel pending jobs of a name whose arguments include all given ones.

    Returns:
        Number of jobs cancelled
    """
    pending = session.exec(
        select(ScheduledJob).where(
            ScheduledJob.job_name == job_name,
            ScheduledJob.status == JobStatus.PENDING.value,
        )
    ).all()

    cancelled = 0
    for scheduled in pending:
        job_args = scheduled.args or {}
        if all(job_args.get(key) == value for key, value in args.items()):
            scheduled.status = JobStatus.CANCELLED.value
            scheduled.finished_at = datetime.utcnow()
            session.add(scheduled)
            cancelled += 1

    if cancelled:
        logger.info(f"Cancelled {cancelled} pending {job_name} job(s) matching {args}")
    return cancelled


def pending_jobs(session: Session, job_name: Optional[str] = None) -> List[ScheduledJob]:
    """Pending jobs, oldest run time first."""
    query = select(ScheduledJob).where(ScheduledJob.status == JobStatus.PENDING.value)
    if job_name:
        query = query.where(ScheduledJob.job_name == job_name)
    query = query.order_by(ScheduledJob.run_at, ScheduledJob.id)  # type: ignore[arg-type]
    return list(session.exec(query).all())


def run_due_jobs(session: Session, now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Execute every pending job whose run time has passed.

    A failing job is marked failed with its error and does not stop the others.

    Returns:
        Dict with counts: {'done': int, 'failed': int}
    """
    # Handlers register on import
    from forum.services import jobs  # noqa: F401

    now = now or datetime.utcnow()
    due_ids = [
        scheduled.id for scheduled in pending_jobs(session)
        if scheduled.run_at <= now
    ]

    done = 0
    failed = 0
    for job_id in due_ids:
        scheduled = session.get(ScheduledJob, job_id)
        if scheduled is None or scheduled.status != JobStatus.PENDING.value:
            continue

        handler = JOB_HANDLERS.get(scheduled.job_name)
        job_name = scheduled.job_name
        job_args = dict(scheduled.args or {})
        try:
            if handler is None:
                raise LookupError(f"No handler registered for job {job_name}")
            handler(session, **job_args)
        except Exception as e:
            session.rollback()
            logger.error(f"Job {job_name} ({job_id}) failed: {e}", exc_info=True)
            scheduled = session.get(ScheduledJob, job_id)
            scheduled.status = JobStatus.FAILED.value
            scheduled.error = str(e)
            failed += 1
        else:
            scheduled = session.get(ScheduledJob, job_id)
            scheduled.status = JobStatus.DONE.value
            done += 1
        scheduled.finished_at = datetime.utcnow()
        session.add(scheduled)
        session.commit()

    if due_ids:
        logger.info(f"Ran {len(due_ids)} due job(s): {done} done, {failed} failed")
    return {'done': done, 'failed': failed}
