import logging

from django.db import transaction

logger = logging.getLogger(__name__)


def dispatch_task(task, *args, fallback_sync=True, **kwargs):
    """
    Enqueue a Celery task, running it in-process when the broker is unreachable.
    Returns True when queued or the in-process run succeeds, else False.
    """
    task_name = getattr(task, "name", str(task))
    try:
        task.delay(*args, **kwargs)
        return True
    except Exception as queue_error:
        logger.error(
            "Failed to queue task %s with args=%s: %s",
            task_name,
            args,
            queue_error,
            exc_info=True,
        )
        if not fallback_sync:
            return False

    try:
        result = task.apply(args=args, kwargs=kwargs)
        if result.failed():
            logger.error("In-process run of task %s failed: %s", task_name, result.result)
            return False
        return True
    except Exception as sync_error:
        logger.error("In-process run of task %s crashed: %s", task_name, sync_error, exc_info=True)
        return False


def dispatch_on_commit(task, *args, **kwargs):
    """
    Defer dispatch_task until the surrounding transaction commits, so work that
    touches the filesystem never runs for a write that was rolled back.
    """
    transaction.on_commit(lambda: dispatch_task(task, *args, **kwargs))
