import os
import logging
from celery import Celery
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'h2o_api.settings')

app = Celery("h2o_api")

# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

logger = logging.getLogger(__name__)


# Signal handlers for task lifecycle logging
from celery.signals import task_prerun, task_postrun, task_failure


@task_prerun.connect
def task_on_prerun(sender=None, task_id=None, task=None, **kwargs):
    """Log task before execution starts"""
    logger.info(f"[CELERY] Task {task.name} (ID: {task_id}) STARTING")


@task_postrun.connect
def task_on_postrun(sender=None, task_id=None, task=None, result=None, **kwargs):
    """Log task after execution"""
    logger.info(f"[CELERY] Task {task.name} (ID: {task_id}) COMPLETED - Result: {result}")


@task_failure.connect
def task_on_failure(sender=None, task_id=None, exception=None, **kwargs):
    """Log task failures"""
    logger.error(f"[CELERY] Task {sender} (ID: {task_id}) FAILED - Exception: {exception}", exc_info=True)
