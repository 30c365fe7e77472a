# Celery instance is defined in ledger_project/celery.py
# Importing it here makes shared_task bind to this app as soon as Django starts
from .celery import celery_app

__all__ = ("celery_app",)
