"""
Tasks package for the salon waitlist engine.

This package contains the Celery app and the periodic waitlist jobs:
- app: Celery app factory bound to app.config.celery_config
- waitlist_tasks: offer expiry, cooldown reactivation and reminder tasks
"""
