"""Celery configuration for the waitlist background jobs."""
from app.config.settings import settings

# Broker settings
broker_url = settings.CELERY_BROKER_URL
result_backend = settings.CELERY_RESULT_BACKEND

# Task settings
task_serializer = 'json'
accept_content = ['json']
result_serializer = 'json'
timezone = 'UTC'
enable_utc = True

# Task routing
task_routes = {
    'app.tasks.waitlist_tasks.*': {'queue': 'waitlist'},
}

# Task execution settings
task_acks_late = True
worker_prefetch_multiplier = 1
task_always_eager = False  # Set to True for testing

# Result settings
result_expires = 3600  # 1 hour

# Worker settings
worker_max_tasks_per_child = 1000
worker_disable_rate_limits = False

# Beat settings (for periodic tasks). Runs may overlap; the jobs rely on
# status-guarded updates rather than locks, so overlapping ticks are safe.
beat_schedule = {
    'expire-waitlist-offers': {
        'task': 'app.tasks.waitlist_tasks.expire_waitlist_offers',
        'schedule': settings.WAITLIST_EXPIRY_INTERVAL_SECONDS,
    },
    'reactivate-waitlist-cooldowns': {
        'task': 'app.tasks.waitlist_tasks.reactivate_waitlist_cooldowns',
        'schedule': settings.WAITLIST_REACTIVATION_INTERVAL_SECONDS,
    },
    'send-waitlist-offer-reminders': {
        'task': 'app.tasks.waitlist_tasks.send_waitlist_offer_reminders',
        'schedule': settings.WAITLIST_REMINDER_INTERVAL_SECONDS,
    },
}

# Logging
worker_log_format = '[%(asctime)s: %(levelname)s/%(processName)s] %(message)s'
worker_task_log_format = '[%(asctime)s: %(levelname)s/%(processName)s][%(task_name)s(%(task_id)s)] %(message)s'

# Error handling
task_reject_on_worker_lost = True

# Monitoring
worker_send_task_events = True
task_send_sent_event = True
