"""
Services package for the salon waitlist engine.

- waitlist: offer expiry, cooldown reactivation and offer reminders
"""

# IMPORTANT: Do not eager-import subpackages or modules here.
# Import services explicitly where needed (e.g., `from app.services.waitlist import reactivate_cooldown_entries`).

__all__: list[str] = []
