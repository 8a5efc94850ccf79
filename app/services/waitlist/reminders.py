"""Sends one reminder per pending offer shortly before its claim token expires."""
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol, runtime_checkable
import hashlib
import logging
import secrets

from app.models import LifecycleReason, WaitlistEntry, WaitlistOffer, WaitlistStatus
from app.schemas.waitlist import ReminderDelivery, ReminderRunResult
from app.services.waitlist.notifier import build_collaborator
from app.services.waitlist.store import WaitlistStore
from app.services.waitlist.transitions import LifecycleLog, utcnow

logger = logging.getLogger(__name__)

NO_CONTACT_CHANNEL = "No customer contact channel"
DELIVERY_FAILED = "Reminder delivery failed"


@runtime_checkable
class ReminderSender(Protocol):
    """Delivers the reminder (SMS, email, ...) carrying claim links built from ``token``."""

    def send_reminder(self, offer: WaitlistOffer, entry: WaitlistEntry, token: str) -> ReminderDelivery:
        ...


def issue_claim_token() -> tuple:
    """Fresh claim token and the SHA-256 hex digest stored in place of it."""
    token = secrets.token_hex(24)
    return token, hashlib.sha256(token.encode()).hexdigest()


def load_reminder_sender(dotted_path: Optional[str]) -> Optional[ReminderSender]:
    if not dotted_path:
        return None
    return build_collaborator(dotted_path)


class OfferReminderDispatcher:
    """
    Reminds customers whose offer is about to lapse.

    Each offer gets at most one reminder: the send is preceded by a guarded
    update that sets ``reminder_sent_at`` only while the offer is still
    pending and unreminded. The reminder re-issues the claim token, so only
    links from the latest message work.

    The new token hash is stored together with ``reminder_sent_at`` before
    the send. If the send then fails, the links from the original offer
    message no longer work and the offer is not reminded again. It still
    expires normally at ``token_expires_at``.
    """

    def __init__(
        self,
        store: WaitlistStore,
        sender: ReminderSender,
        lifecycle_log: LifecycleLog,
        clock: Callable[[], datetime] = utcnow,
        lead_minutes: int = 10,
    ):
        self.store = store
        self.sender = sender
        self.lifecycle_log = lifecycle_log
        self.clock = clock
        self.lead_minutes = lead_minutes

    def process_due_reminders(self, max_rows: int = 200) -> ReminderRunResult:
        result = ReminderRunResult()
        now = self.clock()
        window_end = now + timedelta(minutes=self.lead_minutes)

        try:
            offers = self.store.fetch_offers_due_for_reminder(now, window_end, max_rows)
        except Exception as e:
            logger.warning(f"Failed to load waitlist reminder candidates: {e}")
            result.errors = 1
            return result

        if not offers:
            return result

        for offer in offers:
            result.processed += 1
            try:
                self._remind(offer, result)
            except Exception as e:
                result.errors += 1
                logger.warning(
                    f"Failed processing waitlist reminder for offer {offer.id}: {e}",
                    extra={"offer_id": offer.id, "salon_id": offer.salon_id},
                )

        logger.info(
            f"Processed waitlist offer reminders: processed={result.processed} "
            f"sent={result.sent} errors={result.errors}",
            extra=result.model_dump(),
        )
        return result

    def _remind(self, offer: WaitlistOffer, result: ReminderRunResult) -> None:
        entry = self.store.get_entry(offer.waitlist_entry_id)
        if entry is None:
            result.errors += 1
            logger.warning(
                f"Waitlist entry {offer.waitlist_entry_id} missing for offer {offer.id}",
                extra={"offer_id": offer.id},
            )
            return

        if not entry.has_contact_channel:
            # Claim the reminder slot anyway so the offer is not picked up again
            self.store.mark_reminder_sent(offer.id, self.clock(), last_error=NO_CONTACT_CHANNEL)
            return

        token, token_hash = issue_claim_token()
        if not self.store.mark_reminder_sent(offer.id, self.clock(), token_hash=token_hash):
            return

        delivery = self.sender.send_reminder(offer, entry, token)

        self.lifecycle_log.record(
            offer.waitlist_entry_id,
            offer.salon_id,
            WaitlistStatus.NOTIFIED.value,
            WaitlistStatus.NOTIFIED.value,
            LifecycleReason.OFFER_REMINDER_SENT.value,
            {
                "offer_id": offer.id,
                "sms_sent": delivery.sms_sent,
                "email_sent": delivery.email_sent,
            },
        )

        if delivery.delivered:
            result.sent += 1
            return

        result.errors += 1
        self.store.record_offer_error(offer.id, DELIVERY_FAILED, self.clock())
