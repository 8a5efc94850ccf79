"""Expires timed-out waitlist offers, applies cooldown penalties and chains freed slots."""
from datetime import datetime, timedelta
from typing import Callable
import logging

from app.models import LifecycleReason, WaitlistOffer, WaitlistStatus
from app.schemas.waitlist import ChainResult, ExpiredOfferRunResult
from app.services.waitlist.notifier import NextCandidateNotifier, coerce_chain_result
from app.services.waitlist.policy import PolicyResolver
from app.services.waitlist.store import WaitlistStore
from app.services.waitlist.transitions import LifecycleLog, guarded_transition, utcnow

logger = logging.getLogger(__name__)


class OfferExpiryReconciler:
    """
    Periodic job over pending offers whose claim token has expired.

    For each offer, oldest expiry first: expire it (guarded on ``pending``),
    move the owning entry into cooldown with an escalating penalty, log the
    transition and hand the freed slot to the next-candidate notifier.
    One failing offer never stops the batch.
    """

    def __init__(
        self,
        store: WaitlistStore,
        policy_resolver: PolicyResolver,
        notifier: NextCandidateNotifier,
        lifecycle_log: LifecycleLog,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.policy_resolver = policy_resolver
        self.notifier = notifier
        self.lifecycle_log = lifecycle_log
        self.clock = clock

    def process_expired_offers(self, max_rows: int = 200) -> ExpiredOfferRunResult:
        result = ExpiredOfferRunResult()
        now = self.clock()

        try:
            offers = self.store.fetch_expired_offers(now, max_rows)
        except Exception as e:
            logger.warning(f"Failed to load expired waitlist offers: {e}")
            result.errors = 1
            return result

        if not offers:
            return result

        for offer in offers:
            try:
                self._process_offer(offer, result)
            except Exception as e:
                result.errors += 1
                logger.warning(
                    f"Failed processing expired waitlist offer {offer.id}: {e}",
                    extra={"offer_id": offer.id, "salon_id": offer.salon_id},
                )

        logger.info(
            f"Processed expired waitlist offers: processed={result.processed} "
            f"chained={result.chained} errors={result.errors}",
            extra=result.model_dump(),
        )
        return result

    def _process_offer(self, offer: WaitlistOffer, result: ExpiredOfferRunResult) -> None:
        entry = self.store.get_entry(offer.waitlist_entry_id)
        if entry is None:
            self._expire_orphaned_offer(offer)
            return

        policy = self.policy_resolver.resolve(entry.salon_id, entry.service_id)
        next_decline_count = entry.decline_count + 1
        cooldown_minutes, passive_applied = policy.cooldown_for(next_decline_count)

        now = self.clock()
        cooldown_until = now + timedelta(minutes=cooldown_minutes)
        offer_expired = False

        def expire_and_cool_down() -> bool:
            nonlocal offer_expired
            if not self.store.expire_offer(offer.id, now):
                return False
            offer_expired = True
            self.store.apply_cooldown(entry.id, next_decline_count, cooldown_until)
            return True

        try:
            transitioned = guarded_transition(
                expire_and_cool_down,
                self.lifecycle_log,
                entry_id=offer.waitlist_entry_id,
                salon_id=offer.salon_id,
                from_status=WaitlistStatus.NOTIFIED.value,
                to_status=WaitlistStatus.COOLDOWN.value,
                reason=LifecycleReason.OFFER_TIMEOUT.value,
                metadata={
                    "offer_id": offer.id,
                    "passive_applied": passive_applied,
                    "cooldown_minutes": cooldown_minutes,
                },
            )
        except Exception:
            # The offer is already expired; no later run will chain this slot
            if offer_expired:
                self._count_chain(self._chain_freed_slot(offer), result)
            raise
        if not transitioned:
            return

        result.processed += 1
        if passive_applied:
            logger.info(
                f"Entry {entry.id} reached {next_decline_count} declines; passive cooldown of {cooldown_minutes} minutes applied",
                extra={"entry_id": entry.id, "salon_id": entry.salon_id},
            )

        self._count_chain(self._chain_freed_slot(offer), result)

    def _expire_orphaned_offer(self, offer: WaitlistOffer) -> None:
        """The entry is gone: expire the offer so it stops taking batch slots, with no cooldown, event or chaining."""
        expired = self.store.expire_offer(offer.id, self.clock())
        logger.warning(
            f"Waitlist entry {offer.waitlist_entry_id} for offer {offer.id} no longer exists; "
            f"{'offer expired without cooldown' if expired else 'offer already handled'}",
            extra={"offer_id": offer.id, "salon_id": offer.salon_id},
        )

    @staticmethod
    def _count_chain(chain: ChainResult, result: ExpiredOfferRunResult) -> None:
        if chain.notified:
            result.chained += 1
        if chain.error:
            result.errors += 1

    def _chain_freed_slot(self, offer: WaitlistOffer) -> ChainResult:
        """Offer the freed slot onwards. Failures are reported, never raised: the expiry already committed."""
        try:
            chain = coerce_chain_result(
                self.notifier.handle_cancellation(
                    offer.salon_id,
                    offer.service_id,
                    offer.slot_date,
                    offer.employee_id,
                    offer.slot_start,
                    offer.slot_end,
                )
            )
        except Exception as e:
            chain = ChainResult(notified=False, error=str(e) or e.__class__.__name__)

        if chain.error:
            logger.warning(
                f"Failed to chain freed slot from offer {offer.id}: {chain.error}",
                extra={"offer_id": offer.id, "salon_id": offer.salon_id},
            )
        return chain
