"""
Inquiry Service - customer inquiry state machine
RECEIVED -> QUOTED -> DONE, REJECTED from RECEIVED or QUOTED; states never regress
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Optional

from ...engine.dto.core_dtos import Inquiry, InquiryState
from ..soa.errors import InvalidTransitionError
from ..soa.service import Service

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[InquiryState, FrozenSet[InquiryState]] = {
    InquiryState.RECEIVED: frozenset({InquiryState.QUOTED, InquiryState.REJECTED}),
    InquiryState.QUOTED: frozenset({InquiryState.DONE, InquiryState.REJECTED}),
    InquiryState.DONE: frozenset(),
    InquiryState.REJECTED: frozenset(),
}


class QuotePolicy(ABC):
    """Prices a received inquiry"""

    @abstractmethod
    def quote(self, inquiry: Inquiry) -> float:
        pass


class FixedQuotePolicy(QuotePolicy):
    def __init__(self, price: float = 100.0):
        self.price = price

    def quote(self, inquiry: Inquiry) -> float:
        return self.price


class InquiryService(Service[str, Inquiry]):
    """
    Keyed on inquiry id

    A new inquiry is quoted and completed immediately: it is published once
    QUOTED and once DONE.
    """

    name = "InquiryService"

    def __init__(self, quote_policy: Optional[QuotePolicy] = None):
        super().__init__()
        self.quote_policy = quote_policy or FixedQuotePolicy()
        self.stats.update({
            'inquiries_received': 0,
            'quotes_sent': 0,
            'inquiries_done': 0,
            'inquiries_rejected': 0,
            'invalid_transitions': 0,
        })

    def on_message(self, data: Inquiry) -> None:
        """
        Inbound inquiry event

        Unseen ids enter at RECEIVED and are quoted then completed. Events for a
        known id are applied as a transition to the event's state; an illegal
        one is logged and counted, the stored inquiry is left as it was.
        """
        super().on_message(data)
        try:
            if data.inquiry_id in self._store:
                self.transition(data.inquiry_id, data.state, data.price)
            else:
                self._receive(data)
        except InvalidTransitionError as e:
            self.stats['invalid_transitions'] += 1
            logger.warning(f"[{self.name}] {e}")

    def _receive(self, inquiry: Inquiry) -> None:
        if inquiry.state is not InquiryState.RECEIVED:
            inquiry = inquiry.transitioned(InquiryState.RECEIVED)
        self._store[inquiry.inquiry_id] = inquiry
        self.stats['inquiries_received'] += 1
        logger.debug(
            f"[{self.name}] received {inquiry.inquiry_id}: {inquiry.side.value} "
            f"{inquiry.quantity} {inquiry.product.product_id}"
        )

        self.send_quote(inquiry.inquiry_id, self.quote_policy.quote(inquiry))
        self.transition(inquiry.inquiry_id, InquiryState.DONE)

    def send_quote(self, inquiry_id: str, price: float) -> Inquiry:
        """Quote a RECEIVED inquiry and publish it as QUOTED"""
        return self.transition(inquiry_id, InquiryState.QUOTED, price)

    def reject_inquiry(self, inquiry_id: str) -> Inquiry:
        return self.transition(inquiry_id, InquiryState.REJECTED)

    def transition(self, inquiry_id: str, state: InquiryState, price: Optional[float] = None) -> Inquiry:
        """
        Move an inquiry to state, store it, then publish it

        Raises:
            KeyNotFoundError: unknown inquiry id
            InvalidTransitionError: state not reachable from the current one
        """
        current = self.get_data(inquiry_id)
        if state not in ALLOWED_TRANSITIONS[current.state]:
            raise InvalidTransitionError(inquiry_id, current.state, state)

        updated = current.transitioned(state, price)
        self._store[inquiry_id] = updated

        if state is InquiryState.QUOTED:
            self.stats['quotes_sent'] += 1
        elif state is InquiryState.DONE:
            self.stats['inquiries_done'] += 1
        elif state is InquiryState.REJECTED:
            self.stats['inquiries_rejected'] += 1

        logger.debug(f"[{self.name}] {inquiry_id} {current.state.value} -> {state.value} price={updated.price}")
        self.notify(updated)
        return updated
