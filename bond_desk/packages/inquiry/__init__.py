"""
Customer inquiry handling
"""

from .inquiry_service import (
    ALLOWED_TRANSITIONS,
    InquiryService,
    QuotePolicy,
    FixedQuotePolicy,
)

__all__ = [
    'ALLOWED_TRANSITIONS',
    'InquiryService',
    'QuotePolicy',
    'FixedQuotePolicy',
]
