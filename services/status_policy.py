"""
Optional quote status transition policy.

Quote status is a free field: repositories and QuoteLifecycleService.save
accept any status. Callers that want to restrict the workflow check a change
here before applying it.
"""

from database.models import QuoteStatus
from errors import ValidationError
from validators import coerce_enum

ALLOWED_TRANSITIONS = {
    QuoteStatus.PENDING: {QuoteStatus.NEGOTIATING, QuoteStatus.APPROVED, QuoteStatus.CANCELLED},
    QuoteStatus.NEGOTIATING: {QuoteStatus.APPROVED, QuoteStatus.CANCELLED},
    QuoteStatus.APPROVED: {QuoteStatus.PRODUCTION, QuoteStatus.CANCELLED},
    QuoteStatus.PRODUCTION: {QuoteStatus.DELIVERED, QuoteStatus.CANCELLED},
    QuoteStatus.DELIVERED: set(),
    QuoteStatus.CANCELLED: set(),
}


def is_terminal(status) -> bool:
    return not ALLOWED_TRANSITIONS[coerce_enum(QuoteStatus, status)]


def is_transition_allowed(old_status, new_status) -> bool:
    old = coerce_enum(QuoteStatus, old_status)
    new = coerce_enum(QuoteStatus, new_status)
    return old == new or new in ALLOWED_TRANSITIONS[old]


def check_transition(old_status, new_status) -> None:
    """Raise ValidationError if the workflow does not allow old -> new."""
    if not is_transition_allowed(old_status, new_status):
        raise ValidationError(
            f"Cannot move quote from '{coerce_enum(QuoteStatus, old_status).value}' "
            f"to '{coerce_enum(QuoteStatus, new_status).value}'",
            field='status'
        )
