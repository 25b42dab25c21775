"""Raw status -> canonical lifecycle category"""

from typing import Callable, List, NamedTuple, Optional
from loan_ops.domain.models import Category


class StatusRule(NamedTuple):
    name: str
    matches: Callable[[str], bool]
    category: Category


def _exact(*values: str) -> Callable[[str], bool]:
    members = frozenset(values)
    return lambda status: status in members


def _contains(*fragments: str) -> Callable[[str], bool]:
    return lambda status: any(fragment in status for fragment in fragments)


PENDING_STATUSES = ("CREATED", "ADDED_DETAIL", "ADDED_PRODUCT", "PENDING", "NEW", "PROCESSING")

# Evaluated top to bottom, first match wins. The REJECTED substrings overlap
# with in-flight statuses ("WAITING_SCORING"); the order is load-bearing.
STATUS_RULES: List[StatusRule] = [
    StatusRule("confirmed", _exact("CONFIRMED"), Category.CONFIRMED),
    StatusRule("finished", _exact("FINISHED", "COMPLETED", "ACTIVE"), Category.FINISHED),
    StatusRule("rejected", _exact("REJECTED"), Category.REJECTED),
    StatusRule(
        "rejected_fragment",
        _contains("CANCELED", "RAD", "SCORING", "DECLINED", "REFUSED"),
        Category.REJECTED,
    ),
    StatusRule("limit", _exact("LIMIT"), Category.LIMIT),
    StatusRule("limit_fragment", _contains("LIMIT"), Category.LIMIT),
    StatusRule("pending", _exact(*PENDING_STATUSES), Category.PENDING),
    StatusRule("waiting_fragment", _contains("WAITING"), Category.PENDING),
]

# Unrecognised statuses land in PENDING. Kept for compatibility with existing
# reports; whether they deserve their own bucket is an open business question.
FALLBACK_RULE = StatusRule("fallback", lambda status: True, Category.PENDING)


def normalize_status(raw_status: Optional[str]) -> str:
    return (raw_status or "").strip().upper()


def matching_rule(raw_status: Optional[str]) -> StatusRule:
    """Return the first rule that accepts the status (never fails)"""
    status = normalize_status(raw_status)
    for rule in STATUS_RULES:
        if rule.matches(status):
            return rule
    return FALLBACK_RULE


def classify(raw_status: Optional[str]) -> Category:
    """
    Map a loosely-typed status string to its canonical category.

    Total over all strings and None. Examples:
        "CONFIRMED"            -> CONFIRMED
        "ACTIVE"               -> FINISHED
        "SCORING RAD ETDI"     -> REJECTED
        "WAITING_BANK_CONFIRM" -> PENDING
        "something else"       -> PENDING
    """
    return matching_rule(raw_status).category


def is_approved(raw_status: Optional[str]) -> bool:
    """Approved for amount statistics: CONFIRMED or FINISHED"""
    return classify(raw_status) in (Category.CONFIRMED, Category.FINISHED)
