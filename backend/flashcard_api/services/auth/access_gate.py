"""Access gate: decide whether a caller may run flashcard generation.

Pure read-then-decide. Nothing is cached; trial expiry is re-evaluated on
every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal, Optional, Union

from flashcard_api.services.auth.security import access_token_subject

DenyReason = Literal["unauthenticated", "trial_expired"]


@dataclass(frozen=True)
class Allowed:
    allowed: Literal[True] = True


@dataclass(frozen=True)
class Denied:
    reason: DenyReason
    allowed: Literal[False] = False


AccessDecision = Union[Allowed, Denied]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def authorize(
    token: Optional[str],
    account: Optional[Any],
    now: Optional[datetime] = None,
) -> AccessDecision:
    """Check *token* against *account* and the account's trial window.

    *account* needs ``id``, ``is_subscribed`` and ``trial_end_date``.
    """
    subject = access_token_subject(token)
    if subject is None or account is None or str(account.id) != str(subject):
        return Denied("unauthenticated")

    if account.is_subscribed:
        return Allowed()

    if trial_active(account, now):
        return Allowed()
    return Denied("trial_expired")


def trial_active(account: Any, now: Optional[datetime] = None) -> bool:
    now = _as_utc(now or datetime.now(timezone.utc))
    return account.trial_end_date is not None and now < _as_utc(account.trial_end_date)
