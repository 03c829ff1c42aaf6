"""
Session event validation

Every check runs before the aggregate is read, so a rejected event
never mutates anything.
"""

import logging
import re

from progress_engine.exceptions import ValidationError
from progress_engine.models.progress import SessionEvent
from progress_engine.utils.datetime_helpers import ensure_aware

logger = logging.getLogger(__name__)

USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
MAX_ACTIVITY_LABEL_LENGTH = 100


def validate_user_id(user_id: str) -> str:
    """Ensure user identifier is a non-empty token of safe characters"""
    if not isinstance(user_id, str) or not USER_ID_PATTERN.match(user_id):
        raise ValidationError(
            message="User identifier is malformed",
            field="user_id",
            value=user_id
        )
    return user_id


def validate_session_event(event: SessionEvent) -> SessionEvent:
    """
    Validate a completed-session event

    Constraints:
    - user_id: 1-64 chars of [A-Za-z0-9_-]
    - duration_seconds: > 0
    - completed_at: timezone-aware
    - activity_label: at most 100 chars after trimming

    Returns:
        The event, with its activity label trimmed

    Raises:
        ValidationError: On the first failed constraint
    """
    validate_user_id(event.user_id)

    if event.duration_seconds <= 0:
        raise ValidationError(
            message="Session duration must be positive",
            field="duration_seconds",
            value=event.duration_seconds,
            user_id=event.user_id
        )

    ensure_aware(event.completed_at)

    label = event.activity_label.strip() if event.activity_label else None
    if label and len(label) > MAX_ACTIVITY_LABEL_LENGTH:
        raise ValidationError(
            message=f"Activity label too long ({len(label)} characters)",
            field="activity_label",
            value=label[:20],
            user_id=event.user_id
        )

    return event.model_copy(update={"activity_label": label or None})
