"""Tracking ID generation with collision detection"""

import secrets
import string
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.logging import get_logger
from ..errors import StoreError
from ..models import IssuedTrackingId
from .migrations import get_project_config

logger = get_logger(__name__)

TRACKING_SUFFIX_LENGTH = 6
MAX_TRACKING_ID_ATTEMPTS = 5

# Uppercase letters and digits read well when a tracking id is dictated over the phone
TRACKING_ALPHABET = string.ascii_uppercase + string.digits


def generate_random_string(length: int = TRACKING_SUFFIX_LENGTH) -> str:
    """Generate random uppercase alphanumeric string"""
    return "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(length))


def tracking_id_exists(session: Session, tracking_id: str) -> bool:
    """Check if a tracking ID was ever issued, including to deleted issues"""
    return (
        session.query(IssuedTrackingId.tracking_id)
        .filter(IssuedTrackingId.tracking_id == tracking_id)
        .first()
        is not None
    )


def get_tracking_prefix() -> str:
    return get_project_config().get("tracking_prefix") or "CIV"


def generate_tracking_id(
    session: Session,
    prefix: Optional[str] = None,
    max_attempts: int = MAX_TRACKING_ID_ATTEMPTS,
) -> str:
    """Reserve a unique tracking ID, retrying on collision.

    The ID is recorded in the issued-ID ledger within `session`'s
    transaction, so it is committed together with the issue. A collision
    detected on insert rolls the transaction back; call this before adding
    anything else to the session.

    Raises StoreError once `max_attempts` candidates have all collided.
    """
    prefix = prefix or get_tracking_prefix()

    for _ in range(max_attempts):
        candidate = f"{prefix}-{generate_random_string()}"
        if tracking_id_exists(session, candidate):
            continue

        session.add(IssuedTrackingId(tracking_id=candidate))
        try:
            session.flush()
        except IntegrityError:
            # Issued concurrently between the check and the insert
            session.rollback()
            logger.warning(f"[TRACKING_ID] {candidate} taken concurrently, retrying")
            continue
        return candidate

    raise StoreError(
        f"Could not assign a unique tracking id after {max_attempts} attempts"
    )
