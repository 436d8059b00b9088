from enum import Enum
from typing import Optional


class TrustTier(str, Enum):
    NEW = "NEW"
    TRUSTED = "TRUSTED"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


# Submissions from these tiers skip the manual review queue
AUTO_APPROVED_TIERS = frozenset({TrustTier.TRUSTED.value, TrustTier.MODERATOR.value, TrustTier.ADMIN.value})

AUTO_PROMOTION_REASON = "AUTO_PROMOTION"
AUTO_DEMOTION_REASON = "AUTO_DEMOTION"


def requires_moderation(trust_tier: Optional[str]) -> bool:
    """Anything but an exact TRUSTED/MODERATOR/ADMIN goes to the queue, unknown tiers included."""
    return trust_tier not in AUTO_APPROVED_TIERS


def is_promotion_to_trusted(old_tier: Optional[str], new_tier: Optional[str]) -> bool:
    return old_tier == TrustTier.NEW.value and new_tier in AUTO_APPROVED_TIERS
