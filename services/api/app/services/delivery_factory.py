from __future__ import annotations

import os

from services.api.app.services.delivery_base import DeliveryAssignmentPolicy
from services.api.app.services.delivery_first_available import FirstAvailableInArea


def get_delivery_policy() -> DeliveryAssignmentPolicy:
    """Select the delivery assignment policy.

    Only the first-available policy exists today; a nearest-agent policy can be added here
    without touching the order engine.
    """

    policy = os.getenv("DAWA_DELIVERY_POLICY", "first_available").strip().lower()

    if policy in ("first_available", "first-available"):
        return FirstAvailableInArea()

    raise ValueError(f"Unknown DAWA_DELIVERY_POLICY={policy!r}. Expected first_available.")
