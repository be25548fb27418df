"""Enumeration types for the license manager domain model.

Lookup tables hold these names as rows; the enums give code a stable way to
refer to the rows it needs to find by name.
"""

from enum import Enum


class LicenseStatusName(str, Enum):
    """Lifecycle states, in seed order.

    ``DEACTIVATED`` is kept for rows carried over from older data; deactivation
    now returns a license to ``AVAILABLE`` and nothing sets this state.
    """
    AVAILABLE = "Available"
    ACTIVATION_REQUESTED = "Activation Requested"
    ACTIVATED = "Activated"
    DEACTIVATED = "Deactivated"


class LicenseTypeName(str, Enum):
    """License type names seeded into the type lookup."""
    ANNUAL = "Annual"
    PERPETUAL = "Perpetual"
    SUBSCRIPTION = "Subscription"
    TRIAL = "Trial"


class LicenseActionName(str, Enum):
    """Ledger action kinds seeded into the action lookup."""
    ACTIVATE = "Activate"
    DEACTIVATE = "Deactivate"
    REQUEST_ACTIVATION = "Request Activation"
    RENEW = "Renew"


# Join-row duration meaning "no expiry"
PERPETUAL_DURATION = 0
