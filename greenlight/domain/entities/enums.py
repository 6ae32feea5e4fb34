"""
Greenlight Domain Enums
"""

from enum import Enum


class TokenScope(str, Enum):
    """Purpose a persisted opaque token may authorize"""

    activation = "activation"
    password_reset = "password_reset"
    # Reserved for stateful sessions; login currently issues signed tokens only
    authentication = "authentication"
