"""
Authorization policy table for protected routes.

Keys are (HTTP method, route path template) exactly as registered on the
application, values are the roles allowed to call the route.
"""

from typing import Dict, FrozenSet, Optional, Tuple

from realty.config import settings
from realty.models.admin import AdminRole


ANY_ADMIN_ROLE: FrozenSet[AdminRole] = frozenset(AdminRole)
SUPER_ADMIN_ONLY: FrozenSet[AdminRole] = frozenset({AdminRole.SUPER_ADMIN})

_PROPERTIES = f"{settings.api_prefix}/properties"
_ADMINS = f"{settings.api_prefix}/admins"

AUTHORIZATION_POLICY: Dict[Tuple[str, str], FrozenSet[AdminRole]] = {
    ("POST", _PROPERTIES): ANY_ADMIN_ROLE,
    ("PUT", f"{_PROPERTIES}/{{property_id}}"): ANY_ADMIN_ROLE,
    ("DELETE", f"{_PROPERTIES}/{{property_id}}"): ANY_ADMIN_ROLE,

    ("GET", _ADMINS): SUPER_ADMIN_ONLY,
    ("POST", _ADMINS): SUPER_ADMIN_ONLY,
    ("GET", f"{_ADMINS}/{{admin_id}}"): SUPER_ADMIN_ONLY,
    ("PUT", f"{_ADMINS}/{{admin_id}}"): SUPER_ADMIN_ONLY,
    ("PATCH", f"{_ADMINS}/{{admin_id}}/status"): SUPER_ADMIN_ONLY,
    ("DELETE", f"{_ADMINS}/{{admin_id}}"): SUPER_ADMIN_ONLY,
}


def allowed_roles(method: str, path: str) -> Optional[FrozenSet[AdminRole]]:
    """Roles allowed for a route, or None when the route has no entry."""
    return AUTHORIZATION_POLICY.get((method.upper(), path))
