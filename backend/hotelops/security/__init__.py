# Security
from hotelops.security.auth import (
    CurrentActor, create_access_token, decode_token, get_current_actor,
    require_role, require_admin, require_staff_or_admin
)

__all__ = [
    'CurrentActor', 'create_access_token', 'decode_token', 'get_current_actor',
    'require_role', 'require_admin', 'require_staff_or_admin'
]
