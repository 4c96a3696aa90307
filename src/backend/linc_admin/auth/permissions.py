"""Role check shared by the route guards and the live search socket.

Superusers bypass it, matching the console's protected routes.
"""

from linc_admin.auth.jwt import Claims


def has_role(claims: Claims, role: str) -> bool:
    """Return True if the caller holds the role or is a superuser."""
    if claims.is_superuser:
        return True
    return role in claims.roles
