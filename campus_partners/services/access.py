"""
Access Guard

Authenticates the session token on a request, re-checks it against the
current user record, and gates routes by role and ownership.

The role is checked twice: once from the token claim and once from the
database, so a role change takes effect before the token expires.
"""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import g
from flask_jwt_extended import verify_jwt_in_request, get_jwt

from campus_partners.errors import AuthenticationError, AuthorizationError
from campus_partners.extensions import db
from campus_partners.models.user import User, ROLE_SUPER_ADMIN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActorContext:
    """The authenticated identity executing a request."""
    user_id: str
    email: str
    role: str
    campus_id: Optional[str]
    status: str

    @property
    def is_super_admin(self):
        return self.role == ROLE_SUPER_ADMIN


def authenticate():
    """
    Authenticate the current request and return its ActorContext.

    Token lookup, signature, expiry and blocklist checks are done by
    verify_jwt_in_request; its failures are rendered by the JWT loaders
    registered in create_app.

    Raises:
        AuthenticationError: malformed claim, unknown user or stale role
    """
    verify_jwt_in_request()
    claims = get_jwt()

    user_id = claims.get('sub')
    role = claims.get('role')
    if not user_id or not role:
        logger.warning("Authenticate: token missing subject or role")
        raise AuthenticationError("Invalid token: missing id or role", reason='malformed_token')

    user = db.session.get(User, user_id)
    if user is None:
        logger.warning(f"Authenticate: user not found user_id={user_id}")
        raise AuthenticationError("User not found", reason='user_not_found')

    if role != user.role:
        logger.warning(f"Authenticate: role mismatch user_id={user_id}, token_role={role}, stored_role={user.role}")
        raise AuthenticationError("Role mismatch in token", reason='role_mismatch')

    return ActorContext(
        user_id=user.user_id,
        email=user.email,
        role=role,
        campus_id=claims.get('campus_id') or user.campus_id,
        status=user.status,
    )


def authorize(actor, *roles):
    """Permit only actors whose role is one of roles (case-insensitive)."""
    allowed = {r.lower() for r in roles}
    if not actor.role or actor.role.lower() not in allowed:
        logger.warning(f"Authorize: role check failed user_id={actor.user_id}, role={actor.role}, required={roles}")
        raise AuthorizationError("Access forbidden: insufficient role")


def verify_ownership(actor, target_email):
    """Permit only when target_email is exactly the actor's own email."""
    if target_email != actor.email:
        logger.warning(f"Verify ownership: user_id={actor.user_id} targeted another account")
        raise AuthorizationError("You can only reset your own password")


def current_actor():
    return g.actor


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.actor = authenticate()
        return fn(*args, **kwargs)
    return wrapper


def roles_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.actor = authenticate()
            authorize(g.actor, *roles)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
