"""
Session Issuer

Creates the signed session token handed out at login, attaches it as a
cookie, and keeps the logout blocklist. The signing secret comes from
JWT_SECRET_KEY in app config, set once at startup.
"""
import logging
from datetime import datetime

from flask import current_app
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

from campus_partners.extensions import db, jwt
from campus_partners.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)


def issue_token(user):
    """
    Sign a 24h access token for user.

    Claims: sub (user_id), role, campus_id. Expiry and jti are added by
    Flask-JWT-Extended. Signing errors propagate to the caller.
    """
    token = create_access_token(
        identity=user.user_id,
        additional_claims={
            "role": user.role,
            "campus_id": user.campus_id,
        }
    )
    logger.info(f"Issued session token for user_id={user.user_id}, role={user.role}")
    return token


def attach_session_cookie(response, token):
    """Set the HttpOnly, SameSite=Strict session cookie on response."""
    max_age = int(current_app.config['JWT_ACCESS_TOKEN_EXPIRES'].total_seconds())
    set_access_cookies(response, token, max_age=max_age)
    return response


def clear_session_cookie(response):
    unset_jwt_cookies(response)
    return response


def revoke_token(claims):
    """Record the token's jti so it is refused until it expires."""
    jti = claims.get('jti')
    if not jti:
        return False

    if db.session.get(RevokedToken, jti) is not None:
        return False

    exp = claims.get('exp')
    db.session.add(RevokedToken(
        jti=jti,
        user_id=claims.get('sub'),
        expires_at=datetime.utcfromtimestamp(exp) if exp else None,
    ))
    db.session.commit()
    logger.info(f"Revoked session token jti={jti} for user_id={claims.get('sub')}")
    return True


@jwt.token_in_blocklist_loader
def is_token_revoked(jwt_header, jwt_payload):
    jti = jwt_payload.get('jti')
    if not jti:
        return False
    return db.session.get(RevokedToken, jti) is not None


def purge_expired_tokens(now=None):
    """Delete blocklist rows whose token has expired. Returns the count removed."""
    now = now or datetime.utcnow()
    removed = (RevokedToken.query
               .filter(RevokedToken.expires_at.isnot(None), RevokedToken.expires_at < now)
               .delete(synchronize_session=False))
    db.session.commit()
    logger.info(f"Purged {removed} expired revoked tokens")
    return removed
