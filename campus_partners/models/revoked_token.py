from campus_partners.extensions import db
from datetime import datetime


class RevokedToken(db.Model):
    __tablename__ = 'revoked_tokens'

    """
    RevokedToken Model - Session tokens invalidated at logout.

    Tokens are self-contained, so logout records the token's jti here and
    every authenticated request checks it. Rows past expires_at are removed
    by `flask purge-revoked-tokens`; those tokens fail as expired anyway.
    """

    jti = db.Column(db.String(36), primary_key=True)
    user_id = db.Column(db.String(36), nullable=True)
    expires_at = db.Column(db.DateTime, nullable=True)
    revoked_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
