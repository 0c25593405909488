from campus_partners.models.user import User
from campus_partners.models.partnership import Partnership
from campus_partners.models.revoked_token import RevokedToken

__all__ = ['User', 'Partnership', 'RevokedToken']
