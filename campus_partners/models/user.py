from campus_partners.extensions import db
from datetime import datetime
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
import uuid

ROLE_SUPER_ADMIN = 'SuperAdmin'
ROLE_ADMIN = 'Admin'
ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN)

STATUS_PENDING = 'pending'
STATUS_ACTIVE = 'active'
STATUS_INACTIVE = 'inactive'
USER_STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_INACTIVE)

# Werkzeug hashes look like "scrypt:32768:8:1$salt$hash" or "pbkdf2:sha256:600000$salt$hash"
_HASH_PREFIXES = ('scrypt:', 'pbkdf2:')


def is_password_hash(value):
    """True when value is already in Werkzeug's hashed form."""
    return bool(value) and value.startswith(_HASH_PREFIXES) and value.count('$') == 2


class User(db.Model):
    """
    User Model - An administrative account that manages partnerships.

    Admins belong to one campus and only see that campus's partnerships.
    SuperAdmins have no campus and see everything.

    Attributes:
        user_id (str): Unique identifier (UUID)
        email (str): Login email (unique, case-sensitive)
        password_hash (str): Werkzeug hashed password (never store plaintext!)
        first_name (str): User's first name
        last_name (str): User's last name
        role (str): 'SuperAdmin' or 'Admin'
        campus_id (str): Tenant key, required unless role is SuperAdmin
        status (str): 'pending', 'active' or 'inactive'
        created_at (datetime): When the account was provisioned

    Example:
        user = User(email="dean@campus.edu", role="Admin", campus_id="main")
        user.set_password("Secret123")
    """
    __tablename__ = 'users'

    user_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(50), nullable=False, default=ROLE_ADMIN)
    campus_id = db.Column(db.String(100), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_super_admin(self):
        return self.role == ROLE_SUPER_ADMIN

    def set_password(self, password):
        """Store password hashed, unless it is already a hash."""
        if is_password_hash(password):
            self.password_hash = password
            return
        method = current_app.config.get('PASSWORD_HASH_METHOD', 'scrypt')
        self.password_hash = generate_password_hash(password, method=method)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)
