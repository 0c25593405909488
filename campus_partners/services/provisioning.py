"""
Admin Provisioning Service

SuperAdmin-only account management: create Admin/SuperAdmin accounts with
a generated one-time password, list, update and delete users.
"""
import logging
import secrets
import string

from campus_partners.errors import ConflictError, InvalidRequestError, NotFoundError
from campus_partners.extensions import db
from campus_partners.models.user import User, ROLE_SUPER_ADMIN, STATUS_ACTIVE

logger = logging.getLogger(__name__)

PASSWORD_ALPHABET = string.ascii_letters + string.digits
GENERATED_PASSWORD_LENGTH = 8


def generate_password(length=GENERATED_PASSWORD_LENGTH):
    """Random alphanumeric password, each symbol drawn uniformly from 62."""
    return ''.join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def _ensure_email_free(email, exclude_user_id=None):
    query = User.query.filter(User.email == email)
    if exclude_user_id:
        query = query.filter(User.user_id != exclude_user_id)
    if query.first() is not None:
        raise ConflictError("Email is already registered", reason='email_taken')


def assign_admin(data):
    """
    Create an active Admin or SuperAdmin account.

    Args:
        data: AssignAdminSchema output (email, first_name, last_name, role, campus_id)

    Returns:
        tuple: (user, generated_password). The plaintext password is only
        available here; only its hash is stored.
    """
    _ensure_email_free(data['email'])

    password = generate_password()
    user = User(
        email=data['email'],
        first_name=data['first_name'],
        last_name=data['last_name'],
        role=data['role'],
        campus_id=None if data['role'] == ROLE_SUPER_ADMIN else data['campus_id'],
        status=STATUS_ACTIVE,
    )
    user.set_password(password)

    db.session.add(user)
    db.session.commit()

    logger.info(f"Provisioned user_id={user.user_id}, role={user.role}, campus_id={user.campus_id}")
    return user, password


def list_users():
    return User.query.order_by(User.created_at.asc()).all()


def get_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_user(user_id, data):
    """
    Apply UpdateUserSchema output (loaded partial) to a user.

    The campus invariant is checked on the merged result: Admins need a
    campus, SuperAdmins never keep one.
    """
    user = get_user(user_id)

    if 'email' in data and data['email'] != user.email:
        _ensure_email_free(data['email'], exclude_user_id=user.user_id)

    role = data.get('role', user.role)
    campus_id = data['campus_id'] if 'campus_id' in data else user.campus_id
    if role == ROLE_SUPER_ADMIN:
        campus_id = None
    elif not campus_id:
        raise InvalidRequestError(
            "Campus is required for Admin accounts",
            details={"campus_id": ["Campus is required for Admin accounts"]}
        )

    for key in ('email', 'first_name', 'last_name', 'status'):
        if key in data:
            setattr(user, key, data[key])
    user.role = role
    user.campus_id = campus_id

    db.session.commit()
    logger.info(f"Updated user_id={user.user_id}, fields={sorted(data)}")
    return user


def delete_user(user_id):
    user = get_user(user_id)
    db.session.delete(user)
    db.session.commit()
    logger.info(f"Deleted user_id={user_id}")
