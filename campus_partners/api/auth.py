from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from campus_partners.errors import AuthenticationError, InvalidRequestError
from campus_partners.extensions import db
from campus_partners.models.user import User
from campus_partners.schemas.auth_schema import LoginSchema, ResetPasswordSchema, UserResponseSchema
from campus_partners.services.access import login_required, current_actor, verify_ownership
from campus_partners.services.session import issue_token, attach_session_cookie, clear_session_cookie, revoke_token

# Create Blueprint
bp = Blueprint('auth', __name__)

# Initialize schemas
login_schema = LoginSchema()
reset_password_schema = ResetPasswordSchema()
user_schema = UserResponseSchema()

INVALID_CREDENTIALS = "Invalid email or password"


@bp.route('/login', methods=['POST'])
def login():
    """
    Login Endpoint

    Flow:
    1. Receive email, password
    2. Find user in DB
    3. Verify password hash
    4. Issue session token (24h expiry), set it as an HttpOnly cookie
    5. Return user info + token

    Responses:
      200 Login successful
      400 Missing email or password
      401 Unknown email or wrong password (same message for both)
    """
    data = login_schema.load(request.get_json(silent=True) or {})

    # Step 1: Lookup user
    user = User.query.filter_by(email=data['email']).first()

    # Step 2: Verify password
    if user is None or not user.check_password(data['password']):
        current_app.logger.warning("Login: invalid credentials")
        raise AuthenticationError(INVALID_CREDENTIALS, reason='invalid_credentials')

    # Step 3: Issue token
    token = issue_token(user)

    current_app.logger.info(f"Login: user_id={user.user_id} logged in")

    response = jsonify({
        "message": "Login successful",
        "user": user_schema.dump(user),
        "token": token
    })
    attach_session_cookie(response, token)
    return response, 200


@bp.route('/logout', methods=['POST'])
def logout():
    """
    Logout Endpoint

    Revokes the presented token (header or cookie) when it is still valid
    and always clears the session cookie.
    """
    try:
        if verify_jwt_in_request(optional=True):
            revoke_token(get_jwt())
    except (JWTExtendedException, PyJWTError) as e:
        # An unusable token needs no revocation; the cookie is cleared anyway
        current_app.logger.debug(f"Logout: ignoring unusable token: {e}")

    response = jsonify({"message": "Logged out successfully"})
    clear_session_cookie(response)
    return response, 200


@bp.route('/reset-password', methods=['POST'])
@login_required
def reset_password():
    """
    Change the caller's own password.

    Request Body:
        {
            "email": "dean@campus.edu",
            "new_password": "NewSecret123",
            "confirm_password": "NewSecret123"
        }

    Returns:
        200: Password changed
        400: Validation error or passwords don't match
        403: email is not the caller's own
    """
    actor = current_actor()
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    # Ownership first, so one account can't probe another via validation errors
    verify_ownership(actor, payload.get('email'))
    data = reset_password_schema.load(payload)

    user = db.session.get(User, actor.user_id)
    user.set_password(data['new_password'])
    db.session.commit()

    current_app.logger.info(f"Reset password: user_id={actor.user_id}")
    return jsonify({"message": "Password reset successfully"}), 200


@bp.route('/me', methods=['GET'])
@login_required
def me():
    """
    Return current logged-in user's info.
    - Requires valid access token
    """
    user = db.session.get(User, current_actor().user_id)
    return jsonify({"user": user_schema.dump(user)}), 200
