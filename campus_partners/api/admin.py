from flask import Blueprint, request, jsonify, current_app

from campus_partners.models.user import ROLE_SUPER_ADMIN
from campus_partners.schemas.auth_schema import AssignAdminSchema, UpdateUserSchema, UserResponseSchema
from campus_partners.services import lifecycle, provisioning
from campus_partners.services.access import roles_required, current_actor

bp = Blueprint('admin', __name__)

assign_admin_schema = AssignAdminSchema()
update_user_schema = UpdateUserSchema()
user_schema = UserResponseSchema()
users_schema = UserResponseSchema(many=True)


@bp.route('/users', methods=['POST'])
@roles_required(ROLE_SUPER_ADMIN)
def assign_admin():
    """
    Provision an Admin or SuperAdmin account.

    Request Body:
        {
            "email": "dean@campus.edu",
            "first_name": "Abebe",
            "last_name": "Kebede",
            "role": "Admin",
            "campus_id": "main"
        }

    Returns:
        201: Account created; generated_password is shown only in this response
        400: Validation error
        409: Email already registered
    """
    data = assign_admin_schema.load(request.get_json(silent=True) or {})
    user, password = provisioning.assign_admin(data)

    current_app.logger.info(f"Assign admin: user_id={user.user_id} created by {current_actor().user_id}")

    return jsonify({
        "message": "User assigned successfully",
        "user": user_schema.dump(user),
        "generated_password": password
    }), 201


@bp.route('/users', methods=['GET'])
@roles_required(ROLE_SUPER_ADMIN)
def list_users():
    users = provisioning.list_users()
    return jsonify({
        "users": users_schema.dump(users),
        "count": len(users)
    }), 200


@bp.route('/users/<user_id>', methods=['PUT'])
@roles_required(ROLE_SUPER_ADMIN)
def update_user(user_id):
    data = update_user_schema.load(request.get_json(silent=True) or {}, partial=True)
    user = provisioning.update_user(user_id, data)
    return jsonify({
        "message": "User updated successfully",
        "user": user_schema.dump(user)
    }), 200


@bp.route('/users/<user_id>', methods=['DELETE'])
@roles_required(ROLE_SUPER_ADMIN)
def delete_user(user_id):
    provisioning.delete_user(user_id)
    current_app.logger.info(f"Delete user: user_id={user_id} deleted by {current_actor().user_id}")
    return jsonify({"message": "User deleted successfully"}), 200


@bp.route('/partnerships', methods=['GET'])
@roles_required(ROLE_SUPER_ADMIN)
def list_all_partnerships():
    """Every partnership across all campuses, archived included."""
    partnerships = lifecycle.list_all_partnerships()
    return jsonify({
        "partnerships": [p.to_dict() for p in partnerships],
        "count": len(partnerships)
    }), 200
