from marshmallow import Schema, fields, validate, validates, validates_schema, ValidationError

from campus_partners.models.user import ROLES, ROLE_SUPER_ADMIN, USER_STATUSES


class LoginSchema(Schema):
    email = fields.Str(required=True, error_messages={
        "required": "Email is required"
    })
    password = fields.Str(required=True, load_only=True, error_messages={
        "required": "Password is required"
    })


class ResetPasswordSchema(Schema):
    """
    Password Reset Request Validation Schema

    The email must be the caller's own; ownership is checked by the route,
    not here.

    Example:
        {
            "email": "dean@campus.edu",
            "new_password": "NewSecret123",
            "confirm_password": "NewSecret123"
        }
    """
    email = fields.Email(required=True, error_messages={
        "required": "Email is required",
        "invalid": "Invalid email format"
    })
    new_password = fields.Str(required=True, load_only=True, validate=validate.Length(min=8), error_messages={
        "required": "New password is required"
    })
    confirm_password = fields.Str(required=True, load_only=True, error_messages={
        "required": "Password confirmation is required"
    })

    @validates_schema
    def validate_passwords_match(self, data, **kwargs):
        if data.get('new_password') != data.get('confirm_password'):
            raise ValidationError("Passwords don't match", field_name='confirm_password')


class AssignAdminSchema(Schema):
    """
    Account Provisioning Request Validation Schema

    Validates SuperAdmin input when creating an Admin or SuperAdmin:
    - Email must be valid format
    - Role must be 'SuperAdmin' or 'Admin'
    - campus_id is required for Admins and ignored for SuperAdmins

    No password is accepted; one is generated by the server.
    """
    email = fields.Email(required=True, error_messages={
        "required": "Email is required",
        "invalid": "Invalid email format"
    })
    first_name = fields.Str(required=True, validate=validate.Length(min=1, max=100), error_messages={
        "required": "First name is required"
    })
    last_name = fields.Str(required=True, validate=validate.Length(min=1, max=100), error_messages={
        "required": "Last name is required"
    })
    role = fields.Str(required=True, validate=validate.OneOf(ROLES, error="Invalid role specified"), error_messages={
        "required": "Role is required"
    })
    campus_id = fields.Str(load_default=None, allow_none=True)

    @validates('campus_id')
    def validate_campus_id(self, value, **kwargs):
        if value is not None and not value.strip():
            raise ValidationError("Campus cannot be empty")

    @validates_schema
    def validate_campus_for_role(self, data, partial=False, **kwargs):
        # Partial loads are re-checked against the stored user by the service
        if partial:
            return
        if data.get('role') != ROLE_SUPER_ADMIN and not data.get('campus_id'):
            raise ValidationError("Campus is required for Admin accounts", field_name='campus_id')


class UpdateUserSchema(AssignAdminSchema):
    status = fields.Str(validate=validate.OneOf(USER_STATUSES, error="Invalid status specified"))


class UserResponseSchema(Schema):
    """
    User Response Schema

    Defines what user data is returned to frontend.
    Never return password_hash or sensitive data!
    """
    user_id = fields.Str()
    email = fields.Email()
    first_name = fields.Str()
    last_name = fields.Str()
    role = fields.Str()
    campus_id = fields.Str(allow_none=True)
    status = fields.Str()
    created_at = fields.DateTime()
