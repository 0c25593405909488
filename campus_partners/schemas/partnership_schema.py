from marshmallow import Schema, fields, validate, validates, validates_schema, ValidationError

from campus_partners.models.partnership import (
    COLLABORATION_AREAS,
    PARTNERSHIP_STATUSES,
    needs_other_justification,
)

OTHER_AREA_REQUIRED = "Other collaboration area is required when 'Other' is selected"


class ContactPersonSchema(Schema):
    name = fields.Str(allow_none=True)
    title = fields.Str(allow_none=True)
    email = fields.Email(allow_none=True, error_messages={"invalid": "Invalid email format"})
    phone = fields.Str(allow_none=True)


class PartnerInstitutionSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255), error_messages={
        "required": "Partner institution name is required"
    })
    type_of_organization = fields.Str(required=True, validate=validate.Length(min=1, max=100), error_messages={
        "required": "Type of organization is required"
    })
    address = fields.Str(allow_none=True)
    country = fields.Str(allow_none=True)


class PartnershipSchema(Schema):
    """
    Partnership Request Validation Schema

    Used as-is for updates (loaded with partial=True). Status, archive flag,
    campus and owner are not accepted here; they change only through the
    dedicated lifecycle endpoints.
    """
    partner_institution = fields.Nested(PartnerInstitutionSchema, required=True, error_messages={
        "required": "Partner institution is required"
    })
    aau_contact = fields.Dict(keys=fields.Str(), values=fields.Str(allow_none=True), allow_none=True)
    partner_contact_person = fields.Nested(ContactPersonSchema, allow_none=True)
    partner_contact_person_secondary = fields.Nested(ContactPersonSchema, allow_none=True)
    aau_contact_person = fields.Nested(ContactPersonSchema, allow_none=True)
    aau_contact_person_secondary = fields.Nested(ContactPersonSchema, allow_none=True)
    potential_areas_of_collaboration = fields.List(
        fields.Str(validate=validate.OneOf(COLLABORATION_AREAS)),
        required=True,
        error_messages={"required": "At least one area of collaboration is required"}
    )
    other_collaboration_area = fields.Str(allow_none=True)
    potential_start_date = fields.Date(required=True, error_messages={
        "required": "Potential start date is required",
        "invalid": "Invalid potential start date format"
    })
    duration_of_partnership = fields.Str(required=True, validate=validate.Length(min=1, max=100), error_messages={
        "required": "Duration of partnership is required"
    })
    description = fields.Str(allow_none=True)
    mou_file_url = fields.Str(allow_none=True)

    @validates('potential_areas_of_collaboration')
    def validate_areas(self, value, **kwargs):
        if not value:
            raise ValidationError("At least one area of collaboration is required")

    @validates_schema
    def validate_other_area(self, data, **kwargs):
        if 'potential_areas_of_collaboration' not in data:
            return
        if needs_other_justification(data['potential_areas_of_collaboration'], data.get('other_collaboration_area')):
            raise ValidationError(OTHER_AREA_REQUIRED, field_name='other_collaboration_area')


class CreatePartnershipSchema(PartnershipSchema):
    status = fields.Str(validate=validate.OneOf(
        PARTNERSHIP_STATUSES,
        error="Invalid status. Must be one of: Active, Rejected, or Pending"
    ))


class RenewPartnershipSchema(Schema):
    potential_start_date = fields.Date(required=True, error_messages={
        "required": "Potential start date is required",
        "invalid": "Invalid potential start date format"
    })
    duration_of_partnership = fields.Str(required=True, validate=validate.Length(min=1, max=100), error_messages={
        "required": "Duration of partnership is required"
    })
