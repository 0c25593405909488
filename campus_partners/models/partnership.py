from campus_partners.extensions import db
from datetime import datetime
import uuid

STATUS_PENDING = 'Pending'
STATUS_ACTIVE = 'Active'
STATUS_REJECTED = 'Rejected'
PARTNERSHIP_STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_REJECTED)

# Tenant assigned to partnerships created by a SuperAdmin
DEFAULT_CAMPUS = 'default_campus'

OTHER_AREA = 'Other'
COLLABORATION_AREAS = (
    'Research',
    'Teaching',
    'Student Exchange',
    'Staff Exchange',
    'Joint Programs',
    'Capacity Building',
    'Consultancy',
    'Community Service',
    OTHER_AREA,
)


class Partnership(db.Model):
    """
    Partnership Model - A collaboration agreement with a partner institution.

    Each partnership belongs to exactly one campus (campus_id). Status moves
    Pending -> Active or Pending -> Rejected; is_archived is a separate
    one-way flag.

    Attributes:
        partnership_id (str): Unique identifier (UUID)
        partner_name (str): Partner institution name
        organization_type (str): Partner's type of organization (filterable)
        aau_contact (json): Home-side unit handling the partnership
        *_contact_person* (json): {name, title, email, phone}
        potential_areas_of_collaboration (json): List of area tags
        other_collaboration_area (str): Required when 'Other' is tagged
        potential_start_date (date): When the partnership may start
        duration_of_partnership (str): e.g. "3 years"
        status (str): 'Pending', 'Active' or 'Rejected'
        is_archived (bool): Hidden from default listings once set
        campus_id (str): Tenant key
        created_by (str): user_id of the creator
    """
    __tablename__ = 'partnerships'

    partnership_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Partner institution
    partner_name = db.Column(db.String(255), nullable=False)
    organization_type = db.Column(db.String(100), nullable=False, index=True)
    partner_address = db.Column(db.String(255), nullable=True)
    partner_country = db.Column(db.String(100), nullable=True)

    aau_contact = db.Column(db.JSON, nullable=True)
    partner_contact_person = db.Column(db.JSON, nullable=True)
    partner_contact_person_secondary = db.Column(db.JSON, nullable=True)
    aau_contact_person = db.Column(db.JSON, nullable=True)
    aau_contact_person_secondary = db.Column(db.JSON, nullable=True)

    potential_areas_of_collaboration = db.Column(db.JSON, nullable=False, default=list)
    other_collaboration_area = db.Column(db.Text, nullable=True)
    potential_start_date = db.Column(db.Date, nullable=True, index=True)
    duration_of_partnership = db.Column(db.String(100), nullable=True)
    description = db.Column(db.Text, nullable=True)
    mou_file_url = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING, index=True)
    is_archived = db.Column(db.Boolean, nullable=False, default=False)

    campus_id = db.Column(db.String(100), nullable=False, index=True)
    created_by = db.Column(db.String(36), db.ForeignKey('users.user_id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    creator = db.relationship('User', backref='partnerships')

    @property
    def partner_institution(self):
        return {
            "name": self.partner_name,
            "type_of_organization": self.organization_type,
            "address": self.partner_address,
            "country": self.partner_country,
        }

    @partner_institution.setter
    def partner_institution(self, value):
        self.partner_name = value.get('name')
        self.organization_type = value.get('type_of_organization')
        self.partner_address = value.get('address')
        self.partner_country = value.get('country')

    def to_dict(self):
        """Convert partnership to dictionary for API response."""
        return {
            "partnership_id": self.partnership_id,
            "partner_institution": self.partner_institution,
            "aau_contact": self.aau_contact,
            "partner_contact_person": self.partner_contact_person,
            "partner_contact_person_secondary": self.partner_contact_person_secondary,
            "aau_contact_person": self.aau_contact_person,
            "aau_contact_person_secondary": self.aau_contact_person_secondary,
            "potential_areas_of_collaboration": self.potential_areas_of_collaboration or [],
            "other_collaboration_area": self.other_collaboration_area,
            "potential_start_date": self.potential_start_date.isoformat() if self.potential_start_date else None,
            "duration_of_partnership": self.duration_of_partnership,
            "description": self.description,
            "mou_file_url": self.mou_file_url,
            "status": self.status,
            "is_archived": self.is_archived,
            "campus_id": self.campus_id,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def needs_other_justification(areas, other_collaboration_area):
    """True when 'Other' is tagged but no justification text is given."""
    if not areas or OTHER_AREA not in areas:
        return False
    return not (other_collaboration_area and other_collaboration_area.strip())
