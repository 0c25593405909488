"""
Partnership Lifecycle Service

Create, list, update, delete, approve/reject, archive, renew and export
partnerships for an authenticated actor.

Two rules apply everywhere:
- tenant_filter(actor): SuperAdmins see all campuses, everyone else only
  their own. Records outside the actor's campus are reported as not found.
- can_transition(...): status only moves Pending -> Active or
  Pending -> Rejected, and only by Admins or SuperAdmins.
"""
import logging
import math
from datetime import datetime

from campus_partners.errors import (
    AuthorizationError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
)
from campus_partners.extensions import db
from campus_partners.models.partnership import (
    DEFAULT_CAMPUS,
    STATUS_ACTIVE,
    STATUS_PENDING,
    STATUS_REJECTED,
    Partnership,
    needs_other_justification,
)
from campus_partners.models.user import ROLE_ADMIN, ROLE_SUPER_ADMIN, STATUS_ACTIVE as USER_ACTIVE
from campus_partners.schemas.partnership_schema import OTHER_AREA_REQUIRED

logger = logging.getLogger(__name__)

APPROVE = 'approve'
REJECT = 'reject'

# action -> (required current status, resulting status)
TRANSITIONS = {
    APPROVE: (STATUS_PENDING, STATUS_ACTIVE),
    REJECT: (STATUS_PENDING, STATUS_REJECTED),
}
TRANSITION_ROLES = (ROLE_ADMIN, ROLE_SUPER_ADMIN)
_PAST_TENSE = {APPROVE: 'approved', REJECT: 'rejected'}

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def tenant_filter(actor):
    """SQLAlchemy criteria restricting partnerships to what actor may see."""
    if actor.is_super_admin:
        return []
    return [Partnership.campus_id == actor.campus_id]


def can_transition(current_status, action, actor_role):
    transition = TRANSITIONS.get(action)
    if transition is None or actor_role not in TRANSITION_ROLES:
        return False
    return current_status == transition[0]


def _scoped_query(actor):
    return Partnership.query.filter(*tenant_filter(actor))


def get_partnership(actor, partnership_id):
    partnership = _scoped_query(actor).filter(Partnership.partnership_id == partnership_id).first()
    if partnership is None:
        logger.warning(
            f"Partnership not found or out of tenant partnership_id={partnership_id}, "
            f"user_id={actor.user_id}, campus_id={actor.campus_id}"
        )
        raise NotFoundError("Partnership not found or not in your campus")
    return partnership


def create_partnership(actor, data):
    """
    Create a partnership owned by actor.

    data is the output of CreatePartnershipSchema. SuperAdmin-created
    records go to DEFAULT_CAMPUS; everyone else's to their own campus.
    """
    if actor.status != USER_ACTIVE:
        logger.warning(f"Create partnership: user not active user_id={actor.user_id}, status={actor.status}")
        raise AuthorizationError(
            f"User account not active. Current status: {actor.status}",
            reason='account_not_active'
        )

    if needs_other_justification(data.get('potential_areas_of_collaboration'), data.get('other_collaboration_area')):
        raise InvalidRequestError(OTHER_AREA_REQUIRED, reason='other_area_required')

    partnership = Partnership(
        partner_institution=data['partner_institution'],
        aau_contact=data.get('aau_contact'),
        partner_contact_person=data.get('partner_contact_person'),
        partner_contact_person_secondary=data.get('partner_contact_person_secondary'),
        aau_contact_person=data.get('aau_contact_person'),
        aau_contact_person_secondary=data.get('aau_contact_person_secondary'),
        potential_areas_of_collaboration=data['potential_areas_of_collaboration'],
        other_collaboration_area=data.get('other_collaboration_area'),
        potential_start_date=data['potential_start_date'],
        duration_of_partnership=data['duration_of_partnership'],
        description=data.get('description'),
        mou_file_url=data.get('mou_file_url'),
        status=data.get('status') or STATUS_PENDING,
        is_archived=False,
        campus_id=DEFAULT_CAMPUS if actor.is_super_admin else actor.campus_id,
        created_by=actor.user_id,
    )
    db.session.add(partnership)
    db.session.commit()

    logger.info(
        f"Created partnership partnership_id={partnership.partnership_id}, "
        f"campus_id={partnership.campus_id}, status={partnership.status}, user_id={actor.user_id}"
    )
    return partnership


def _parse_positive_int(value, default):
    if value is None or value == '':
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError("Limit and page must be positive integers", reason='invalid_pagination')
    if parsed < 1:
        raise InvalidRequestError("Limit and page must be positive integers", reason='invalid_pagination')
    return parsed


def list_partnerships(actor, args):
    """
    Filtered, paginated, tenant-scoped listing.

    Args:
        actor: ActorContext
        args: mapping of query parameters - status, type_of_organization,
            potential_start_date (YYYY-MM-DD, inclusive lower bound),
            duration_of_partnership, archived ("true" for archived records
            only), page, limit

    Returns:
        tuple: (partnerships, pagination dict with total/pages/page/limit)
    """
    page = _parse_positive_int(args.get('page'), DEFAULT_PAGE)
    limit = _parse_positive_int(args.get('limit'), DEFAULT_LIMIT)
    if limit > MAX_LIMIT:
        raise InvalidRequestError(f"Limit cannot exceed {MAX_LIMIT}", reason='invalid_pagination')

    query = _scoped_query(actor)

    status = args.get('status')
    if status:
        query = query.filter(Partnership.status == status)

    organization_type = args.get('type_of_organization')
    if organization_type:
        query = query.filter(Partnership.organization_type == organization_type)

    duration = args.get('duration_of_partnership')
    if duration:
        query = query.filter(Partnership.duration_of_partnership == duration)

    start_date = args.get('potential_start_date')
    if start_date:
        try:
            start_dt = datetime.strptime(start_date, '%Y-%m-%d').date()
        except ValueError:
            raise InvalidRequestError("Invalid potential start date format", reason='invalid_date')
        query = query.filter(Partnership.potential_start_date >= start_dt)

    archived = args.get('archived', 'false') == 'true'
    query = query.filter(Partnership.is_archived == archived)

    total = query.count()
    offset = (page - 1) * limit
    # Pages past the end are empty; the offset never reaches the database
    if offset >= total:
        items = []
    else:
        items = (query.order_by(Partnership.created_at.asc(), Partnership.partnership_id.asc())
                 .offset(offset)
                 .limit(limit)
                 .all())

    logger.debug(f"Listed partnerships user_id={actor.user_id}, total={total}, page={page}, limit={limit}")

    return items, {
        "total": total,
        "pages": math.ceil(total / limit),
        "page": page,
        "limit": limit,
    }


def update_partnership(actor, partnership_id, data):
    """
    Merge data (PartnershipSchema loaded with partial=True) into a record.

    The 'Other' justification rule is checked on the merged result, so
    clearing the justification of a record tagged 'Other' is rejected too.
    """
    partnership = get_partnership(actor, partnership_id)

    areas = data.get('potential_areas_of_collaboration', partnership.potential_areas_of_collaboration)
    if 'other_collaboration_area' in data:
        other = data['other_collaboration_area']
    else:
        other = partnership.other_collaboration_area
    if needs_other_justification(areas, other):
        raise InvalidRequestError(OTHER_AREA_REQUIRED, reason='other_area_required')

    if 'partner_institution' in data:
        partnership.partner_institution = {**partnership.partner_institution, **data['partner_institution']}

    for key, value in data.items():
        if key != 'partner_institution':
            setattr(partnership, key, value)

    db.session.commit()
    logger.info(f"Updated partnership partnership_id={partnership_id}, fields={sorted(data)}, user_id={actor.user_id}")
    return partnership


def delete_partnership(actor, partnership_id):
    partnership = get_partnership(actor, partnership_id)
    db.session.delete(partnership)
    db.session.commit()
    logger.info(f"Deleted partnership partnership_id={partnership_id}, user_id={actor.user_id}")


def _transition(actor, partnership_id, action):
    partnership = get_partnership(actor, partnership_id)

    if actor.role not in TRANSITION_ROLES:
        raise AuthorizationError(f"Only Admins or SuperAdmins can {action} partnerships")

    message = f"Only pending partnerships can be {_PAST_TENSE[action]}"
    if not can_transition(partnership.status, action, actor.role):
        raise ConflictError(message, reason='invalid_transition')

    source, target = TRANSITIONS[action]
    # Conditional write: a concurrent transition that got there first leaves 0 rows
    updated = (Partnership.query
               .filter(Partnership.partnership_id == partnership.partnership_id,
                       Partnership.status == source)
               .update({Partnership.status: target, Partnership.updated_at: datetime.utcnow()},
                       synchronize_session=False))
    if updated == 0:
        db.session.rollback()
        raise ConflictError(message, reason='invalid_transition')

    db.session.commit()
    db.session.refresh(partnership)
    logger.info(f"Partnership {_PAST_TENSE[action]} partnership_id={partnership_id}, user_id={actor.user_id}")
    return partnership


def approve_partnership(actor, partnership_id):
    return _transition(actor, partnership_id, APPROVE)


def reject_partnership(actor, partnership_id):
    return _transition(actor, partnership_id, REJECT)


def archive_partnership(actor, partnership_id):
    partnership = get_partnership(actor, partnership_id)
    if partnership.is_archived:
        raise ConflictError("Partnership is already archived", reason='already_archived')

    updated = (Partnership.query
               .filter(Partnership.partnership_id == partnership.partnership_id,
                       Partnership.is_archived == False)  # noqa: E712
               .update({Partnership.is_archived: True, Partnership.updated_at: datetime.utcnow()},
                       synchronize_session=False))
    if updated == 0:
        db.session.rollback()
        raise ConflictError("Partnership is already archived", reason='already_archived')

    db.session.commit()
    db.session.refresh(partnership)
    logger.info(f"Archived partnership partnership_id={partnership_id}, user_id={actor.user_id}")
    return partnership


def renew_partnership(actor, partnership_id, data):
    """Move the start date and duration. Status is left alone."""
    partnership = get_partnership(actor, partnership_id)
    partnership.potential_start_date = data['potential_start_date']
    partnership.duration_of_partnership = data['duration_of_partnership']
    db.session.commit()
    logger.info(f"Renewed partnership partnership_id={partnership_id}, user_id={actor.user_id}")
    return partnership


def export_partnerships(actor):
    """Every tenant-scoped record, archived included, unpaginated."""
    return (_scoped_query(actor)
            .order_by(Partnership.created_at.asc(), Partnership.partnership_id.asc())
            .all())


def list_all_partnerships():
    return Partnership.query.order_by(Partnership.created_at.asc()).all()
