"""
API endpoints for partnership records
"""
import csv
import io

from flask import Blueprint, request, jsonify, current_app, Response

from campus_partners.models.user import ROLE_ADMIN, ROLE_SUPER_ADMIN
from campus_partners.schemas.partnership_schema import (
    CreatePartnershipSchema,
    PartnershipSchema,
    RenewPartnershipSchema,
)
from campus_partners.services import lifecycle
from campus_partners.services.access import login_required, roles_required, current_actor

bp = Blueprint('partnerships', __name__)

create_partnership_schema = CreatePartnershipSchema()
update_partnership_schema = PartnershipSchema()
renew_partnership_schema = RenewPartnershipSchema()

EXPORT_COLUMNS = [
    'partnership_id',
    'partner_name',
    'organization_type',
    'partner_country',
    'potential_areas_of_collaboration',
    'other_collaboration_area',
    'potential_start_date',
    'duration_of_partnership',
    'status',
    'is_archived',
    'campus_id',
    'created_by',
    'created_at',
]


def _partnerships_to_csv(partnerships):
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for p in partnerships:
        writer.writerow([
            p.partnership_id,
            p.partner_name,
            p.organization_type,
            p.partner_country or '',
            '; '.join(p.potential_areas_of_collaboration or []),
            p.other_collaboration_area or '',
            p.potential_start_date.isoformat() if p.potential_start_date else '',
            p.duration_of_partnership or '',
            p.status,
            'true' if p.is_archived else 'false',
            p.campus_id,
            p.created_by or '',
            p.created_at.isoformat() if p.created_at else '',
        ])
    return output.getvalue()


@bp.route('', methods=['GET'])
@login_required
def list_partnerships():
    """
    List partnerships visible to the caller with filtering and pagination.

    Query Parameters:
        - status (str, optional): Pending, Active or Rejected
        - type_of_organization (str, optional): Partner organization type
        - potential_start_date (str, optional): Start on or after this date (YYYY-MM-DD)
        - duration_of_partnership (str, optional): Exact duration
        - archived (str, optional): "true" for archived records only (default: non-archived)
        - page (int, optional): Page number (default: 1)
        - limit (int, optional): Items per page (default: 10, max: 100)

    Returns:
        200 OK with partnerships array and pagination {total, pages, page, limit}
        400 Invalid date or pagination
    """
    actor = current_actor()
    current_app.logger.debug(f"List partnerships: user_id={actor.user_id}, campus_id={actor.campus_id}")

    partnerships, pagination = lifecycle.list_partnerships(actor, request.args)

    return jsonify({
        "partnerships": [p.to_dict() for p in partnerships],
        "pagination": pagination
    }), 200


@bp.route('', methods=['POST'])
@login_required
def create_partnership():
    """
    Create a partnership in the caller's campus.

    Requires an active account. 'Other' in potential_areas_of_collaboration
    needs other_collaboration_area. status defaults to Pending.
    """
    data = create_partnership_schema.load(request.get_json(silent=True) or {})
    partnership = lifecycle.create_partnership(current_actor(), data)
    return jsonify({
        "message": "Partnership created successfully",
        "partnership": partnership.to_dict()
    }), 201


@bp.route('/export', methods=['GET'])
@login_required
def export_partnerships():
    """
    Bulk export of every partnership visible to the caller, unpaginated.

    Query Parameters:
        - format (str, optional): "json" (default) or "csv"
    """
    actor = current_actor()
    partnerships = lifecycle.export_partnerships(actor)
    current_app.logger.info(f"Export partnerships: user_id={actor.user_id}, count={len(partnerships)}")

    if request.args.get('format') == 'csv':
        response = Response(_partnerships_to_csv(partnerships), mimetype='text/csv')
        response.headers['Content-Disposition'] = 'attachment; filename=partnerships.csv'
        return response

    return jsonify({
        "partnerships": [p.to_dict() for p in partnerships],
        "count": len(partnerships)
    }), 200


@bp.route('/<partnership_id>', methods=['GET'])
@login_required
def get_partnership(partnership_id):
    partnership = lifecycle.get_partnership(current_actor(), partnership_id)
    return jsonify({"partnership": partnership.to_dict()}), 200


@bp.route('/<partnership_id>', methods=['PUT'])
@login_required
def update_partnership(partnership_id):
    """
    Update a partnership (all fields optional).

    Status, archive flag, campus and owner cannot be changed here.
    """
    data = update_partnership_schema.load(request.get_json(silent=True) or {}, partial=True)
    partnership = lifecycle.update_partnership(current_actor(), partnership_id, data)
    return jsonify({
        "message": "Partnership updated successfully",
        "partnership": partnership.to_dict()
    }), 200


@bp.route('/<partnership_id>', methods=['DELETE'])
@login_required
def delete_partnership(partnership_id):
    lifecycle.delete_partnership(current_actor(), partnership_id)
    return jsonify({"message": "Partnership deleted successfully"}), 200


@bp.route('/<partnership_id>/approve', methods=['POST'])
@roles_required(ROLE_ADMIN, ROLE_SUPER_ADMIN)
def approve_partnership(partnership_id):
    partnership = lifecycle.approve_partnership(current_actor(), partnership_id)
    return jsonify({
        "message": "Partnership approved successfully",
        "partnership": partnership.to_dict()
    }), 200


@bp.route('/<partnership_id>/reject', methods=['POST'])
@roles_required(ROLE_ADMIN, ROLE_SUPER_ADMIN)
def reject_partnership(partnership_id):
    partnership = lifecycle.reject_partnership(current_actor(), partnership_id)
    return jsonify({
        "message": "Partnership rejected successfully",
        "partnership": partnership.to_dict()
    }), 200


@bp.route('/<partnership_id>/archive', methods=['POST'])
@login_required
def archive_partnership(partnership_id):
    partnership = lifecycle.archive_partnership(current_actor(), partnership_id)
    return jsonify({
        "message": "Partnership archived successfully",
        "partnership": partnership.to_dict()
    }), 200


@bp.route('/<partnership_id>/renew', methods=['POST'])
@login_required
def renew_partnership(partnership_id):
    """
    Renew a partnership: new potential_start_date and duration_of_partnership.
    """
    data = renew_partnership_schema.load(request.get_json(silent=True) or {})
    partnership = lifecycle.renew_partnership(current_actor(), partnership_id, data)
    return jsonify({
        "message": "Partnership renewed successfully",
        "partnership": partnership.to_dict()
    }), 200
