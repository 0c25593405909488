"""API tests for partnership CRUD, tenant isolation and the status lifecycle."""
import csv
import io
from datetime import date

import pytest


@pytest.fixture
def admin(make_user):
    return make_user(role='Admin', campus_id='main')


@pytest.fixture
def other_admin(make_user):
    return make_user(role='Admin', campus_id='north')


@pytest.fixture
def super_admin(make_user):
    return make_user(role='SuperAdmin')


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def test_create_defaults_to_pending_in_actor_campus(client, admin, auth_headers, partnership_payload):
    response = client.post('/api/partnerships', headers=auth_headers(admin), json=partnership_payload())

    assert response.status_code == 201
    partnership = response.get_json()['partnership']
    assert partnership['status'] == 'Pending'
    assert partnership['is_archived'] is False
    assert partnership['campus_id'] == 'main'
    assert partnership['created_by'] == admin.user_id
    assert partnership['partner_institution']['type_of_organization'] == 'University'
    assert partnership['potential_start_date'] == '2026-01-15'


def test_super_admin_creations_go_to_default_campus(client, super_admin, auth_headers, partnership_payload):
    response = client.post('/api/partnerships', headers=auth_headers(super_admin), json=partnership_payload())

    assert response.status_code == 201
    assert response.get_json()['partnership']['campus_id'] == 'default_campus'


def test_create_accepts_explicit_valid_status(client, admin, auth_headers, partnership_payload):
    response = client.post('/api/partnerships', headers=auth_headers(admin),
                           json=partnership_payload(status='Active'))

    assert response.status_code == 201
    assert response.get_json()['partnership']['status'] == 'Active'


def test_create_rejects_invalid_status(client, admin, auth_headers, partnership_payload):
    response = client.post('/api/partnerships', headers=auth_headers(admin),
                           json=partnership_payload(status='Approved'))

    assert response.status_code == 400
    assert 'status' in response.get_json()['details']


def test_create_rejects_client_supplied_campus(client, admin, auth_headers, partnership_payload):
    response = client.post('/api/partnerships', headers=auth_headers(admin),
                           json=partnership_payload(campus_id='north'))

    assert response.status_code == 400


def test_inactive_user_cannot_create(client, make_user, auth_headers, partnership_payload):
    inactive = make_user(status='inactive')

    response = client.post('/api/partnerships', headers=auth_headers(inactive), json=partnership_payload())

    assert response.status_code == 403
    body = response.get_json()
    assert body['reason'] == 'account_not_active'
    assert 'inactive' in body['error']


def test_pending_user_cannot_create(client, make_user, auth_headers, partnership_payload):
    pending = make_user(status='pending')

    response = client.post('/api/partnerships', headers=auth_headers(pending), json=partnership_payload())

    assert response.status_code == 403
    assert 'pending' in response.get_json()['error']


@pytest.mark.parametrize('other', [None, '', '   '])
def test_create_other_area_requires_justification(client, admin, auth_headers, partnership_payload, other):
    payload = partnership_payload(potential_areas_of_collaboration=['Research', 'Other'])
    if other is not None:
        payload['other_collaboration_area'] = other

    response = client.post('/api/partnerships', headers=auth_headers(admin), json=payload)

    assert response.status_code == 400
    assert 'other_collaboration_area' in response.get_json()['details']


def test_create_other_area_with_justification(client, admin, auth_headers, partnership_payload):
    payload = partnership_payload(
        potential_areas_of_collaboration=['Other'],
        other_collaboration_area='Sports diplomacy',
    )

    response = client.post('/api/partnerships', headers=auth_headers(admin), json=payload)

    assert response.status_code == 201
    assert response.get_json()['partnership']['other_collaboration_area'] == 'Sports diplomacy'


def test_create_requires_core_fields(client, admin, auth_headers):
    response = client.post('/api/partnerships', headers=auth_headers(admin), json={})

    assert response.status_code == 400
    details = response.get_json()['details']
    for field in ('partner_institution', 'potential_areas_of_collaboration',
                  'potential_start_date', 'duration_of_partnership'):
        assert field in details


def test_create_rejects_unknown_collaboration_area(client, admin, auth_headers, partnership_payload):
    response = client.post('/api/partnerships', headers=auth_headers(admin),
                           json=partnership_payload(potential_areas_of_collaboration=['Basket Weaving']))

    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Tenant isolation
# ---------------------------------------------------------------------------


def test_list_only_shows_own_campus(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main')
    make_partnership(campus_id='main')
    make_partnership(campus_id='north')

    body = client.get('/api/partnerships', headers=auth_headers(admin)).get_json()

    assert body['pagination']['total'] == 2
    assert {p['campus_id'] for p in body['partnerships']} == {'main'}


def test_super_admin_sees_all_campuses(client, super_admin, auth_headers, make_partnership):
    make_partnership(campus_id='main')
    make_partnership(campus_id='north')
    make_partnership(campus_id='default_campus')

    body = client.get('/api/partnerships', headers=auth_headers(super_admin)).get_json()

    assert body['pagination']['total'] == 3


@pytest.mark.parametrize('method, suffix, body', [
    ('get', '', None),
    ('put', '', {"description": "hijack"}),
    ('delete', '', None),
    ('post', '/approve', None),
    ('post', '/reject', None),
    ('post', '/archive', None),
    ('post', '/renew', {"potential_start_date": "2027-01-01", "duration_of_partnership": "5 years"}),
])
def test_out_of_tenant_record_is_not_found(client, other_admin, auth_headers, make_partnership, method, suffix, body):
    partnership = make_partnership(campus_id='main')
    url = f"/api/partnerships/{partnership.partnership_id}{suffix}"

    kwargs = {"headers": auth_headers(other_admin)}
    if body is not None:
        kwargs["json"] = body
    response = getattr(client, method)(url, **kwargs)

    assert response.status_code == 404
    assert response.get_json()['reason'] == 'not_found'


def test_out_of_tenant_record_is_untouched(client, db, other_admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main')
    headers = auth_headers(other_admin)

    client.delete(f"/api/partnerships/{partnership.partnership_id}", headers=headers)
    client.post(f"/api/partnerships/{partnership.partnership_id}/archive", headers=headers)

    db.session.refresh(partnership)
    assert partnership.is_archived is False


def test_super_admin_can_fetch_any_campus(client, super_admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='north')

    response = client.get(f"/api/partnerships/{partnership.partnership_id}", headers=auth_headers(super_admin))

    assert response.status_code == 200
    assert response.get_json()['partnership']['campus_id'] == 'north'


def test_unknown_id_is_not_found(client, admin, auth_headers):
    response = client.get('/api/partnerships/does-not-exist', headers=auth_headers(admin))

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Update / delete / renew
# ---------------------------------------------------------------------------


def test_update_merges_fields(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main', description='old')

    response = client.put(f"/api/partnerships/{partnership.partnership_id}", headers=auth_headers(admin), json={
        "description": "new",
        "partner_institution": {"country": "Ghana"},
    })

    assert response.status_code == 200
    updated = response.get_json()['partnership']
    assert updated['description'] == 'new'
    assert updated['partner_institution']['country'] == 'Ghana'
    assert updated['partner_institution']['name'] == partnership.partner_name
    assert updated['duration_of_partnership'] == '3 years'


def test_update_other_area_requires_justification(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main')

    response = client.put(f"/api/partnerships/{partnership.partnership_id}", headers=auth_headers(admin), json={
        "potential_areas_of_collaboration": ["Other"],
    })

    assert response.status_code == 400


def test_update_cannot_clear_justification_of_other_area(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(
        campus_id='main',
        potential_areas_of_collaboration=['Other'],
        other_collaboration_area='Sports diplomacy',
    )

    response = client.put(f"/api/partnerships/{partnership.partnership_id}", headers=auth_headers(admin), json={
        "other_collaboration_area": "",
    })

    assert response.status_code == 400
    assert response.get_json()['reason'] == 'other_area_required'


@pytest.mark.parametrize('field, value', [
    ('status', 'Active'),
    ('is_archived', False),
    ('campus_id', 'north'),
    ('created_by', 'someone-else'),
])
def test_update_cannot_touch_lifecycle_or_tenant_fields(client, admin, auth_headers, make_partnership, field, value):
    partnership = make_partnership(campus_id='main')

    response = client.put(f"/api/partnerships/{partnership.partnership_id}",
                          headers=auth_headers(admin), json={field: value})

    assert response.status_code == 400
    assert field in response.get_json()['details']


def test_delete_removes_record_regardless_of_status(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main', status='Active', is_archived=True)
    headers = auth_headers(admin)

    response = client.delete(f"/api/partnerships/{partnership.partnership_id}", headers=headers)

    assert response.status_code == 200
    assert client.get(f"/api/partnerships/{partnership.partnership_id}", headers=headers).status_code == 404


def test_renew_changes_only_date_and_duration(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main', status='Active')

    response = client.post(f"/api/partnerships/{partnership.partnership_id}/renew", headers=auth_headers(admin),
                           json={"potential_start_date": "2029-09-01", "duration_of_partnership": "5 years"})

    assert response.status_code == 200
    renewed = response.get_json()['partnership']
    assert renewed['potential_start_date'] == '2029-09-01'
    assert renewed['duration_of_partnership'] == '5 years'
    assert renewed['status'] == 'Active'


def test_renew_requires_both_fields(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main')

    response = client.post(f"/api/partnerships/{partnership.partnership_id}/renew", headers=auth_headers(admin),
                           json={"duration_of_partnership": "5 years"})

    assert response.status_code == 400
    assert 'potential_start_date' in response.get_json()['details']


# ---------------------------------------------------------------------------
# Status state machine & archive
# ---------------------------------------------------------------------------


def test_approve_pending(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main')

    response = client.post(f"/api/partnerships/{partnership.partnership_id}/approve", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.get_json()['partnership']['status'] == 'Active'


def test_reject_pending(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main')

    response = client.post(f"/api/partnerships/{partnership.partnership_id}/reject", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.get_json()['partnership']['status'] == 'Rejected'


@pytest.mark.parametrize('status', ['Active', 'Rejected'])
@pytest.mark.parametrize('action', ['approve', 'reject'])
def test_transitions_only_from_pending(client, admin, auth_headers, make_partnership, status, action):
    partnership = make_partnership(campus_id='main', status=status)

    response = client.post(f"/api/partnerships/{partnership.partnership_id}/{action}", headers=auth_headers(admin))

    assert response.status_code == 409
    body = response.get_json()
    assert body['reason'] == 'invalid_transition'
    assert body['error'].startswith('Only pending partnerships can be')


def test_second_approve_conflicts(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main')
    url = f"/api/partnerships/{partnership.partnership_id}/approve"
    headers = auth_headers(admin)

    assert client.post(url, headers=headers).status_code == 200
    assert client.post(url, headers=headers).status_code == 409


def test_archive_once(client, admin, auth_headers, make_partnership):
    partnership = make_partnership(campus_id='main', status='Active')
    url = f"/api/partnerships/{partnership.partnership_id}/archive"
    headers = auth_headers(admin)

    first = client.post(url, headers=headers)
    second = client.post(url, headers=headers)

    assert first.status_code == 200
    assert first.get_json()['partnership']['is_archived'] is True
    assert first.get_json()['partnership']['status'] == 'Active'
    assert second.status_code == 409
    assert second.get_json()['reason'] == 'already_archived'


def test_end_to_end_create_approve_then_reject_fails(client, admin, super_admin, auth_headers, partnership_payload):
    created = client.post('/api/partnerships', headers=auth_headers(admin), json=partnership_payload())
    partnership_id = created.get_json()['partnership']['partnership_id']
    assert created.get_json()['partnership']['status'] == 'Pending'

    super_headers = auth_headers(super_admin)
    approved = client.post(f"/api/partnerships/{partnership_id}/approve", headers=super_headers)
    assert approved.status_code == 200
    assert approved.get_json()['partnership']['status'] == 'Active'

    rejected = client.post(f"/api/partnerships/{partnership_id}/reject", headers=super_headers)
    assert rejected.status_code == 409
    assert rejected.get_json()['error'] == 'Only pending partnerships can be rejected'

    fetched = client.get(f"/api/partnerships/{partnership_id}", headers=auth_headers(admin))
    assert fetched.get_json()['partnership']['status'] == 'Active'


# ---------------------------------------------------------------------------
# Listing: filters & pagination
# ---------------------------------------------------------------------------


def test_pagination_second_page_of_150(client, admin, auth_headers, make_partnership):
    for _ in range(150):
        make_partnership(campus_id='main', commit=False)
    make_partnership(campus_id='north')
    headers = auth_headers(admin)

    first = client.get('/api/partnerships?limit=100&page=1', headers=headers).get_json()
    second = client.get('/api/partnerships?limit=100&page=2', headers=headers).get_json()

    assert len(first['partnerships']) == 100
    assert len(second['partnerships']) == 50
    assert second['pagination'] == {"total": 150, "pages": 2, "page": 2, "limit": 100}
    first_ids = {p['partnership_id'] for p in first['partnerships']}
    second_ids = {p['partnership_id'] for p in second['partnerships']}
    assert not first_ids & second_ids


@pytest.mark.parametrize('query', ['limit=0', 'page=0', 'limit=101', 'page=x'])
def test_pagination_rejects_out_of_range(client, admin, auth_headers, query):
    response = client.get(f'/api/partnerships?{query}', headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.get_json()['reason'] == 'invalid_pagination'


def test_page_past_the_end_is_empty(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main')

    body = client.get('/api/partnerships?page=5', headers=auth_headers(admin)).get_json()

    assert body['partnerships'] == []
    assert body['pagination']['total'] == 1


def test_huge_page_number_is_an_empty_page(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main')

    response = client.get('/api/partnerships?page=99999999999999999999', headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.get_json()
    assert body['partnerships'] == []
    assert body['pagination']['page'] == 99999999999999999999


def test_filter_by_status_and_organization_type(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main', status='Active', organization_type='NGO')
    make_partnership(campus_id='main', status='Active', organization_type='University')
    make_partnership(campus_id='main', status='Pending', organization_type='NGO')
    headers = auth_headers(admin)

    body = client.get('/api/partnerships?status=Active&type_of_organization=NGO', headers=headers).get_json()

    assert body['pagination']['total'] == 1
    assert body['partnerships'][0]['status'] == 'Active'
    assert body['partnerships'][0]['partner_institution']['type_of_organization'] == 'NGO'


def test_filter_by_minimum_start_date_is_inclusive(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main', potential_start_date=date(2025, 12, 31))
    make_partnership(campus_id='main', potential_start_date=date(2026, 3, 1))
    make_partnership(campus_id='main', potential_start_date=date(2026, 6, 1))

    body = client.get('/api/partnerships?potential_start_date=2026-03-01', headers=auth_headers(admin)).get_json()

    assert body['pagination']['total'] == 2


def test_filter_by_invalid_date_is_rejected(client, admin, auth_headers):
    response = client.get('/api/partnerships?potential_start_date=not-a-date', headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.get_json()['reason'] == 'invalid_date'


def test_filter_by_duration(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main', duration_of_partnership='5 years')
    make_partnership(campus_id='main', duration_of_partnership='3 years')

    body = client.get('/api/partnerships?duration_of_partnership=5+years', headers=auth_headers(admin)).get_json()

    assert body['pagination']['total'] == 1


def test_archived_records_hidden_unless_requested(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main')
    archived = make_partnership(campus_id='main', is_archived=True)
    headers = auth_headers(admin)

    default = client.get('/api/partnerships', headers=headers).get_json()
    only_archived = client.get('/api/partnerships?archived=true', headers=headers).get_json()
    anything_else = client.get('/api/partnerships?archived=yes', headers=headers).get_json()

    assert default['pagination']['total'] == 1
    assert [p['partnership_id'] for p in only_archived['partnerships']] == [archived.partnership_id]
    assert anything_else['pagination']['total'] == 1


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def test_export_returns_full_tenant_set(client, admin, auth_headers, make_partnership):
    for _ in range(15):
        make_partnership(campus_id='main', commit=False)
    make_partnership(campus_id='main', is_archived=True)
    make_partnership(campus_id='north')

    body = client.get('/api/partnerships/export', headers=auth_headers(admin)).get_json()

    assert body['count'] == 16
    assert {p['campus_id'] for p in body['partnerships']} == {'main'}


def test_export_as_csv(client, admin, auth_headers, make_partnership):
    make_partnership(campus_id='main', potential_areas_of_collaboration=['Research', 'Teaching'])
    make_partnership(campus_id='north')

    response = client.get('/api/partnerships/export?format=csv', headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    assert 'attachment' in response.headers['Content-Disposition']
    rows = list(csv.DictReader(io.StringIO(response.get_data(as_text=True))))
    assert len(rows) == 1
    assert rows[0]['campus_id'] == 'main'
    assert rows[0]['potential_areas_of_collaboration'] == 'Research; Teaching'
