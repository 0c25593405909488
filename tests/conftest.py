"""Pytest configuration and shared fixtures.

Every test gets a fresh app bound to an in-memory SQLite database.
"""
import itertools
from datetime import date

import pytest

from campus_partners import create_app
from campus_partners.config import TestConfig
from campus_partners.extensions import db as _db
from campus_partners.models import Partnership, User
from campus_partners.models.user import ROLE_SUPER_ADMIN
from campus_partners.services.session import issue_token

DEFAULT_PASSWORD = 'Password123'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def make_user(app):
    """Factory for persisted users. Admins default to campus 'main'."""
    counter = itertools.count(1)

    def _make_user(role='Admin', campus_id='main', status='active', password=DEFAULT_PASSWORD, email=None):
        n = next(counter)
        user = User(
            email=email or f"user{n}@campus.edu",
            first_name='Test',
            last_name=f'User{n}',
            role=role,
            campus_id=None if role == ROLE_SUPER_ADMIN else campus_id,
            status=status,
        )
        user.set_password(password)
        _db.session.add(user)
        _db.session.commit()
        return user

    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}
    return _auth_headers


@pytest.fixture
def make_partnership(app):
    """Factory for persisted partnerships, bypassing the API."""
    counter = itertools.count(1)

    def _make_partnership(campus_id='main', status='Pending', is_archived=False, commit=True, **overrides):
        n = next(counter)
        fields = dict(
            partner_name=f"Partner University {n}",
            organization_type='University',
            potential_areas_of_collaboration=['Research'],
            potential_start_date=date(2026, 1, 1),
            duration_of_partnership='3 years',
            status=status,
            is_archived=is_archived,
            campus_id=campus_id,
        )
        fields.update(overrides)
        partnership = Partnership(**fields)
        _db.session.add(partnership)
        if commit:
            _db.session.commit()
        return partnership

    return _make_partnership


@pytest.fixture
def partnership_payload():
    """Builds a valid create-partnership request body."""
    def _payload(**overrides):
        payload = {
            "partner_institution": {
                "name": "University of Nairobi",
                "type_of_organization": "University",
                "country": "Kenya",
            },
            "partner_contact_person": {
                "name": "Jane Wanjiru",
                "title": "Director of International Relations",
                "email": "jane@uonbi.ac.ke",
            },
            "potential_areas_of_collaboration": ["Research", "Student Exchange"],
            "potential_start_date": "2026-01-15",
            "duration_of_partnership": "3 years",
            "description": "Joint research on water management",
        }
        payload.update(overrides)
        return payload
    return _payload
