from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

"""
Flask Extensions - Initialized here, configured in campus_partners/__init__.py

Why separate file?
- Avoids circular imports
- Extensions need to be created before app, but configured after
- Models and services import them without importing the app factory
"""
# Database ORM - users, partnerships, revoked tokens
# Usage: from campus_partners.extensions import db

db = SQLAlchemy()

# JWT Authentication - Signs and verifies session tokens
# Usage: from campus_partners.extensions import jwt

jwt = JWTManager()

# Alembic migrations bound to db
migrate = Migrate()
