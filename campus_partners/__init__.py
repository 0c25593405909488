from flask import Flask, jsonify
from flask_cors import CORS
from campus_partners.config import Config
from campus_partners.errors import error_response, register_error_handlers
from campus_partners.extensions import db, jwt, migrate


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # The signing secret is required before any token can be issued
    if not app.config.get('JWT_SECRET_KEY'):
        raise RuntimeError("JWT_SECRET_KEY is not set")

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    CORS(app, origins=app.config.get('CORS_ORIGINS'), supports_credentials=True)

    # Health check endpoint - register early so it's always available
    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"}), 200

    # Import models so they are registered with SQLAlchemy and Alembic
    from campus_partners import models  # noqa: F401

    # Register blueprints
    from campus_partners.api import auth
    app.register_blueprint(auth.bp, url_prefix='/api/auth')
    from campus_partners.api import partnerships
    app.register_blueprint(partnerships.bp, url_prefix='/api/partnerships')
    from campus_partners.api import admin
    app.register_blueprint(admin.bp, url_prefix='/api/admin')

    register_error_handlers(app)

    from campus_partners.cli import register_commands
    register_commands(app)

    # JWT error handlers for clearer responses
    @jwt.unauthorized_loader
    def jwt_missing_token(err):
        app.logger.warning(f"Auth: no token provided ({err})")
        return error_response("Access token required", "unauthenticated", 401)

    @jwt.invalid_token_loader
    def jwt_invalid_token(err):
        app.logger.warning(f"Auth: invalid token ({err})")
        # Signed and unexpired, but without a subject claim
        if err == f"Missing claim: {app.config['JWT_IDENTITY_CLAIM']}":
            return error_response("Invalid token: missing id or role", "malformed_token", 401)
        return error_response("Invalid or expired token", "invalid_token", 401)

    @jwt.expired_token_loader
    def jwt_expired_token(header, payload):
        app.logger.warning(f"Auth: expired token for user_id={payload.get('sub')}")
        return error_response("Invalid or expired token", "invalid_token", 401)

    @jwt.revoked_token_loader
    def jwt_revoked_token(header, payload):
        app.logger.warning(f"Auth: revoked token for user_id={payload.get('sub')}")
        return error_response("Token has been revoked", "token_revoked", 401)

    return app
