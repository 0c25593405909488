#!/usr/bin/env python
"""
Script to run database migrations before starting the server.
This ensures migrations run with proper Flask app context.
"""
import os
import sys
import traceback

print("=" * 60)
print("DATABASE MIGRATION SCRIPT STARTING")
print("=" * 60)

db_url = os.getenv('DATABASE_URL')
if not db_url:
    print("ERROR: DATABASE_URL environment variable is not set!")
    sys.exit(1)

print(f"Database: {db_url.split('/')[-1] if '/' in db_url else 'unknown'}")

try:
    from campus_partners import create_app
    from campus_partners.extensions import db
    from flask_migrate import upgrade

    app = create_app()
    with app.app_context():
        with db.engine.connect():
            print("Database connection successful")

        upgrade()
        print("Migrations completed successfully")
except Exception as e:
    print(f"Migration error: {e}")
    traceback.print_exc()
    sys.exit(1)

print("=" * 60)
print("MIGRATION SCRIPT COMPLETED SUCCESSFULLY")
print("=" * 60)
