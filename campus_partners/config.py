import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()


class Config:
    # Database - Render provides this as DATABASE_URL
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')

    # Fix for Render's postgres:// vs postgresql://
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv('SECRET_KEY')

    # Session tokens: one process-wide signing secret, 24h lifetime
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    # Token is read from "Authorization: Bearer" first, then from the cookie
    JWT_TOKEN_LOCATION = ['headers', 'cookies']
    JWT_ACCESS_COOKIE_NAME = 'jwt'
    JWT_COOKIE_SAMESITE = 'Strict'
    JWT_COOKIE_SECURE = os.getenv('JWT_COOKIE_SECURE', 'false').lower() == 'true'
    # SameSite=Strict already blocks cross-site submission
    JWT_COOKIE_CSRF_PROTECT = False
    # Persistent cookie; attach_session_cookie sets its max age to JWT_ACCESS_TOKEN_EXPIRES
    JWT_SESSION_COOKIE = False

    # Single hash setting for every credential write
    PASSWORD_HASH_METHOD = os.getenv('PASSWORD_HASH_METHOD', 'scrypt')

    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',') if o.strip()]

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-that-is-long-enough-for-hs256'
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'
    LOG_LEVEL = 'DEBUG'
