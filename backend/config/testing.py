"""Testing configuration."""
from datetime import timedelta

from .base import BaseConfig

class TestingConfig(BaseConfig):
    """Testing configuration class."""
    
    # Basic Flask config
    DEBUG = False
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    
    # Database (in-memory SQLite for testing)
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    
    # JWT Configuration
    JWT_SECRET_KEY = 'test-jwt-secret-with-enough-length-for-hs256'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=5)
    
    # Rate Limiting (disabled for testing)
    RATELIMIT_ENABLED = False
    
    # Fixed square around the origin so tests do not depend on the campus polygon
    GEOFENCE_POLYGONS = [[[0.0, 0.0], [0.0, 0.01], [0.01, 0.01], [0.01, 0.0]]]
    GEOFENCE_CIRCLES = []
    
    # Logging
    LOG_LEVEL = 'WARNING'
