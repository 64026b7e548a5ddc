"""Settings shared by every environment."""
import json
import os
from datetime import timedelta

# Campus boundary, [latitude, longitude] corners in order.
DEFAULT_GEOFENCE_POLYGON = [
    [14.573610318912571, 121.1320435069814],
    [14.573222311086639, 121.1318238188274],
    [14.573197585998372, 121.13182038657817],
    [14.572646890524354, 121.13155630753892],
    [14.57252810049009, 121.13239591132202],
    [14.57310541395725, 121.1329594813601],
]

def _json_env(name: str, fallback):
    """Read a JSON document from the environment."""
    raw = os.getenv(name)
    if not raw:
        return fallback
    return json.loads(raw)

class BaseConfig:
    """Base configuration."""
    
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    
    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    JWT_ALGORITHM = 'HS256'
    
    # CORS
    CORS_ORIGINS = ["http://localhost:*", "http://127.0.0.1:*"]
    
    # Rate Limiting
    RATELIMIT_STORAGE_URI = 'memory://'
    RATELIMIT_ENABLED = True
    
    # Institution clock
    INSTITUTION_TIMEZONE = os.getenv('INSTITUTION_TIMEZONE', 'Asia/Manila')
    
    # QR codes
    QR_CODE_DEFAULT_TTL_MINUTES = 60
    QR_CODE_MAX_TTL_MINUTES = 24 * 60
    
    # Attendance rules
    LOCATION_ACCURACY_THRESHOLD_METERS = 100
    ATTENDANCE_GRACE_BEFORE_MINUTES = 5
    ATTENDANCE_GRACE_AFTER_MINUTES = 10
    DEFAULT_LATE_THRESHOLD_MINUTES = 15
    
    # Geofence, read once at startup
    GEOFENCE_POLYGONS = _json_env('GEOFENCE_POLYGONS', [DEFAULT_GEOFENCE_POLYGON])
    GEOFENCE_CIRCLES = _json_env('GEOFENCE_CIRCLES', [])
    
    # Bootstrap account
    SUPER_ADMIN_EMAIL = os.getenv('SUPER_ADMIN_EMAIL', 'admin@qrattend.local')
    SUPER_ADMIN_PASSWORD = os.getenv('SUPER_ADMIN_PASSWORD', 'adminpassword123')
    
    # Pagination
    DEFAULT_PAGE_SIZE = 50
