"""QR Attendance Service - Application Factory."""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "500 per hour"]
)

def create_app(config_name: str = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    # Setup logging
    setup_logging(app)

    # Geofence is read once and shared by every request
    setup_geofence(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Setup database
    setup_database(app)

    # Add CLI commands
    register_commands(app)

    # Add health check
    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'QR Attendance Service',
            'version': '1.0.0'
        })

    return app

def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from qrattend.api.auth import auth_bp
    from qrattend.api.periods import periods_bp
    from qrattend.api.qr import qr_bp
    from qrattend.api.attendance import attendance_bp
    from qrattend.api.admin import admin_bp
    from qrattend.api.teachers import teachers_bp

    # Auth
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    # Core Features
    app.register_blueprint(periods_bp, url_prefix='/api/periods')
    app.register_blueprint(qr_bp, url_prefix='/api/qr')
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')

    # Management
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(teachers_bp, url_prefix='/api/teacher')

def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from qrattend.utils.helpers import handle_error, error_response
    from qrattend.utils.errors import AttendanceError
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(AttendanceError)
    def handle_attendance_error(error):
        return error_response(
            error.message,
            error.status_code,
            code=error.code,
            **error.payload()
        )

    @app.errorhandler(HTTPException)
    def handle_exception(e):
        return handle_error(e.description, e.code)

    @app.errorhandler(Exception)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception("Unhandled error: %s", error)
        return handle_error("Internal server error", 500)

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return error_response('Token has expired', 401)

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return error_response('Invalid token', 401)

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return error_response('Authorization token required', 401)

def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    if not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('QR Attendance Service startup')

def setup_geofence(app: Flask) -> None:
    """Build the geofence checker from configuration."""
    from qrattend.services.geofence_service import GeofenceChecker, GeofenceConfig

    fence = GeofenceConfig.from_settings(
        app.config.get('GEOFENCE_POLYGONS', []),
        app.config.get('GEOFENCE_CIRCLES', [])
    )
    checker = GeofenceChecker(fence)
    app.extensions['geofence'] = checker

    if checker.is_geofencing_enabled():
        app.logger.info(
            'Geofencing enabled: %d polygon(s), %d circle(s)',
            len(fence.polygons), len(fence.circles)
        )
    else:
        app.logger.warning('Geofencing disabled: no usable polygon or circle configured')

def setup_database(app: Flask) -> None:
    """Setup database connections."""
    with app.app_context():
        # Import all models
        from qrattend.models import (
            User, UserRole, Period, ScanToken, AttendanceRecord
        )

def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

        from qrattend.services.auth_service import AuthService

        created = AuthService.ensure_super_admin(
            app.config['SUPER_ADMIN_EMAIL'],
            app.config['SUPER_ADMIN_PASSWORD']
        )
        if created:
            click.echo(f"Created super admin user: {app.config['SUPER_ADMIN_EMAIL']}")

    @app.cli.command('create-admin')
    def create_admin():
        """Create super admin user."""
        email = click.prompt('Admin email')
        name = click.prompt('Admin name')
        password = click.prompt('Password', hide_input=True)

        from qrattend.models.user import UserRole
        from qrattend.services.auth_service import AuthService
        from qrattend.utils.errors import AttendanceError

        try:
            user = AuthService.register(email, password, name, UserRole.SUPER_ADMIN.value,
                                        allowed_roles=None)
            click.echo(f"Admin user created: {user.email}")
        except AttendanceError as e:
            click.echo(f'Error creating admin: {e.message}')

    @app.cli.command('upgrade-schema')
    def upgrade_schema():
        """Apply pending schema upgrade steps."""
        from qrattend.migrations.schema_upgrade import apply_upgrades

        applied = apply_upgrades(db.engine)
        if not applied:
            click.echo('Schema is up to date.')
        for name in applied:
            click.echo(f'Applied: {name}')
