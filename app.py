"""
UNEXPLORE - Himalayan travel booking site
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, render_template
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager, csrf

# Import backend client setup
from backend import init_backend


def create_app(config_name=None, backend=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')
        backend: Optional backend client to use instead of the HTTP client

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    if config_name == 'production':
        config[config_name].validate()

    # Load configuration
    app.config.from_object(config[config_name])

    # Initialize extensions
    initialize_extensions(app, backend)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register context processors
    register_context_processors(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app, backend=None):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)
    # Attach hosted backend client
    init_backend(app, backend)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.main import main_bp
    from blueprints.auth.routes import auth_bp
    from blueprints.account.routes import account_bp
    from blueprints.admin.routes import admin_bp
    from blueprints.api.routes import api_bp

    # Register blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(account_bp, url_prefix='/account')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register error handlers."""

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return render_template('errors/500.html'), 500

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 errors."""
        return render_template('errors/403.html'), 403

    @app.errorhandler(413)
    def too_large_error(error):
        """Handle oversized uploads."""
        from utils.messages import MESSAGES
        return render_template('errors/413.html', message=MESSAGES['file_too_large']), 413


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('seed-catalog')
    def seed_catalog_command():
        """Insert the fallback destinations and packages (not idempotent)."""
        from backend import seed_catalog

        click.echo('Seeding catalog...')
        with app.app_context():
            destinations, packages = seed_catalog()
        click.echo(f'Inserted {destinations} destinations and {packages} packages.')

    @app.cli.command('check-backend')
    def check_backend_command():
        """Check that the hosted backend answers catalog reads."""
        from backend import get_backend, BackendError

        with app.app_context():
            try:
                rows = get_backend().table('packages').select('id').execute()
                click.echo(f'Backend reachable: {len(rows)} packages.')
            except BackendError as e:
                click.echo(f'Backend check failed: {e}', err=True)
                raise SystemExit(1)


def register_context_processors(app):
    """Register template context processors."""

    @app.context_processor
    def utility_processor():
        """Inject utility values into templates."""
        from datetime import datetime
        from utils.decorators import is_admin_session
        from utils.helpers import status_badge_class

        return {
            'current_year': datetime.now().year,
            'app_name': app.config.get('APP_NAME', 'UNEXPLORE'),
            'app_version': app.config.get('APP_VERSION', '1.0.0'),
            'contact_email': app.config.get('CONTACT_EMAIL'),
            'is_admin_session': is_admin_session(),
            'status_badge_class': status_badge_class,
        }

    @app.template_filter('format_date')
    def format_date_filter(date_str, format='%d %b %Y'):
        """Format date string."""
        from utils.helpers import format_date
        return format_date(date_str, format)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/unexplore.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        logging.getLogger().addHandler(file_handler)
        logging.getLogger().setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('UNEXPLORE startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
