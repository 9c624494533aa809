# Import important modules and create app package
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_mail import Mail
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Initialize extensions
db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
mail = Mail()

def create_app(config_class=None):
    # Initialize app
    app = Flask(__name__)

    # Configure app
    if config_class is None:
        from agenda.config import Config
        config_class = Config
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions with app
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    # Register blueprints
    from agenda.auth.routes import auth_bp
    from agenda.appointments.routes import appointments_bp
    from agenda.slots.routes import slots_bp
    from agenda.notes.routes import notes_bp
    from agenda.staff.routes import staff_bp
    from agenda.main.routes import main_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(appointments_bp)
    app.register_blueprint(slots_bp)
    app.register_blueprint(notes_bp)
    app.register_blueprint(staff_bp)
    app.register_blueprint(main_bp)

    # JSON error envelopes for aborts and unhandled exceptions
    from agenda.utils.api import register_error_handlers
    register_error_handlers(app)

    # Create database tables
    with app.app_context():
        from agenda import models  # noqa: F401
        db.create_all()
        app.logger.debug("Database tables created")

    return app
