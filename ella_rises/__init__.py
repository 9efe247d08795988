from flask import Flask
from dotenv import load_dotenv
import os
from ella_rises.extensions import db, migrate, limiter
from ella_rises.session_context import (
    get_session_context,
    load_session_context,
    persist_session_context,
)
import logging

# Load environment variables
load_dotenv()


def database_url():
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return "postgresql://{user}:{password}@{host}:{port}/{name}".format(
        user=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD", "admin"),
        host=os.getenv("DB_HOST", "localhost"),
        port=os.getenv("DB_PORT", "5432"),
        name=os.getenv("DB_NAME", "ellarises"),
    )


def create_app(config_overrides=None):
    app = Flask(__name__)

    # Configure logging
    logging.basicConfig(level=logging.INFO)
    app.logger.setLevel(logging.INFO)

    # Configure database
    app.config["SQLALCHEMY_DATABASE_URI"] = database_url()
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Sessions
    app.config["SECRET_KEY"] = os.getenv("SESSION_SECRET", "ella-rises-dev-secret")
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"

    app.config["APP_TIMEZONE"] = os.getenv("APP_TIMEZONE", "America/Denver")

    # Rate limiting
    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_STORAGE_URI", "memory://")

    if config_overrides:
        app.config.update(config_overrides)

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Make sure every model is registered on the metadata
    from ella_rises import models  # noqa: F401

    # Register blueprints
    from ella_rises.routes.auth_routes import auth_bp
    from ella_rises.routes.dashboard_routes import dashboard_bp
    from ella_rises.routes.crud_routes import crud_bp
    from ella_rises.routes.calendar_routes import calendar_bp
    from ella_rises.routes.profile_routes import profile_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(crud_bp)
    app.register_blueprint(calendar_bp)
    app.register_blueprint(profile_bp)

    app.before_request(load_session_context)
    app.after_request(persist_session_context)

    @app.context_processor
    def inject_session_context():
        return {"session_context": get_session_context()}

    app.logger.info(
        f"Ella Rises app created (database: {app.config['SQLALCHEMY_DATABASE_URI'].split('@')[-1]})"
    )
    return app
