# app.py: application factory for the Prime Students portal (DB, CSRF, migrations, rate limits, AI).
import os
import logging

import click
from dotenv import load_dotenv
from flask import Flask, render_template, session

from extensions import db, migrate, csrf, limiter
from models import User
from models.constants import ROLE_ADMIN, grade_slug, type_slug
from services.ai import DEFAULT_MODEL, init_ai
from services.text import highlight_match

# -----------------------
# Load .env explicitly (force path)
# -----------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
dotenv_path = os.path.join(BASE_DIR, ".env")


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def load_config(app):
    # Secret must exist for session and CSRF
    app.secret_key = os.environ.get("FLASK_SECRET") or "dev-secret-change-me"
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get(
        "DATABASE_URI", f"sqlite:///{os.path.join(BASE_DIR, 'portal.db')}"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["GOOGLE_API_KEY"] = os.environ.get("GOOGLE_API_KEY")
    app.config["GEMINI_MODEL"] = os.environ.get("GEMINI_MODEL", DEFAULT_MODEL)
    app.config["FACULTY_SECRET_KEY"] = os.environ.get("FACULTY_SECRET_KEY")
    app.config["HEAD_ADMIN_EMAIL"] = os.environ.get("HEAD_ADMIN_EMAIL")
    app.config["HEAD_ADMIN_PASSWORD"] = os.environ.get("HEAD_ADMIN_PASSWORD")
    app.config["UPLOAD_FOLDER"] = os.environ.get("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    app.config["MAX_CONTENT_LENGTH"] = _env_int("MAX_UPLOAD_MB", 16) * 1024 * 1024
    app.config["CHAT_HISTORY_LIMIT"] = _env_int("CHAT_HISTORY_LIMIT", 10)
    app.config["MAX_MCQ_COUNT"] = _env_int("MAX_MCQ_COUNT", 50)
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(app):
    level = getattr(logging, app.config["LOG_LEVEL"], logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)
    logging.getLogger('werkzeug').setLevel(level)


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("seed-admin")
    def seed_admin():
        """Create or reset the head faculty account from HEAD_ADMIN_EMAIL / HEAD_ADMIN_PASSWORD."""
        email = (app.config.get("HEAD_ADMIN_EMAIL") or "").strip().lower()
        password = app.config.get("HEAD_ADMIN_PASSWORD")
        if not email or not password:
            raise click.ClickException("HEAD_ADMIN_EMAIL and HEAD_ADMIN_PASSWORD must be set.")

        user = User.query.filter_by(email=email).first()
        if user is None:
            user = User(username="Head Faculty", email=email, role=ROLE_ADMIN)
            db.session.add(user)
        user.role = ROLE_ADMIN
        user.set_password(password)
        db.session.commit()
        click.echo(f"Head admin ready: {user.email}")


def create_app(test_config=None):
    _loaded = load_dotenv(dotenv_path=dotenv_path, override=False)

    app = Flask(__name__, template_folder="templates", static_folder="static")
    load_config(app)
    if test_config:
        app.config.update(test_config)

    configure_logging(app)
    app.logger.debug("dotenv load_dotenv returned: %s (%s)", _loaded, dotenv_path)

    # -----------------------
    # Extensions
    # -----------------------
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    limiter.init_app(app)

    init_ai(app)

    from routes.auth import auth_bp
    from routes.student import student_bp
    from routes.admin import admin_bp
    from routes.api import api_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(api_bp)

    app.add_template_filter(highlight_match, "highlight")
    app.add_template_global(grade_slug, "grade_slug")
    app.add_template_global(type_slug, "type_slug")

    # -----------------------
    # Context processor for templates
    # -----------------------
    @app.context_processor
    def inject_user():
        return dict(
            current_user=session.get('user_id'),
            user_role=session.get('user_role'),
            user_name=session.get('user_name'),
        )

    @app.errorhandler(404)
    def not_found(e):
        return render_template('404.html'), 404

    register_cli(app)
    return app


# -----------------------
# Startup: create DB tables and print registered routes
# -----------------------
if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        app.logger.info("=== Registered routes ===")
        for rule in app.url_map.iter_rules():
            app.logger.info("%-30s -> %s", rule.endpoint, rule.rule)
    app.run(debug=True)
