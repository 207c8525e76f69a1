import logging
import random
from datetime import date, timedelta
import click
from flask import Flask, jsonify
from flask.cli import with_appcontext
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from .extensions import db, migrate
from .config import Config
from .http import ApiError, jerror
from .auth import hash_password
from .blueprints.auth import bp as auth_bp
from .blueprints.menu import bp as menu_bp
from .blueprints.reservations import bp as reservations_bp
from .blueprints.orders import bp as orders_bp
from .blueprints.feedback import bp as feedback_bp
from .models import Feedback, MenuItem, Order, OrderItem, Reservation, User

logger = logging.getLogger(__name__)

SAMPLE_MENU = [
    ("Bruschetta", "Starters", 7.5),
    ("Calamari", "Starters", 9.0),
    ("Grilled Salmon", "Mains", 22.0),
    ("Ribeye Steak", "Mains", 28.5),
    ("Mushroom Risotto", "Mains", 18.0),
    ("Tiramisu", "Desserts", 8.0),
    ("Panna Cotta", "Desserts", 7.0),
    ("Espresso", "Drinks", 3.0),
    ("House Red", "Drinks", 9.5),
]


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logging.getLogger("bistro").setLevel(level)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return jerror(e.status, e.code, e.message, errors=e.errors)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        code = "NOT_FOUND" if e.code == 404 else e.name.upper().replace(" ", "_")
        return jerror(e.code or 500, code, e.description or e.name)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error")
        db.session.rollback()
        return jerror(500, "INTERNAL_ERROR", "Internal server error")


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)
    CORS(app)

    db.init_app(app)
    migrate.init_app(app, db)

    for bp in (auth_bp, menu_bp, reservations_bp, orders_bp, feedback_bp):
        app.register_blueprint(bp, url_prefix="/api")

    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return jsonify(status="ok")

    @click.command("seed")
    @click.option("--admin-email", default="admin@example.com", show_default=True)
    @click.option("--admin-password", default="admin123", show_default=True)
    @with_appcontext
    def seed_command(admin_email, admin_password):
        """Creates sample data for the database."""
        for model in (Feedback, OrderItem, Order, Reservation, MenuItem, User):
            db.session.query(model).delete()
        db.session.commit()
        print("Cleared existing data.")

        admin = User(name="Admin", email=admin_email.lower(),
                     password_hash=hash_password(admin_password), role="admin")
        guest = User(name="Guest", email="guest@example.com",
                     password_hash=hash_password("guest123"), role="user")
        db.session.add_all([admin, guest])
        db.session.add_all(MenuItem(name=n, category=c, price=p) for n, c, p in SAMPLE_MENU)
        db.session.commit()
        print(f"Created admin {admin.email} and {len(SAMPLE_MENU)} menu items.")

        total_tables = app.config["TOTAL_TABLES"]
        taken = set()
        reservations = []
        today = date.today()
        for _ in range(10):
            slot = (
                random.randint(1, total_tables),
                today + timedelta(days=random.randint(0, 2)),
                f"{random.randint(17, 21):02d}:{random.choice(['00', '30'])}",
            )
            if slot in taken:
                continue
            taken.add(slot)
            reservations.append(Reservation(
                user_id=guest.id,
                customer_name=guest.name,
                customer_email=guest.email,
                customer_phone="555-0100",
                table_number=slot[0],
                guest_count=random.randint(1, 6),
                reservation_date=slot[1],
                reservation_time=slot[2],
                status=random.choice(["pending", "confirmed"]),
            ))

        db.session.add_all(reservations)
        db.session.commit()
        print(f"Created {len(reservations)} reservations.")
        print("Database seeded!")

    app.cli.add_command(seed_command)

    return app
