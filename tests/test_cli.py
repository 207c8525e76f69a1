from bistro.auth import verify_password
from bistro.extensions import db
from bistro.models import MenuItem, Reservation, User


def test_seed_creates_sample_data(app):
    result = app.test_cli_runner().invoke(args=["seed", "--admin-email", "Boss@Example.com",
                                                "--admin-password", "letmein1"])
    assert result.exit_code == 0, result.output
    assert "Database seeded!" in result.output

    with app.app_context():
        assert db.session.query(MenuItem).count() == 9
        admin = User.query.filter_by(role="admin").one()
        assert admin.email == "boss@example.com"
        assert verify_password(admin.password_hash, "letmein1")
        assert User.query.filter_by(role="user").count() == 1

        rows = Reservation.query.all()
        assert 0 < len(rows) <= 10
        assert {r.status for r in rows} <= {"pending", "confirmed"}
        slots = {(r.table_number, r.reservation_date, r.reservation_time) for r in rows}
        assert len(slots) == len(rows)


def test_seed_replaces_existing_data(app, client, user_headers):
    runner = app.test_cli_runner()
    assert runner.invoke(args=["seed"]).exit_code == 0
    assert runner.invoke(args=["seed"]).exit_code == 0

    with app.app_context():
        assert db.session.query(MenuItem).count() == 9
        assert db.session.query(User).count() == 2
