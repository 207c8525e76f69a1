from types import SimpleNamespace

from sqlalchemy.exc import IntegrityError

from bistro.http import unique_violation


def _integrity_error(orig):
    return IntegrityError("INSERT INTO orders ...", {}, orig)


def test_sqlite_unique_error_matches_column():
    e = _integrity_error(Exception("UNIQUE constraint failed: orders.order_number"))
    assert unique_violation(e, "ix_orders_order_number", "orders.order_number")
    assert not unique_violation(e, "ix_users_email", "users.email")


def test_other_integrity_errors_do_not_match():
    e = _integrity_error(Exception("FOREIGN KEY constraint failed"))
    assert not unique_violation(e, "ix_orders_order_number", "orders.order_number")

    e = _integrity_error(Exception("NOT NULL constraint failed: orders.order_number"))
    assert not unique_violation(e, "ix_orders_order_number", "orders.order_number")


class _PostgresError(Exception):
    def __init__(self, message, constraint_name):
        super().__init__(message)
        self.diag = SimpleNamespace(constraint_name=constraint_name)


def test_postgres_error_matches_constraint_name():
    e = _integrity_error(_PostgresError("duplicate key value violates unique constraint", "uq_reservation_active_slot"))
    assert unique_violation(e, "uq_reservation_active_slot", "reservations.table_number")
    assert not unique_violation(e, "ix_orders_order_number", "orders.order_number")
