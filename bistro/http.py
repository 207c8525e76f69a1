from flask import current_app, jsonify, request
from pydantic import ValidationError


class ApiError(Exception):
    """Raised inside handlers to short-circuit into a JSON error response."""

    def __init__(self, status: int, code: str, message: str, errors: list | None = None):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.errors = errors


def jerror(status: int, code: str, message: str, errors: list | None = None):
    payload = {"code": code, "message": message}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status


def field_errors(exc: ValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
        for err in exc.errors()
    ]


def parse_body(model):
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ApiError(400, "INVALID_PAYLOAD", "Missing or invalid JSON payload.")
    return validate(model, payload)


def parse_args(model):
    return validate(model, request.args.to_dict())


def validate(model, data: dict):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ApiError(400, "VALIDATION_ERROR", "Invalid input.", errors=field_errors(e))


def not_found(what: str) -> ApiError:
    return ApiError(404, "NOT_FOUND", f"{what} not found")


def check_table_number(table_number: int) -> None:
    total_tables = current_app.config["TOTAL_TABLES"]
    if table_number > total_tables:
        raise ApiError(
            400, "VALIDATION_ERROR", "Invalid input.",
            errors=[{"field": "tableNumber", "message": f"Table number must be between 1 and {total_tables}"}],
        )


def unique_violation(exc, constraint: str, column: str) -> bool:
    """True when an IntegrityError comes from the named unique constraint.

    Postgres reports the constraint name; SQLite only names the columns.
    """
    orig = exc.orig
    name = getattr(getattr(orig, "diag", None), "constraint_name", None)
    if name:
        return name == constraint
    message = str(orig)
    return "UNIQUE" in message.upper() and column in message
