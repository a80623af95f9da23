from functools import wraps

from flask import current_app, request
from flask_login import current_user
from pydantic import ValidationError

from farm_records.schemas import validation_details


def get_storage():
    return current_app.extensions['storage']


def error(message, status, details=None):
    body = {'error': message}
    if details is not None:
        body['details'] = details
    return body, status


def access_denied():
    return error('Access denied', 403)


def json_body():
    return request.get_json(silent=True) or {}


def parse(schema, partial=False):
    """Validate the request body against a pydantic schema.

    Returns ``(data, None)`` on success or ``(None, error_response)`` on failure.
    With ``partial`` only the keys present in the body are kept.
    """
    try:
        obj = schema.model_validate(json_body())
    except ValidationError as e:
        current_app.logger.info("Rejected %s payload: %d issue(s)", schema.__name__, e.error_count())
        return None, error('Invalid input', 400, validation_details(e))
    return obj.model_dump(exclude_unset=partial), None


def owned_farm(farm_id):
    """The farm if it exists and belongs to the session user, else None.

    A missing farm and another user's farm are indistinguishable to the caller.
    """
    farm = get_storage().get_farm(farm_id)
    if farm is None or farm.user_id != current_user.id:
        current_app.logger.warning("Farm access denied: farm=%s user=%s", farm_id, current_user.id)
        return None
    return farm


def handle_errors(message):
    """Turn any unexpected exception into a logged, generic 500 response."""
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except Exception:
                current_app.logger.exception(message)
                return error(message, 500)
        return wrapper
    return decorator
