import secrets
from functools import lru_cache

from flask import Blueprint, current_app, session
from flask.views import MethodView
from flask_login import current_user, login_required, login_user, logout_user
from werkzeug.security import check_password_hash, generate_password_hash

from farm_records.extensions import login_manager
from farm_records.routes.common import error, get_storage, handle_errors, parse
from farm_records.schemas import LoginRequest, UserCreate, UserOut, dump
from farm_records.storage import DuplicateRecordError

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


@login_manager.user_loader
def load_user(user_id):
    return get_storage().get_user(user_id)


@login_manager.unauthorized_handler
def unauthorized():
    return error('Authentication required', 401)


def hash_password(password):
    return generate_password_hash(password, method=current_app.config['PASSWORD_HASH_METHOD'])


@lru_cache(maxsize=None)
def _dummy_hash(method):
    return generate_password_hash(secrets.token_hex(16), method=method)


def verify_credentials(username, password):
    """Return the user for a correct username/password pair, else None.

    An unknown username still pays for one hash check so both failure paths
    take about the same time.
    """
    user = get_storage().get_user_by_username(username)
    if user is None:
        check_password_hash(_dummy_hash(current_app.config['PASSWORD_HASH_METHOD']), password)
        return None
    if not user.check_password(password):
        return None
    return user


def start_session(user):
    # drop whatever the client brought along before attaching the new identity
    session.clear()
    login_user(user)


# 1. Resource: Auth
"""
registration, login and the session of the current user
"""
class Register(MethodView):
    # post: create the account and log it in
    @handle_errors('Failed to create user')
    def post(self):
        data, problem = parse(UserCreate)
        if problem:
            return problem

        storage = get_storage()
        if storage.get_user_by_username(data['username']):
            return error('Username already exists', 400)

        data['password_hash'] = hash_password(data.pop('password'))
        try:
            user = storage.create_user(data)
        except DuplicateRecordError:
            return error('This username or email address is registered.', 400)

        start_session(user)
        current_app.logger.info("Registered user %s", user.id)
        return {'user': dump(UserOut, user)}, 201


class Login(MethodView):
    @handle_errors('Login failed')
    def post(self):
        data, problem = parse(LoginRequest)
        if problem:
            body, status = problem
            return error('Username and password required', status, body['details'])

        user = verify_credentials(data['username'], data['password'])
        if user is None:
            current_app.logger.warning("Failed login attempt")
            return error('Invalid credentials', 401)

        start_session(user)
        current_app.logger.info("User %s logged in", user.id)
        return {'user': dump(UserOut, user)}


class Logout(MethodView):
    decorators = [login_required]

    @handle_errors('Logout failed')
    def post(self):
        user_id = current_user.id
        logout_user()
        session.clear()
        current_app.logger.info("User %s logged out", user_id)
        return {'message': 'Logged out successfully'}


class Me(MethodView):
    decorators = [login_required]

    @handle_errors('Failed to get user')
    def get(self):
        user = get_storage().get_user(current_user.id)
        if user is None:
            return error('User not found', 404)
        return {'user': dump(UserOut, user)}


auth_bp.add_url_rule('/register', view_func=Register.as_view('register'))
auth_bp.add_url_rule('/login', view_func=Login.as_view('login'))
auth_bp.add_url_rule('/logout', view_func=Logout.as_view('logout'))
auth_bp.add_url_rule('/me', view_func=Me.as_view('me'))
