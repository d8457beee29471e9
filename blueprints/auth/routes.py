"""
Authentication routes: login, logout, current user.
Session-based authentication for the JSON API.
"""

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_username, update_last_login, check_password
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log in with a JSON body {username, password, remember_me?}.

    Returns the logged-in user on success, 400 when fields are missing and
    401 on bad credentials.
    """
    form = LoginForm()

    if not form.validate_on_submit():
        return api_error(MESSAGES['credentials_required'], status=400,
                         kind='validation_error', fields=form.errors)

    user_dict = get_user_by_username(form.username.data.strip())

    # Check credentials
    if user_dict is None or not check_password(user_dict, form.password.data):
        return api_error(MESSAGES['invalid_credentials'], status=401, kind='invalid_credentials')

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)

    return api_success(data=user.to_dict(), message=MESSAGES['login_success'])


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout current user."""
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me')
@login_required
def me():
    """Current session user."""
    return api_success(data=current_user.to_dict())


@auth_bp.route('/csrf-token')
def csrf_token():
    """Token to send back in the X-CSRFToken header on state-changing calls."""
    return api_success(data={'csrf_token': generate_csrf()})
