"""
Authentication routes blueprint.
"""
from flask import Blueprint, jsonify, request, current_app

from services.auth_service import (
    authenticate,
    create_session,
    create_user,
    delete_session,
    request_password_reset,
    reset_password as reset_password_service,
)
from utils.auth_utils import clear_session_cookie, current_session, set_session_cookie
from utils.errors import Unauthorized
from utils.validators import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
    SignInRequest,
    SignUpRequest,
    parse_body,
)

# Create blueprint
auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/sign-up', methods=['POST'])
def sign_up():
    """Create an account and start a session"""
    config = current_app.config['CONFIG']
    data = parse_body(SignUpRequest, request.get_json(silent=True))
    user = create_user(data.email, data.password, data.name, config)
    token, expires_at = create_session(user['id'], config)
    response = jsonify({"user": user, "expiresAt": expires_at})
    response.status_code = 201
    return set_session_cookie(response, token)


@auth_bp.route('/sign-in', methods=['POST'])
def sign_in():
    config = current_app.config['CONFIG']
    data = parse_body(SignInRequest, request.get_json(silent=True))
    user = authenticate(data.email, data.password, config)
    token, expires_at = create_session(user['id'], config)
    return set_session_cookie(jsonify({"user": user, "expiresAt": expires_at}), token)


@auth_bp.route('/sign-out', methods=['POST'])
def sign_out():
    config = current_app.config['CONFIG']
    token = request.cookies.get(config.get('session_cookie_name', 'session_token'))
    if token:
        delete_session(token, config)
    return clear_session_cookie(jsonify({"success": True}))


@auth_bp.route('/session', methods=['GET'])
def get_session():
    """Current user and session expiry"""
    session = current_session()
    if session is None:
        raise Unauthorized()
    return jsonify(session)


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    """Always succeeds so account existence is not revealed"""
    config = current_app.config['CONFIG']
    data = parse_body(ForgotPasswordRequest, request.get_json(silent=True))
    request_password_reset(data.email, config)
    return jsonify({
        "success": True,
        "message": "If an account exists for that email, a password reset link has been sent."
    })


@auth_bp.route('/reset-password', methods=['POST'])
def reset_password():
    config = current_app.config['CONFIG']
    data = parse_body(ResetPasswordRequest, request.get_json(silent=True))
    reset_password_service(data.token, data.password, config)
    return jsonify({"success": True})
