from flask import Blueprint, request
from flask_login import login_user, logout_user, login_required, current_user
from agenda.models.user import User
from agenda.auth.forms import LoginForm
from agenda.utils.api import json_success, json_error, form_error
from agenda.utils.audit import log_audit

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

@auth_bp.route('/login', methods=['POST'])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return form_error(form)

    user = User.query.filter_by(email=form.email.data).first()
    if not user or not user.check_password(form.password.data):
        log_audit('attempt', 'login', business_id=user.business_id if user else None, details={
            'email': form.email.data,
            'reason': 'invalid_credentials',
            'ip_address': request.remote_addr
        })
        return json_error('INVALID_CREDENTIALS', 'Invalid email or password', 401)

    if not user.is_active:
        # Log failed login due to inactive account
        log_audit('attempt', 'login', entity_id=user.id, business_id=user.business_id, details={
            'email': form.email.data,
            'reason': 'account_inactive',
            'ip_address': request.remote_addr
        })
        return json_error('ACCOUNT_INACTIVE', 'Your account is currently deactivated', 403)

    login_user(user, remember=form.remember_me.data)

    log_audit('perform', 'login', entity_id=user.id, details={
        'email': user.email,
        'ip_address': request.remote_addr,
        'user_agent': request.user_agent.string,
        'remember_me': form.remember_me.data
    })
    return json_success(user.to_dict())

@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    user_id = current_user.id
    log_audit('perform', 'logout', entity_id=user_id)
    logout_user()
    return json_success(None)

@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return json_success(current_user.to_dict())
