from flask import Blueprint
from sqlalchemy import text
from agenda import db
from agenda.utils.api import json_success, json_error

main_bp = Blueprint('main', __name__, url_prefix='/api')

@main_bp.route('/health')
def health():
    """Liveness plus a trivial database round-trip"""
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        return json_error('DATABASE_UNAVAILABLE', str(e), 503)
    return json_success({'status': 'ok'})
