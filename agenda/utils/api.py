from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from agenda import db, login_manager

def json_success(data=None, status=200, meta=None, message=None):
    """Standard success envelope: {"success": true, "data": ...}"""
    payload = {'success': True, 'data': data}
    if meta is not None:
        payload['meta'] = meta
    if message is not None:
        payload['message'] = message
    return jsonify(payload), status

def json_error(code, message, status=400, details=None):
    """Standard error envelope: {"success": false, "error": {"code", "message"}}"""
    error = {'code': code, 'message': message}
    if details is not None:
        error['details'] = details
    return jsonify({'success': False, 'error': error}), status

def form_error(form, code='VALIDATION_ERROR', message='Invalid request data'):
    return json_error(code, message, 400, details=form.errors)

def register_error_handlers(app):
    """Render aborts and unexpected failures with the JSON envelope"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        code = (e.name or 'error').upper().replace(' ', '_')
        return json_error(code, e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        current_app.logger.exception(f"Unhandled error: {e}")
        return json_error('INTERNAL_ERROR', 'Internal Server Error', 500)

@login_manager.unauthorized_handler
def unauthorized():
    return json_error('UNAUTHORIZED', 'Unauthorized', 401)
