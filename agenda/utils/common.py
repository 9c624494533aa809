from functools import wraps
from flask_login import current_user
from agenda.utils.api import json_error

# Custom decorator to ensure only business staff can access these routes
def staff_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return json_error('UNAUTHORIZED', 'Unauthorized', 401)
        if not current_user.is_staff():
            return json_error('FORBIDDEN', 'This area is for staff only', 403)
        if current_user.business_id is None:
            return json_error('BUSINESS_ID_MISSING', 'Business ID missing', 400)
        return f(*args, **kwargs)
    return decorated_function

# Custom decorator to ensure only clients can access these routes
def client_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return json_error('UNAUTHORIZED', 'Unauthorized', 401)
        if not current_user.is_client():
            return json_error('FORBIDDEN', 'This area is for clients only', 403)
        return f(*args, **kwargs)
    return decorated_function

def format_price(amount, symbol='€'):
    """Render a money amount, dropping the decimals when they are zero"""
    value = float(amount)
    if value == int(value):
        return f"{symbol}{int(value)}"
    return f"{symbol}{value:.2f}"
