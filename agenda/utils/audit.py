from flask import request, current_app, has_request_context
from flask_login import current_user
from agenda.models.audit import AuditLog
from agenda import db

def log_audit(action, entity_type, entity_id=None, details=None, business_id=None):
    """
    Log an audit entry

    Parameters:
    - action: The action performed (e.g., 'create', 'update', 'delete')
    - entity_type: The type of entity affected (e.g., 'appointment', 'enrollment')
    - entity_id: ID of the affected entity (optional)
    - details: Additional details about the action (optional)
    - business_id: Tenant the entry belongs to; defaults to the current user's business
    """
    try:
        user_id = None
        ip_address = None
        if has_request_context():
            if current_user and current_user.is_authenticated:
                user_id = current_user.id
                if business_id is None:
                    business_id = current_user.business_id
            ip_address = request.remote_addr

        audit_entry = AuditLog(
            action=action,
            entity_type=entity_type,
            business_id=business_id,
            user_id=user_id,
            entity_id=entity_id,
            details=details,
            ip_address=ip_address
        )

        db.session.add(audit_entry)
        db.session.commit()

        return True
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to log audit entry: {e}")
        return False
