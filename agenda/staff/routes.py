from flask import Blueprint, request, current_app
from flask_login import login_required, current_user
from agenda import db
from agenda.models.user import User, ROLE_STAFF
from agenda.models.business import Category
from agenda.models.audit import AuditLog
from agenda.staff.forms import StaffCreateForm, StaffUpdateForm, CategoryForm, CategoryUpdateForm
from agenda.utils.api import json_success, json_error, form_error
from agenda.utils.audit import log_audit
from agenda.utils.common import staff_required

staff_bp = Blueprint('staff', __name__, url_prefix='/api')

def manager_check():
    """Error response unless the current user may manage the business's staff"""
    if not current_user.can_manage_staff():
        return json_error('FORBIDDEN', 'Admin access required', 403)
    return None

def business_staff(staff_id):
    return User.query.filter_by(
        id=staff_id,
        business_id=current_user.business_id,
        role=ROLE_STAFF
    ).first()

def pagination_params():
    page = max(request.args.get('page', 1, type=int) or 1, 1)
    limit = request.args.get('limit', current_app.config.get('PAGE_SIZE', 10), type=int) or 10
    return page, min(max(limit, 1), 100)

# region Staff
@staff_bp.route('/business/staff', methods=['GET'])
@login_required
@staff_required
def list_staff():
    staff = User.query.filter_by(
        business_id=current_user.business_id,
        role=ROLE_STAFF
    ).order_by(User.name).all()
    return json_success([s.to_dict() for s in staff])

@staff_bp.route('/business/staff', methods=['POST'])
@login_required
@staff_required
def create_staff():
    denied = manager_check()
    if denied:
        return denied

    form = StaffCreateForm()
    if not form.validate_on_submit():
        return form_error(form)

    member = User(
        email=form.email.data,
        name=form.name.data.strip(),
        password=form.password.data,
        role=ROLE_STAFF,
        business_id=current_user.business_id,
        phone=form.phone.data or None,
        staff_role=form.role.data
    )
    db.session.add(member)
    db.session.commit()

    log_audit('create', 'staff', entity_id=member.id, details={
        'email': member.email,
        'name': member.name,
        'staff_role': member.staff_role
    })
    return json_success(member.to_dict(), 201)

@staff_bp.route('/business/staff', methods=['PUT'])
@login_required
@staff_required
def update_staff():
    denied = manager_check()
    if denied:
        return denied

    form = StaffUpdateForm()
    if not form.validate_on_submit():
        return form_error(form)

    member = business_staff(form.id.data)
    if not member:
        return json_error('STAFF_NOT_FOUND', 'Staff member not found', 404)

    # Capture old values for audit log
    old_values = {
        'email': member.email,
        'name': member.name,
        'phone': member.phone,
        'staff_role': member.staff_role
    }

    if form.email.data:
        member.email = form.email.data
    if form.name.data:
        member.name = form.name.data.strip()
    if form.phone.raw_data:
        member.phone = form.phone.data or None
    if form.role.data:
        member.staff_role = form.role.data
    if form.password.data:
        member.set_password(form.password.data)
    db.session.commit()

    log_audit('update', 'staff', entity_id=member.id, details={
        'old_values': old_values,
        'new_values': {
            'email': member.email,
            'name': member.name,
            'phone': member.phone,
            'staff_role': member.staff_role
        },
        'password_changed': bool(form.password.data)
    })
    return json_success(member.to_dict())

@staff_bp.route('/business/staff', methods=['DELETE'])
@login_required
@staff_required
def delete_staff():
    denied = manager_check()
    if denied:
        return denied

    staff_id = request.args.get('id', type=int)
    if not staff_id:
        return json_error('MISSING_ID', 'Staff ID is required', 400)
    if staff_id == current_user.id:
        return json_error('CANNOT_DELETE_SELF', 'Cannot delete your own account', 400)

    member = business_staff(staff_id)
    if not member:
        return json_error('STAFF_NOT_FOUND', 'Staff member not found', 404)

    # Staff keep their appointment history, so the account is deactivated rather than removed
    member.is_active = False
    member.business_id = None
    db.session.commit()

    log_audit('delete', 'staff', entity_id=staff_id, details={'email': member.email, 'name': member.name})
    return json_success(None, message='Staff member deleted successfully')
# endregion

# region Categories
@staff_bp.route('/staff/categories', methods=['GET'])
@login_required
@staff_required
def list_categories():
    page, limit = pagination_params()
    pagination = Category.query.filter_by(
        business_id=current_user.business_id,
        is_deleted=False
    ).order_by(Category.created_at.desc(), Category.id.desc()).paginate(
        page=page, per_page=limit, error_out=False
    )
    return json_success(
        [c.to_dict() for c in pagination.items],
        meta={
            'page': page,
            'limit': limit,
            'total': pagination.total,
            'hasMore': page * limit < pagination.total
        }
    )

@staff_bp.route('/staff/categories', methods=['POST'])
@login_required
@staff_required
def create_category():
    form = CategoryForm()
    if not form.validate_on_submit():
        return form_error(form, 'INVALID_CATEGORY_DATA', 'Invalid category data')

    category = Category(
        business_id=current_user.business_id,
        name=form.name.data,
        description=form.description.data or None,
        color=form.color.data or None
    )
    db.session.add(category)
    db.session.commit()

    log_audit('create', 'category', entity_id=category.id, details={'name': category.name})
    return json_success(category.to_dict(), 201)

@staff_bp.route('/staff/categories/<int:category_id>', methods=['PATCH'])
@login_required
@staff_required
def update_category(category_id):
    category = Category.query.filter_by(
        id=category_id,
        business_id=current_user.business_id,
        is_deleted=False
    ).first_or_404(description='Category not found')

    form = CategoryUpdateForm()
    if not form.validate_on_submit():
        return form_error(form, 'INVALID_CATEGORY_DATA', 'Invalid category data')

    if form.name.data:
        category.name = form.name.data
    if form.description.raw_data:
        category.description = form.description.data or None
    if form.color.raw_data:
        category.color = form.color.data or None
    db.session.commit()

    log_audit('update', 'category', entity_id=category.id, details={
        'name': category.name,
        'description': category.description,
        'color': category.color
    })
    return json_success(category.to_dict())

@staff_bp.route('/staff/categories/<int:category_id>', methods=['DELETE'])
@login_required
@staff_required
def delete_category(category_id):
    category = Category.query.filter_by(
        id=category_id,
        business_id=current_user.business_id,
        is_deleted=False
    ).first_or_404(description='Category not found')

    category.is_deleted = True
    db.session.commit()

    log_audit('delete', 'category', entity_id=category.id, details={'name': category.name})
    return json_success(None)
# endregion

# region Audit
@staff_bp.route('/business/audit-logs', methods=['GET'])
@login_required
@staff_required
def audit_logs():
    """The business's audit trail, newest first, filterable by action, entity type and user"""
    denied = manager_check()
    if denied:
        return denied

    query = AuditLog.query.filter_by(business_id=current_user.business_id)

    action = request.args.get('action')
    if action:
        query = query.filter(AuditLog.action == action)
    entity_type = request.args.get('entityType')
    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)
    user_id = request.args.get('userId', type=int)
    if user_id:
        query = query.filter(AuditLog.user_id == user_id)

    page, limit = pagination_params()
    pagination = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).paginate(
        page=page, per_page=limit, error_out=False
    )
    return json_success(
        [entry.to_dict() for entry in pagination.items],
        meta={
            'page': page,
            'limit': limit,
            'total': pagination.total,
            'hasMore': page * limit < pagination.total
        }
    )
# endregion
