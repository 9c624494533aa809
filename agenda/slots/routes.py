from flask import Blueprint, request
from flask_login import login_required, current_user
from agenda import db
from agenda.models.user import User, ROLE_CLIENT
from agenda.models.service import Service
from agenda.models.slot import Slot, SlotDescription, Enrollment
from agenda.slots.forms import SlotForm, AttendanceForm, SlotDescriptionForm
from agenda.slots.enrollment import (
    EnrollmentError, parse_slot_date, find_enrollment, enroll_client, cancel_enrollment, set_attendance
)
from agenda.utils.api import json_success, json_error, form_error
from agenda.utils.audit import log_audit
from agenda.utils.common import staff_required

slots_bp = Blueprint('slots', __name__, url_prefix='/api/slots')

def business_slot_or_404(slot_id):
    return Slot.query.filter_by(
        id=slot_id,
        business_id=current_user.business_id
    ).first_or_404(description='Slot not found')

def business_client(client_id):
    return User.query.filter_by(
        id=client_id,
        business_id=current_user.business_id,
        role=ROLE_CLIENT
    ).first()

def request_date():
    """Occurrence date from the query string, falling back to the JSON body"""
    value = request.args.get('date')
    if not value and request.is_json:
        value = (request.get_json(silent=True) or {}).get('date')
    return parse_slot_date(value)

@slots_bp.errorhandler(EnrollmentError)
def handle_enrollment_error(e):
    return json_error(e.code, e.message, e.status)

@slots_bp.route('', methods=['GET'])
@login_required
@staff_required
def list_slots():
    slots = Slot.query.filter_by(
        business_id=current_user.business_id,
        is_active=True
    ).order_by(Slot.day_of_week, Slot.start_time).all()
    return json_success([s.to_dict() for s in slots])

@slots_bp.route('', methods=['POST'])
@login_required
@staff_required
def create_slot():
    form = SlotForm()
    if not form.validate_on_submit():
        return form_error(form)

    service = Service.query.filter_by(id=form.service_id.data, business_id=current_user.business_id).first()
    if not service:
        return json_error('SERVICE_NOT_FOUND', 'Service not found', 404)

    if form.staff_id.data:
        staff = User.query.filter_by(id=form.staff_id.data, business_id=current_user.business_id).first()
        if not staff or not staff.is_staff():
            return json_error('STAFF_NOT_FOUND', 'Staff member not found', 404)

    slot = Slot(
        business_id=current_user.business_id,
        service_id=service.id,
        day_of_week=form.day_of_week.data,
        start_time=form.start_time.data,
        end_time=form.end_time.data,
        capacity=form.capacity.data,
        staff_id=form.staff_id.data,
        description=form.description.data or None
    )
    db.session.add(slot)
    db.session.commit()

    log_audit('create', 'slot', entity_id=slot.id, details=slot.to_dict())
    return json_success(slot.to_dict(), 201)

@slots_bp.route('/<int:slot_id>/details', methods=['GET'])
@login_required
@staff_required
def slot_details(slot_id):
    """Slot occurrence with its enrolled students and remaining places"""
    slot = business_slot_or_404(slot_id)
    day = request_date()
    enrollments = slot.active_enrollments(day).order_by(Enrollment.enrolled_at).all()

    data = slot.to_dict()
    data.update({
        'date': day.isoformat(),
        'description': slot.description_for(day),
        'enrolled': len(enrollments),
        'spotsLeft': max(slot.capacity - len(enrollments), 0),
        'students': [e.to_dict() for e in enrollments],
    })
    return json_success(data)

@slots_bp.route('/<int:slot_id>/eligible-clients', methods=['GET'])
@login_required
@staff_required
def eligible_clients(slot_id):
    """Eligible clients of the business not yet enrolled in this occurrence"""
    slot = business_slot_or_404(slot_id)
    day = request_date()
    enrolled_ids = [e.client_id for e in slot.active_enrollments(day)]

    query = User.query.filter_by(
        business_id=current_user.business_id,
        role=ROLE_CLIENT,
        is_eligible=True,
        is_active=True
    )
    if enrolled_ids:
        query = query.filter(User.id.notin_(enrolled_ids))
    clients = query.order_by(User.name).all()
    return json_success([c.to_dict() for c in clients])

@slots_bp.route('/<int:slot_id>/students/<int:client_id>', methods=['POST'])
@login_required
@staff_required
def enroll_student(slot_id, client_id):
    slot = business_slot_or_404(slot_id)
    if not slot.is_active:
        return json_error('SLOT_INACTIVE', 'Slot is not active', 400)

    client = business_client(client_id)
    if not client:
        return json_error('CLIENT_NOT_FOUND', 'Client not found', 404)

    day = request_date()
    enrollment = enroll_client(slot, client, day)

    log_audit('create', 'enrollment', entity_id=enrollment.id, details={
        'slot_id': slot.id,
        'client_id': client.id,
        'client_name': client.name,
        'date': day
    })
    return json_success(enrollment.to_dict(), 201)

@slots_bp.route('/<int:slot_id>/students/<int:client_id>', methods=['DELETE'])
@login_required
@staff_required
def remove_student(slot_id, client_id):
    slot = business_slot_or_404(slot_id)
    day = request_date()

    enrollment = find_enrollment(slot, client_id, day)
    if enrollment is None or not enrollment.is_active():
        return json_error('ENROLLMENT_NOT_FOUND', 'Client is not enrolled in this slot', 404)

    cancel_enrollment(enrollment)
    log_audit('cancel', 'enrollment', entity_id=enrollment.id, details={
        'slot_id': slot.id,
        'client_id': client_id,
        'date': day
    })
    return json_success(None)

@slots_bp.route('/enrollments/<int:enrollment_id>', methods=['DELETE'])
@login_required
@staff_required
def remove_enrollment(enrollment_id):
    enrollment = Enrollment.query.join(Slot).filter(
        Enrollment.id == enrollment_id,
        Slot.business_id == current_user.business_id
    ).first_or_404(description='Enrollment not found')

    cancel_enrollment(enrollment)
    log_audit('cancel', 'enrollment', entity_id=enrollment.id, details={
        'slot_id': enrollment.slot_id,
        'client_id': enrollment.client_id,
        'date': enrollment.date
    })
    return json_success(None)

@slots_bp.route('/<int:slot_id>/students/<int:client_id>/attendance', methods=['PATCH'])
@login_required
@staff_required
def update_attendance(slot_id, client_id):
    slot = business_slot_or_404(slot_id)
    form = AttendanceForm()
    if not form.validate_on_submit():
        return form_error(form, 'DATE_MISSING', 'Date parameter is required')

    enrollment = find_enrollment(slot, client_id, form.date.data)
    if enrollment is None or not enrollment.is_active():
        return json_error('ENROLLMENT_NOT_FOUND', 'Client is not enrolled in this slot', 404)

    attendance = form.attendance.data if form.attendance.raw_data else None
    set_attendance(enrollment, attendance)

    log_audit('update', 'attendance', entity_id=enrollment.id, details={
        'slot_id': slot.id,
        'client_id': client_id,
        'date': enrollment.date,
        'attendance': enrollment.attendance
    })
    return json_success({'id': enrollment.id, 'attendance': bool(enrollment.attendance)})

@slots_bp.route('/<int:slot_id>/description', methods=['PATCH'])
@login_required
@staff_required
def update_description(slot_id):
    """Set the description for one occurrence, or the slot default when no date is given"""
    slot = business_slot_or_404(slot_id)
    form = SlotDescriptionForm()
    if not form.validate_on_submit():
        return form_error(form)

    day = form.date.data
    if day is None:
        slot.description = form.description.data
    else:
        override = slot.descriptions.filter_by(date=day).first()
        if override:
            override.description = form.description.data
        else:
            db.session.add(SlotDescription(slot_id=slot.id, date=day, description=form.description.data))
    db.session.commit()

    log_audit('update', 'slot_description', entity_id=slot.id, details={
        'date': day,
        'description': form.description.data
    })
    return json_success({'date': day.isoformat() if day else None, 'description': slot.description_for(day)})
