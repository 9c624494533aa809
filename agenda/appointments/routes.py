from datetime import datetime, time, timedelta
from flask import Blueprint, request, current_app
from flask_login import login_required, current_user
from agenda import db
from agenda.models.user import User, ROLE_CLIENT
from agenda.models.service import Service
from agenda.models.appointment import Appointment, ALLOWED_STATUSES, STATUS_CANCELLED
from agenda.appointments.forms import (
    AvailabilityCheckForm, AppointmentCreateForm, AppointmentUpdateForm, StatusNotificationForm
)
from agenda.appointments.availability import find_conflicts, is_staff_available, lock_staff
from agenda.appointments.notifications import apply_status
from agenda.utils.api import json_success, json_error, form_error
from agenda.utils.audit import log_audit
from agenda.utils.common import staff_required, client_required

appointments_bp = Blueprint('appointments', __name__, url_prefix='/api')

def business_appointment_or_404(appointment_id):
    return Appointment.query.filter_by(
        id=appointment_id,
        business_id=current_user.business_id
    ).first_or_404(description='Appointment not found')

@appointments_bp.route('/business/appointments', methods=['GET'])
@login_required
@staff_required
def list_appointments():
    """List the business's appointments, optionally for one day, staff member or status"""
    query = Appointment.query.filter_by(business_id=current_user.business_id)

    date_str = request.args.get('date')
    if date_str:
        try:
            day = datetime.strptime(date_str, '%Y-%m-%d').date()
        except ValueError:
            return json_error('INVALID_DATE', 'Date must be YYYY-MM-DD', 400)
        day_start = datetime.combine(day, time(0, 0))
        query = query.filter(
            Appointment.start_time >= day_start,
            Appointment.start_time < day_start + timedelta(days=1)
        )

    staff_id = request.args.get('staffId', type=int)
    if staff_id:
        query = query.filter_by(staff_id=staff_id)

    status = request.args.get('status')
    if status:
        if status not in ALLOWED_STATUSES:
            return json_error('INVALID_STATUS', 'Invalid status value', 400)
        query = query.filter_by(status=status)

    appointments = query.order_by(Appointment.start_time).all()
    return json_success([a.to_dict() for a in appointments])

@appointments_bp.route('/business/appointments', methods=['PUT'])
@login_required
@staff_required
def check_availability():
    """Answer whether a staff member is free for the proposed interval"""
    form = AvailabilityCheckForm()
    if not form.validate_on_submit():
        return form_error(form, 'MISSING_FIELDS', 'Missing required fields: staffId, date, startTime, duration')

    staff = User.query.filter_by(id=form.staff_id.data, business_id=current_user.business_id).first()
    if not staff or not staff.is_staff():
        return json_error('STAFF_NOT_FOUND', 'Staff member not found', 404)

    available = is_staff_available(staff.id, form.start_time.data, form.duration.data)
    return json_success({'available': available})

@appointments_bp.route('/business/appointments', methods=['POST'])
@login_required
@staff_required
def create_appointment():
    """Book a new appointment in PENDING state"""
    form = AppointmentCreateForm()
    if not form.validate_on_submit():
        return form_error(form)

    business_id = current_user.business_id
    client = User.query.filter_by(id=form.client_id.data, business_id=business_id, role=ROLE_CLIENT).first()
    if not client:
        return json_error('CLIENT_NOT_FOUND', 'Client not found', 404)
    if not client.is_eligible:
        return json_error('CLIENT_NOT_ELIGIBLE', 'Client is not eligible for bookings', 400)

    service = Service.query.filter_by(id=form.service_id.data, business_id=business_id, is_active=True).first()
    if not service:
        return json_error('SERVICE_NOT_FOUND', 'Service not found', 404)

    staff = User.query.filter_by(id=form.staff_id.data, business_id=business_id).first()
    if not staff or not staff.is_staff():
        return json_error('STAFF_NOT_FOUND', 'Staff member not found', 404)

    start = form.start_time.data
    duration = form.duration.data or service.duration_minutes

    # Overlap check and insert share one transaction under the staff row lock
    lock_staff(staff.id)
    conflicts = find_conflicts(staff.id, start, duration)
    if conflicts:
        db.session.rollback()
        return json_error(
            'TIME_SLOT_UNAVAILABLE',
            'Staff member already has an appointment at this time',
            409,
            details={'conflicts': [c.id for c in conflicts]}
        )

    appointment = Appointment(
        business_id=business_id,
        client_id=client.id,
        staff_id=staff.id,
        service_id=service.id,
        start_time=start,
        duration=duration,
        notes=form.notes.data or None
    )
    db.session.add(appointment)
    db.session.commit()

    log_audit('create', 'appointment', entity_id=appointment.id, details={
        'client_id': client.id,
        'staff_id': staff.id,
        'service_id': service.id,
        'service_name': service.name,
        'appointment_time': start.strftime('%Y-%m-%d %H:%M'),
        'duration': duration,
        'price': service.price
    })

    return json_success(appointment.to_dict(), 201)

@appointments_bp.route('/business/appointments/<int:appointment_id>', methods=['PATCH'])
@login_required
@staff_required
def update_appointment(appointment_id):
    """Update status, time, notes, staff or service of an appointment"""
    form = AppointmentUpdateForm()
    if not form.validate_on_submit():
        if form.status.errors:
            return json_error('INVALID_STATUS', 'Invalid status value', 400)
        return form_error(form)

    appointment = business_appointment_or_404(appointment_id)

    staff = service = None
    if form.staff_id.data:
        staff = User.query.filter_by(id=form.staff_id.data, business_id=current_user.business_id).first()
        if not staff or not staff.is_staff():
            return json_error('STAFF_NOT_FOUND', 'Staff member not found', 404)
    if form.service_id.data:
        service = Service.query.filter_by(id=form.service_id.data, business_id=current_user.business_id).first()
        if not service:
            return json_error('SERVICE_NOT_FOUND', 'Service not found', 404)

    old_values = {
        'status': appointment.status,
        'scheduled_for': appointment.start_time,
        'staff_id': appointment.staff_id,
        'service_id': appointment.service_id
    }

    if form.status.data:
        appointment.status = form.status.data
    if form.scheduled_for.data:
        appointment.start_time = form.scheduled_for.data
    if form.notes.raw_data:
        appointment.notes = form.notes.data
    if staff:
        appointment.staff_id = staff.id
    if service:
        appointment.service_id = service.id
        appointment.duration = service.duration_minutes

    db.session.commit()

    log_audit('update', 'appointment', entity_id=appointment.id, details={
        'old_values': old_values,
        'new_values': {
            'status': appointment.status,
            'scheduled_for': appointment.start_time,
            'staff_id': appointment.staff_id,
            'service_id': appointment.service_id
        }
    })

    return json_success(appointment.to_dict())

@appointments_bp.route('/appointments/<int:appointment_id>/notifications', methods=['POST'])
@login_required
@staff_required
def send_status_notifications(appointment_id):
    """Set an appointment's status and send the emails registered for it"""
    form = StatusNotificationForm()
    if not form.validate_on_submit():
        return json_error('INVALID_STATUS', 'Invalid status value', 400, details=form.errors)

    appointment = business_appointment_or_404(appointment_id)
    result = apply_status(
        appointment,
        form.status.data,
        send_email=form.send_email.data,
        notify_client=form.notify_client.data,
        notify_business=form.notify_business.data
    )

    log_audit('update', 'appointment_status', entity_id=appointment.id, details={
        'old_status': result['previousStatus'],
        'new_status': result['status'],
        'emails_sent': result['emailsSent'],
        'payment_processed': result['paymentProcessed'],
        'errors': result['errors']
    })

    return json_success(result)

@appointments_bp.route('/appointments/<int:appointment_id>/cancel', methods=['POST'])
@login_required
@client_required
def cancel_appointment(appointment_id):
    """Cancel one of the current client's appointments"""
    appointment = db.get_or_404(Appointment, appointment_id, description='Appointment not found')

    # Ensure the appointment belongs to the current user
    if appointment.client_id != current_user.id:
        return json_error('FORBIDDEN', 'You can only cancel your own appointments', 403)

    if appointment.start_time <= datetime.utcnow():
        return json_error('APPOINTMENT_STARTED', 'Cannot cancel an appointment that has already started', 400)

    old_status = appointment.status
    appointment.cancel()
    appointment.append_log('Cancelada pelo cliente')
    db.session.commit()

    log_success = log_audit('cancel', 'appointment', entity_id=appointment.id, details={
        'old_status': old_status,
        'service_id': appointment.service_id,
        'staff_id': appointment.staff_id,
        'appointment_time': appointment.start_time.strftime('%Y-%m-%d %H:%M'),
        'cancellation_time': datetime.utcnow().strftime('%Y-%m-%d %H:%M')
    })
    if not log_success:
        current_app.logger.error(f"Failed to create audit log for appointment cancellation {appointment.id}")

    return json_success({'id': appointment.id, 'status': STATUS_CANCELLED})
