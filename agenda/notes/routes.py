from flask import Blueprint
from flask_login import login_required, current_user
from agenda import db
from agenda.models.user import User, ROLE_CLIENT
from agenda.models.appointment import Appointment
from agenda.models.note import Note, NOTE_GENERAL
from agenda.notes.forms import NoteForm, NoteUpdateForm
from agenda.utils.api import json_success, json_error, form_error
from agenda.utils.audit import log_audit
from agenda.utils.common import staff_required

notes_bp = Blueprint('notes', __name__, url_prefix='/api')

def business_client_or_404(client_id):
    return User.query.filter_by(
        id=client_id,
        business_id=current_user.business_id,
        role=ROLE_CLIENT
    ).first_or_404(description='Client not found')

def client_appointment(client, appointment_id):
    """The appointment if it belongs to this client and business, else None"""
    return Appointment.query.filter_by(
        id=appointment_id,
        client_id=client.id,
        business_id=current_user.business_id
    ).first()

def note_summary(content):
    return content[:50] + ('...' if len(content) > 50 else '')

def create_note(client, form, appointment_id=None):
    note = Note(
        business_id=current_user.business_id,
        client_id=client.id,
        created_by_id=current_user.id,
        content=form.content.data,
        note_type=form.note_type.data or NOTE_GENERAL,
        appointment_id=appointment_id
    )
    db.session.add(note)
    db.session.commit()

    log_audit('create', 'note', entity_id=note.id, details={
        'client_id': client.id,
        'client_name': client.name,
        'appointment_id': appointment_id,
        'note_type': note.note_type,
        'note_summary': note_summary(note.content)
    })
    return note

@notes_bp.route('/staff/clients/<int:client_id>/notes', methods=['GET'])
@login_required
@staff_required
def client_notes(client_id):
    """Notes about a client, newest first"""
    client = business_client_or_404(client_id)
    notes = Note.query.filter_by(
        client_id=client.id,
        business_id=current_user.business_id
    ).order_by(Note.created_at.desc(), Note.id.desc()).all()
    return json_success([n.to_dict(viewer=current_user) for n in notes])

@notes_bp.route('/staff/clients/<int:client_id>/notes', methods=['POST'])
@login_required
@staff_required
def add_client_note(client_id):
    client = business_client_or_404(client_id)
    form = NoteForm()
    if not form.validate_on_submit():
        if form.content.errors:
            return json_error('CONTENT_REQUIRED', 'Content is required', 400)
        return form_error(form, 'INVALID_NOTE', 'Invalid note data')

    appointment_id = None
    if form.appointment_id.data:
        appointment = client_appointment(client, form.appointment_id.data)
        if not appointment:
            return json_error('INVALID_APPOINTMENT', 'Invalid appointment', 400)
        appointment_id = appointment.id

    note = create_note(client, form, appointment_id)
    return json_success(note.to_dict(viewer=current_user), 201)

@notes_bp.route('/staff/clients/<int:client_id>/notes/<int:note_id>', methods=['PUT'])
@login_required
@staff_required
def edit_client_note(client_id, note_id):
    """Only the author may edit a note"""
    client = business_client_or_404(client_id)
    note = Note.query.filter_by(id=note_id, client_id=client.id).first_or_404(description='Note not found')
    if note.created_by_id != current_user.id:
        return json_error('FORBIDDEN', 'Not allowed to edit this note', 403)

    form = NoteUpdateForm()
    if not form.validate_on_submit():
        return form_error(form, 'INVALID_NOTE', 'Invalid note data')

    if form.appointment_id.data:
        appointment = client_appointment(client, form.appointment_id.data)
        if not appointment:
            return json_error('INVALID_APPOINTMENT', 'Invalid appointment', 400)
        note.appointment_id = appointment.id
    if form.content.data:
        note.content = form.content.data
    if form.note_type.data:
        note.note_type = form.note_type.data
    db.session.commit()

    log_audit('update', 'note', entity_id=note.id, details={
        'client_id': client.id,
        'note_type': note.note_type,
        'note_summary': note_summary(note.content)
    })
    return json_success(note.to_dict(viewer=current_user))

@notes_bp.route('/staff/clients/<int:client_id>/notes/<int:note_id>', methods=['DELETE'])
@login_required
@staff_required
def delete_client_note(client_id, note_id):
    client = business_client_or_404(client_id)
    note = Note.query.filter_by(id=note_id, client_id=client.id).first_or_404(description='Note not found')
    if note.created_by_id != current_user.id:
        return json_error('FORBIDDEN', 'Not allowed to delete this note', 403)

    audit_details = {
        'client_id': client.id,
        'note_type': note.note_type,
        'note_summary': note_summary(note.content)
    }
    db.session.delete(note)
    db.session.commit()

    log_audit('delete', 'note', entity_id=note_id, details=audit_details)
    return json_success(None)

@notes_bp.route('/appointments/<int:appointment_id>/notes', methods=['GET'])
@login_required
@staff_required
def appointment_notes(appointment_id):
    appointment = Appointment.query.filter_by(
        id=appointment_id,
        business_id=current_user.business_id
    ).first_or_404(description='Appointment not found')
    notes = appointment.appointment_notes.order_by(Note.created_at.desc(), Note.id.desc()).all()
    return json_success([n.to_dict(viewer=current_user) for n in notes])

@notes_bp.route('/appointments/<int:appointment_id>/notes', methods=['POST'])
@login_required
@staff_required
def add_appointment_note(appointment_id):
    appointment = Appointment.query.filter_by(
        id=appointment_id,
        business_id=current_user.business_id
    ).first_or_404(description='Appointment not found')

    form = NoteForm()
    if not form.validate_on_submit():
        if form.content.errors:
            return json_error('CONTENT_REQUIRED', 'Content is required', 400)
        return form_error(form, 'INVALID_NOTE', 'Invalid note data')

    note = create_note(appointment.client, form, appointment.id)
    return json_success(note.to_dict(viewer=current_user), 201)
