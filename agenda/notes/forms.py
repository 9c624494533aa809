from wtforms import StringField, TextAreaField, IntegerField
from wtforms.validators import DataRequired, Optional, Length, AnyOf
from agenda.models.note import NOTE_TYPES, NOTE_GENERAL
from agenda.utils.forms import ApiForm

class NoteForm(ApiForm):
    """Form for adding a note about a client"""
    content = TextAreaField('Note', validators=[DataRequired(), Length(max=5000)])
    note_type = StringField('Type', name='noteType', default=NOTE_GENERAL,
                            validators=[Optional(), AnyOf(NOTE_TYPES, message='Invalid note type')])
    appointment_id = IntegerField('Appointment', name='appointmentId', validators=[Optional()])

class NoteUpdateForm(ApiForm):
    content = TextAreaField('Note', validators=[Optional(), Length(max=5000)])
    note_type = StringField('Type', name='noteType',
                            validators=[Optional(), AnyOf(NOTE_TYPES, message='Invalid note type')])
    appointment_id = IntegerField('Appointment', name='appointmentId', validators=[Optional()])
