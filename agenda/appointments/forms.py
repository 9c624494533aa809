from wtforms import StringField, TextAreaField, IntegerField, DateField, DateTimeField
from wtforms.validators import DataRequired, InputRequired, Optional, Length, NumberRange, AnyOf, ValidationError
from agenda.models.appointment import ALLOWED_STATUSES
from agenda.appointments.availability import MAX_DURATION_MINUTES
from agenda.utils.forms import ApiForm, JSONBooleanField, ISO_DATETIME_FORMATS

class AvailabilityCheckForm(ApiForm):
    """Is a staff member free for [startTime, startTime + duration) on date?"""
    staff_id = IntegerField('Staff', name='staffId', validators=[InputRequired()])
    date = DateField('Date', validators=[InputRequired()], format='%Y-%m-%d')
    start_time = DateTimeField('Start Time', name='startTime', validators=[InputRequired()],
                               format=ISO_DATETIME_FORMATS)
    duration = IntegerField('Duration (minutes)', validators=[InputRequired(), NumberRange(min=1, max=MAX_DURATION_MINUTES)])

    def validate_start_time(self, start_time):
        if self.date.data and start_time.data and start_time.data.date() != self.date.data:
            raise ValidationError('Start time must fall on the requested date.')

class AppointmentCreateForm(ApiForm):
    """Form for booking a new appointment"""
    client_id = IntegerField('Client', name='clientId', validators=[InputRequired()])
    staff_id = IntegerField('Staff', name='staffId', validators=[InputRequired()])
    service_id = IntegerField('Service', name='serviceId', validators=[InputRequired()])
    start_time = DateTimeField('Start Time', name='startTime', validators=[InputRequired()],
                               format=ISO_DATETIME_FORMATS)
    duration = IntegerField('Duration (minutes)', validators=[Optional(), NumberRange(min=1, max=MAX_DURATION_MINUTES)])
    notes = TextAreaField('Notes', validators=[Optional(), Length(max=1000)])

class AppointmentUpdateForm(ApiForm):
    """Partial update; no transition rules, only known status values"""
    status = StringField('Status', validators=[Optional(), AnyOf(ALLOWED_STATUSES, message='Invalid status value')])
    scheduled_for = DateTimeField('Scheduled For', name='scheduledFor', validators=[Optional()],
                                  format=ISO_DATETIME_FORMATS)
    notes = TextAreaField('Notes', validators=[Optional()])
    staff_id = IntegerField('Staff', name='staffId', validators=[Optional()])
    service_id = IntegerField('Service', name='serviceId', validators=[Optional()])

class StatusNotificationForm(ApiForm):
    status = StringField('Status', validators=[DataRequired(), AnyOf(ALLOWED_STATUSES, message='Invalid status value')])
    send_email = JSONBooleanField('Send Email', name='sendEmail', default=True)
    notify_client = JSONBooleanField('Notify Client', name='notifyClient', default=True)
    notify_business = JSONBooleanField('Notify Business', name='notifyBusiness', default=True)
