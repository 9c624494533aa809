from wtforms import StringField, TextAreaField, IntegerField, DateField, TimeField
from wtforms.validators import DataRequired, InputRequired, Optional, Length, NumberRange, ValidationError
from agenda.utils.forms import ApiForm, JSONBooleanField

class SlotForm(ApiForm):
    """Form for creating a recurring slot"""
    service_id = IntegerField('Service', name='serviceId', validators=[InputRequired()])
    staff_id = IntegerField('Staff', name='staffId', validators=[Optional()])
    day_of_week = IntegerField('Day of Week', name='dayOfWeek', validators=[InputRequired(), NumberRange(min=0, max=6)])
    start_time = TimeField('Start Time', name='startTime', validators=[InputRequired()], format='%H:%M')
    end_time = TimeField('End Time', name='endTime', validators=[InputRequired()], format='%H:%M')
    capacity = IntegerField('Capacity', validators=[InputRequired(), NumberRange(min=1)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=2000)])

    def validate_end_time(self, end_time):
        if self.start_time.data and end_time.data <= self.start_time.data:
            raise ValidationError('End time must be after start time.')

class AttendanceForm(ApiForm):
    date = DateField('Date', validators=[InputRequired()], format='%Y-%m-%d')
    # Absent means toggle
    attendance = JSONBooleanField('Attendance', default=None)

class SlotDescriptionForm(ApiForm):
    date = DateField('Date', validators=[Optional()], format='%Y-%m-%d')
    description = StringField('Description', validators=[DataRequired(), Length(max=2000)])
