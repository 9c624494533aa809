from wtforms import StringField, PasswordField, TextAreaField, IntegerField
from wtforms.validators import DataRequired, InputRequired, Email, Length, Optional, AnyOf, ValidationError
from agenda.models.user import User, STAFF_ROLES
from agenda.utils.forms import ApiForm

class StaffCreateForm(ApiForm):
    """Form for adding a staff member to the business"""
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    name = StringField('Name', validators=[DataRequired(), Length(min=2, max=50)])
    phone = StringField('Phone Number', validators=[Optional(), Length(max=20)])
    role = StringField('Role', validators=[DataRequired(), AnyOf(STAFF_ROLES)])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=6)])

    def validate_email(self, email):
        user = User.query.filter_by(email=email.data).first()
        if user:
            raise ValidationError('Email already registered. Please use a different email.')

class StaffUpdateForm(ApiForm):
    """Form for updating an existing staff member"""
    id = IntegerField('Id', validators=[InputRequired()])
    email = StringField('Email', validators=[Optional(), Email(), Length(max=120)])
    name = StringField('Name', validators=[Optional(), Length(min=2, max=50)])
    phone = StringField('Phone Number', validators=[Optional(), Length(max=20)])
    role = StringField('Role', validators=[Optional(), AnyOf(STAFF_ROLES)])
    password = PasswordField('New Password', validators=[Optional(), Length(min=6)])

    def validate_email(self, email):
        user = User.query.filter_by(email=email.data).first()
        if user and user.id != self.id.data:
            raise ValidationError('Email already registered. Please use a different email.')

class CategoryForm(ApiForm):
    """Form for creating a service category"""
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=500)])
    color = StringField('Color', validators=[Optional(), Length(max=20)])

class CategoryUpdateForm(ApiForm):
    name = StringField('Name', validators=[Optional(), Length(max=100)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=500)])
    color = StringField('Color', validators=[Optional(), Length(max=20)])
