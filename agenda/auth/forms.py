from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email
from agenda.utils.forms import ApiForm, JSONBooleanField

class LoginForm(ApiForm):
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember_me = JSONBooleanField('Remember Me', name='rememberMe', default=False)
