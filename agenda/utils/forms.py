from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import BooleanField

# Accepted spellings of an ISO timestamp in request bodies
ISO_DATETIME_FORMATS = [
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M',
    '%Y-%m-%d %H:%M',
]

def form_value(value):
    """JSON scalar as WTForms expects it: text, except booleans; null counts as absent"""
    if value is None:
        return ''
    if isinstance(value, (bool, str)):
        return value
    return str(value)

class ApiForm(FlaskForm):
    """Base form for JSON bodies; Flask-WTF reads request.get_json() as form data"""
    class Meta(FlaskForm.Meta):
        csrf = False

        def wrap_formdata(self, form, formdata):
            formdata = super().wrap_formdata(form, formdata)
            if formdata is None or not request.is_json:
                return formdata
            return ImmutableMultiDict(
                [(key, form_value(value)) for key, value in formdata.items(multi=True)]
            )

class JSONBooleanField(BooleanField):
    """Boolean that keeps its default when the key is absent from the body"""
    def process_formdata(self, valuelist):
        if valuelist:
            super().process_formdata(valuelist)
