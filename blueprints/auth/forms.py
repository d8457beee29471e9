"""
Authentication forms using Flask-WTF.
Flask-WTF reads JSON request bodies as form data, so the same form validates
API logins.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Length


class LoginForm(FlaskForm):
    """Login form with username and password."""

    # CSRFProtect checks the X-CSRFToken header for the whole app
    class Meta:
        csrf = False

    username = StringField('Usuario', validators=[
        DataRequired(message='El usuario es requerido'),
        Length(max=80)
    ])

    password = PasswordField('Contraseña', validators=[
        DataRequired(message='La contraseña es requerida')
    ])

    remember_me = BooleanField('Recordarme')
