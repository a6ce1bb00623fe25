"""
Authentication forms using Flask-WTF.
Provides login and registration forms with CSRF protection.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Length, Optional, ValidationError

from utils.validators import validate_username as is_valid_username


class LoginForm(FlaskForm):
    """Login form with username and password."""

    username = StringField('Username', validators=[
        DataRequired(message='Username is required')
    ])

    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required')
    ])


class RegisterForm(FlaskForm):
    """Registration form; username is the only login identifier."""

    username = StringField('Username', validators=[
        DataRequired(message='Username is required'),
        Length(max=60)
    ])

    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required'),
        Length(min=6, message='Password must be at least 6 characters')
    ])

    full_name = StringField('Full Name', validators=[
        DataRequired(message='Full name is required'),
        Length(max=120)
    ])

    address = StringField('Address', validators=[
        Optional(),
        Length(max=250)
    ])

    phone = StringField('Phone', validators=[
        Optional(),
        Length(max=30)
    ])

    def validate_username(self, field):
        if not is_valid_username(field.data):
            raise ValidationError('Username must contain at least one letter or digit')
