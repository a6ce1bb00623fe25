"""
Admin console forms using Flask-WTF.
"""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import HiddenField, PasswordField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from models.booking import BOOKING_STATUSES
from models.package import PACKAGE_THEMES
from utils.messages import MESSAGES

IMAGE_EXTENSIONS = ['png', 'jpg', 'jpeg', 'webp', 'gif']


class AdminLoginForm(FlaskForm):
    """Admin console gate."""

    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])


class BookingStatusForm(FlaskForm):
    """Single-field status change."""

    status = SelectField('Status', choices=[(s, s.title()) for s in BOOKING_STATUSES])


class UserEditForm(FlaskForm):
    """Editable profile fields plus the (non-functional) password reset."""

    full_name = StringField('Full Name', validators=[Optional(), Length(max=120)])
    address = StringField('Address', validators=[Optional(), Length(max=250)])
    phone = StringField('Phone', validators=[Optional(), Length(max=30)])
    new_password = PasswordField('New Password', validators=[Optional(), Length(min=6)])


class DestinationForm(FlaskForm):
    """Destination create/edit with optional image replacement."""

    name = StringField('Name', validators=[DataRequired(), Length(max=120)])
    region = StringField('Region', validators=[DataRequired(), Length(max=120)])
    season = StringField('Season', validators=[DataRequired(), Length(max=60)])
    description = TextAreaField('Description', validators=[DataRequired()])
    image = HiddenField('Current Image URL')
    image_file = FileField('Image', validators=[
        FileAllowed(IMAGE_EXTENSIONS, MESSAGES['invalid_file_type'])
    ])


class PackageForm(FlaskForm):
    """Package create/edit; features are one per line."""

    name = StringField('Name', validators=[DataRequired(), Length(max=120)])
    price = StringField('Price', validators=[DataRequired(), Length(max=40)])
    theme = SelectField('Theme', choices=[(t, t.title()) for t in PACKAGE_THEMES], default='white')
    features = TextAreaField('Features (one per line)')
