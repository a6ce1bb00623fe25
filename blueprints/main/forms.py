"""
Booking form using Flask-WTF.
Required fields are enforced here; the booking writer trusts its input.
"""

from flask_wtf import FlaskForm
from wtforms import DateField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, ValidationError

from utils.validators import validate_phone as is_valid_phone

CUSTOM_PLAN = ('Custom Plan', 'I need a Custom Plan')


class BookingForm(FlaskForm):
    """Trip booking request."""

    name = StringField('Full Name', validators=[
        DataRequired(message='Your name is required'),
        Length(max=120)
    ])

    phone = StringField('Phone', validators=[
        DataRequired(message='A phone number is required')
    ])

    travelers = IntegerField('Travelers', default=2, validators=[
        DataRequired(message='Number of travelers is required'),
        NumberRange(min=1, max=50, message='Between 1 and 50 travelers')
    ])

    date = DateField('Travel Date', format='%Y-%m-%d', validators=[
        DataRequired(message='Pick a travel date')
    ])

    package = SelectField('Package', choices=[], validators=[
        DataRequired(message='Choose a package')
    ])

    notes = TextAreaField('Notes', validators=[
        Optional(),
        Length(max=2000)
    ])

    def set_package_choices(self, package_names):
        """Populate the package select from the loaded catalog, plus a custom plan."""
        self.package.choices = ([('', 'Select a package')] + [(name, name) for name in package_names]
                                + [CUSTOM_PLAN])

    def validate_phone(self, field):
        if not is_valid_phone(field.data):
            raise ValidationError('Enter a valid phone number')

    def to_booking(self):
        return {
            'name': self.name.data.strip(),
            'phone': self.phone.data.strip(),
            'travelers': self.travelers.data,
            'date': self.date.data.isoformat(),
            'package': self.package.data,
            'notes': (self.notes.data or '').strip(),
        }
