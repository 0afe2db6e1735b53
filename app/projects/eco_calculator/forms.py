from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import AnyOf, InputRequired, Length, Optional

from app.projects.eco_calculator.core.constants import KEYPAD_KEYS, MODE_VALUES, TRANSPORT_VALUES


def _as_text(value):
    """JSON bodies may carry numbers; fields always hold text."""
    if value is None:
        return value
    return str(value).strip()


class ModeForm(FlaskForm):
    mode = StringField('Mode',
                       filters=[_as_text],
                       validators=[
                           InputRequired(message='Mode is required'),
                           AnyOf(MODE_VALUES, message='Unknown mode')
                       ])


class TransportForm(FlaskForm):
    transport = StringField('Transport',
                            filters=[_as_text],
                            validators=[
                                InputRequired(message='Transport type is required'),
                                AnyOf(TRANSPORT_VALUES, message='Unknown transport type')
                            ])


class InputForm(FlaskForm):
    value = StringField('Value',
                        filters=[_as_text],
                        validators=[
                            Optional(),
                            Length(max=64, message='Input must be at most 64 characters')
                        ])


class KeyForm(FlaskForm):
    key = StringField('Key',
                      filters=[_as_text],
                      validators=[
                          InputRequired(message='Key is required'),
                          AnyOf(KEYPAD_KEYS, message='Unknown key')
                      ])


class CalculateForm(FlaskForm):
    value = StringField('Value',
                        filters=[_as_text],
                        validators=[
                            Optional(),
                            Length(max=64, message='Input must be at most 64 characters')
                        ])
    transport = StringField('Transport',
                            filters=[_as_text],
                            validators=[
                                Optional(),
                                AnyOf(TRANSPORT_VALUES, message='Unknown transport type')
                            ])
