# robomatch/blueprints/auth/forms.py
from wtforms import BooleanField, DecimalField, PasswordField, SelectField, StringField
from wtforms.validators import (
    URL,
    DataRequired,
    Email,
    Length,
    NumberRange,
    Optional as Opt,
    Regexp,
)

from ..utils import ApiForm

PASSWORD_VALIDATORS = [
    DataRequired(),
    Length(min=8, message="Password must be at least 8 characters."),
    Regexp(r"^(?=.*[A-Za-z])(?=.*\d).+$", message="Use letters and numbers."),
]


class RegisterForm(ApiForm):
    role = SelectField(
        "Account type",
        choices=[("client", "Client"), ("technician", "Technician")],
        validators=[DataRequired()],
    )
    first_name = StringField("First name", validators=[DataRequired(), Length(max=80)])
    last_name = StringField("Last name", validators=[DataRequired(), Length(max=80)])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=PASSWORD_VALIDATORS)
    phone = StringField("Phone", validators=[Opt(), Length(max=50)])
    linkedin_url = StringField("LinkedIn", validators=[Opt(), URL(), Length(max=255)])
    company_name = StringField("Company", validators=[Opt(), Length(max=160)])
    city = StringField("City", validators=[Opt(), Length(max=120)])
    hourly_rate = DecimalField("Hourly rate", places=2, validators=[Opt(), NumberRange(min=0)])


class LoginForm(ApiForm):
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=[DataRequired()])
    remember = BooleanField("Keep me signed in")
