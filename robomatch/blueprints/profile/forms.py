# robomatch/blueprints/profile/forms.py
from wtforms import BooleanField, DateField, DecimalField, IntegerField, StringField, TextAreaField
from wtforms.validators import URL, DataRequired, Email, Length, NumberRange, Optional as Opt

from ..utils import ApiForm


class ProfileForm(ApiForm):
    """Every field optional; the route applies only the keys the caller sent."""

    first_name = StringField("First name", validators=[Opt(), Length(max=80)])
    last_name = StringField("Last name", validators=[Opt(), Length(max=80)])
    email = StringField("Email", validators=[Opt(), Email(), Length(max=255)])
    phone = StringField("Phone", validators=[Opt(), Length(max=50)])
    linkedin_url = StringField("LinkedIn", validators=[Opt(), URL(), Length(max=255)])
    company_name = StringField("Company", validators=[Opt(), Length(max=160)])
    city = StringField("City", validators=[Opt(), Length(max=120)])
    bio = TextAreaField("About", validators=[Opt(), Length(max=5000)])
    photo_url = StringField("Photo", validators=[Opt(), URL(), Length(max=512)])
    hourly_rate = DecimalField("Hourly rate", places=2, validators=[Opt(), NumberRange(min=0)])
    accepts_travel = BooleanField("Accepts travel")
    max_travel_distance = IntegerField("Max travel distance (km)", validators=[Opt(), NumberRange(min=0)])


class AvailabilityForm(ApiForm):
    start_date = DateField("Start", format="%Y-%m-%d", validators=[DataRequired()])
    end_date = DateField("End", format="%Y-%m-%d", validators=[DataRequired()])
