# robomatch/blueprints/missions/forms.py
from wtforms import DateField, IntegerField, SelectField, StringField, TextAreaField, TimeField
from wtforms.validators import DataRequired, Email, Length, Optional as Opt

from ..utils import ApiForm


class MissionRequestForm(ApiForm):
    technician_id = IntegerField("Technician", validators=[DataRequired()])
    title = StringField("Title", validators=[DataRequired(), Length(max=200)])
    description = TextAreaField("Description", validators=[Opt(), Length(max=5000)])
    desired_date = DateField("Desired date", format="%Y-%m-%d", validators=[Opt()])
    desired_time = TimeField("Desired time", format="%H:%M", validators=[Opt()])
    # guests only; account holders are identified by their profile
    client_name = StringField("Your name", validators=[Opt(), Length(max=160)])
    client_email = StringField("Your email", validators=[Opt(), Email(), Length(max=255)])
    idempotency_key = StringField("Idempotency key", validators=[Opt(), Length(max=64)])


class RespondForm(ApiForm):
    decision = SelectField(
        "Decision",
        choices=[("accept", "Accept"), ("decline", "Decline")],
        validators=[DataRequired()],
    )


class MessageForm(ApiForm):
    body = TextAreaField("Message", validators=[DataRequired(), Length(max=5000)])
