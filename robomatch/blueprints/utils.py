# robomatch/blueprints/utils.py
from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict

from ..exceptions import ValidationError


class ApiForm(FlaskForm):
    """JSON/form payload validation; CSRF is enforced per request in create_app."""

    class Meta:
        csrf = False


def json_payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object.")
    return data


def _json_formdata():
    # JSON null means "empty", the way a blank form input does
    if not request.is_json:
        return None
    return ImmutableMultiDict({k: "" if v is None else v for k, v in json_payload().items()})


def validated(form_cls, **kwargs):
    formdata = _json_formdata()
    if formdata is not None:
        kwargs.setdefault("formdata", formdata)
    form = form_cls(**kwargs)
    if not form.validate_on_submit():
        raise ValidationError("Invalid input.", fields=form.errors)
    return form


def page_arg(name: str = "page") -> int:
    try:
        return max(int(request.args.get(name, 1)), 1)
    except (TypeError, ValueError):
        return 1
