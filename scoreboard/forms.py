"""
Base form for validating JSON request bodies with WTForms.
"""
from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

from scoreboard.errors import ValidationError


def json_payload():
    """The request's JSON object; an empty or missing body reads as {}."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _form_value(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def json_formdata(payload):
    """
    Flatten a JSON object into form data.

    Lists become ``name-0``, ``name-1``, ... so they bind to a FieldList.
    Nulls are dropped, so a null value reads the same as an absent key.
    """
    formdata = MultiDict()
    for key, value in (payload or {}).items():
        if value is None or isinstance(value, dict):
            continue
        if isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if item is not None:
                    formdata.add(f'{key}-{index}', _form_value(item))
        else:
            formdata.add(key, _form_value(value))
    return formdata


class ApiForm(FlaskForm):
    class Meta:
        csrf = False

    @classmethod
    def load(cls, payload):
        """Bind ``payload`` and validate it, raising ValidationError on failure."""
        if payload is not None and not isinstance(payload, dict):
            raise ValidationError('Request body must be a JSON object')
        form = cls(formdata=json_formdata(payload))
        if not form.validate():
            raise ValidationError(form.first_error())
        return form

    def first_error(self):
        for field in self:
            for error in field.errors:
                # FieldList nests entry errors one level deeper
                if isinstance(error, list):
                    if not error:
                        continue
                    error = error[0]
                return f'{field.label.text}: {error}'
        for error in self.form_errors:
            return error
        return 'Invalid request'
