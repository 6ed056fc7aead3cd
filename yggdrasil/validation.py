"""
Field-level validation shared by the entity codecs.

A codec declares its fields as a dict of name -> Field and hands the raw input to `validate()`,
which returns the normalized record or raises ValidationError listing every violated rule.
"""
import re

import pendulum

from yggdrasil.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
URL_PATTERN = re.compile(r'^https?://[^\s/$.?#][^\s]*$', re.IGNORECASE)

NOT_SET = object()


def is_email(value):
    return isinstance(value, str) and EMAIL_PATTERN.match(value.strip()) is not None


def is_date(value):
    "A YYYY-MM-DD string naming a real calendar day"
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        pendulum.from_format(value, 'YYYY-MM-DD')
    except ValueError:
        return False
    return True


class Field:
    def __init__(self, kind='string', required=False, min_length=None, max_length=None, choices=None, default=NOT_SET):
        assert kind in ('string', 'bool', 'date', 'email', 'url', 'email_list'), f'Unknown field kind `{kind}`'
        self.kind = kind
        self.required = required
        self.min_length = min_length
        self.max_length = max_length
        self.choices = choices
        self.default = default

    def check(self, value):
        "Return an error message for the (non-null) value, or None if it is acceptable"
        if self.kind == 'bool':
            return None if isinstance(value, bool) else 'Must be a boolean'

        if self.kind == 'email_list':
            if not isinstance(value, (list, tuple)):
                return 'Must be a list of email addresses'
            bad = [v for v in value if not is_email(v)]
            return f'Invalid email address(es): {", ".join(map(str, bad))}' if bad else None

        if not isinstance(value, str):
            return 'Must be a string'
        if self.min_length is not None and len(value) < self.min_length:
            if self.min_length == 1:
                return 'Cannot be empty'
            return f'Must be at least {self.min_length} characters'
        if self.max_length is not None and len(value) > self.max_length:
            return f'Must be at most {self.max_length} characters'
        if self.choices is not None and value not in self.choices:
            return f'Must be one of: {", ".join(self.choices)}'
        if self.kind == 'date' and not is_date(value):
            return 'Must be a valid date in YYYY-MM-DD format'
        if self.kind == 'email' and not is_email(value):
            return 'Invalid email format'
        if self.kind == 'url' and not URL_PATTERN.match(value):
            return 'Must be a valid http(s) URL'
        return None


def validate(data, fields, partial=False):
    """
    Validate `data` against `fields`.

    With partial=False (creation) required fields must be present and defaults are filled in.
    With partial=True (update) every field is optional, only the supplied keys are returned,
    and an explicit None on an optional field is kept to signal removal of that attribute.
    """
    if not isinstance(data, dict):
        raise ValidationError([{'field': 'input', 'message': 'Must be an object'}])

    errors = []
    for key in data:
        if key not in fields:
            errors.append({'field': key, 'message': 'Unexpected field'})

    record = {}
    for name, field in fields.items():
        if name not in data:
            if partial:
                continue
            if field.required:
                errors.append({'field': name, 'message': 'Field is required'})
            elif field.default is not NOT_SET:
                record[name] = list(field.default) if isinstance(field.default, list) else field.default
            continue

        value = data[name]
        if value is None:
            if field.required:
                errors.append({'field': name, 'message': 'Field is required' if not partial else 'Cannot be null'})
            elif partial:
                record[name] = None
            continue

        if message := field.check(value):
            errors.append({'field': name, 'message': message})
            continue
        record[name] = list(value) if field.kind == 'email_list' else value

    if partial and not errors and not record:
        errors.append({'field': 'input', 'message': 'No fields to update'})
    if errors:
        raise ValidationError(errors)
    return record
