from yggdrasil.validation import Field, validate

registration_fields = {
    'email': Field('email', required=True, max_length=254),
    'name': Field(required=True, min_length=2, max_length=100),
    # absent for users that authenticate elsewhere
    'password': Field(min_length=8, max_length=100),
}


def validate_user_registration(data):
    record = validate(data, registration_fields)
    record['email'] = record['email'].strip()
    return record
