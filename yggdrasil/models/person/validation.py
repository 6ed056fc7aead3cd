from yggdrasil.validation import NOT_SET, Field, validate

from .enums import Gender


def _person_fields(is_living_default):
    return {
        'firstName': Field(required=True, min_length=1, max_length=100),
        'lastName': Field(max_length=100),
        'middleName': Field(max_length=100),
        'maidenName': Field(max_length=100),
        'nickname': Field(max_length=50),
        'gender': Field(choices=Gender._ALL),
        'birthDate': Field('date'),
        'birthPlace': Field(max_length=200),
        'deathDate': Field('date'),
        'deathPlace': Field(max_length=200),
        'isLiving': Field('bool', default=is_living_default),
        'occupation': Field(max_length=200),
        'biography': Field(max_length=5000),
        'notes': Field(max_length=2000),
        'profilePhotoUrl': Field('url', max_length=2048),
    }


create_fields = _person_fields(is_living_default=True)
update_fields = _person_fields(is_living_default=NOT_SET)


def validate_person_create(data):
    return validate(data, create_fields)


def validate_person_update(data):
    "Only the supplied fields are returned, a None value means the attribute is to be removed"
    return validate(data, update_fields, partial=True)
