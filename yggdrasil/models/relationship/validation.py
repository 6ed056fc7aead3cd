from yggdrasil.exceptions import ValidationError
from yggdrasil.validation import Field, validate

from .enums import RelationshipType

create_fields = {
    'person1Id': Field(required=True, min_length=1, max_length=100),
    'person2Id': Field(required=True, min_length=1, max_length=100),
    'relationshipType': Field(required=True, choices=RelationshipType._ALL),
    'treeId': Field(required=True, min_length=1, max_length=100),
}


def validate_relationship_create(data):
    errors, record = [], {}
    try:
        record = validate(data, create_fields)
    except ValidationError as err:
        errors = err.errors
        if isinstance(data, dict):
            record = data

    person1_id = record.get('person1Id')
    if person1_id and person1_id == record.get('person2Id'):
        errors.append({'field': 'person2Id', 'message': 'A person cannot have a relationship with themselves'})
    if errors:
        raise ValidationError(errors)
    return record
