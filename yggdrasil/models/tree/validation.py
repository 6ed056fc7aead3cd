from yggdrasil.validation import Field, validate

create_fields = {
    'treeName': Field(required=True, min_length=1, max_length=100),
    'description': Field(max_length=500),
    'isPublic': Field('bool', default=False),
    'sharedWith': Field('email_list', default=[]),
}

update_fields = {
    'treeName': Field(required=True, min_length=1, max_length=100),
    'description': Field(max_length=500),
    'isPublic': Field('bool'),
    'sharedWith': Field('email_list'),
    'rootPersonId': Field(min_length=1, max_length=100),
}


def validate_tree_create(data):
    return validate(data, create_fields)


def validate_tree_update(data):
    return validate(data, update_fields, partial=True)
