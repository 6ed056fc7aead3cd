import pytest

from yggdrasil.exceptions import ValidationError
from yggdrasil.models.person.validation import validate_person_create, validate_person_update
from yggdrasil.models.relationship.validation import validate_relationship_create
from yggdrasil.models.tree.validation import validate_tree_create, validate_tree_update
from yggdrasil.models.user.validation import validate_user_registration
from yggdrasil.validation import Field, is_date, is_email, validate


def test_is_date():
    assert is_date('2000-01-31')
    assert is_date('2024-02-29')
    assert not is_date('2023-02-29')
    assert not is_date('2000-13-01')
    assert not is_date('2000-1-31')
    assert not is_date('31/01/2000')
    assert not is_date(20000131)


def test_is_email():
    assert is_email('john@example.com')
    assert is_email('john.smith+trees@mail.example.org')
    assert not is_email('john@example')
    assert not is_email('john.example.com')
    assert not is_email(None)


def test_validate_not_an_object():
    with pytest.raises(ValidationError) as error_info:
        validate(['treeName'], {'treeName': Field(required=True)})
    assert error_info.value.errors == [{'field': 'input', 'message': 'Must be an object'}]


def test_validate_reports_every_error():
    fields = {
        'name': Field(required=True, min_length=1, max_length=5),
        'flag': Field('bool'),
        'kind': Field(choices=('a', 'b')),
    }
    with pytest.raises(ValidationError) as error_info:
        validate({'name': 'too long', 'flag': 'yes', 'kind': 'c', 'extra': 1}, fields)
    assert error_info.value.errors == [
        {'field': 'extra', 'message': 'Unexpected field'},
        {'field': 'name', 'message': 'Must be at most 5 characters'},
        {'field': 'flag', 'message': 'Must be a boolean'},
        {'field': 'kind', 'message': 'Must be one of: a, b'},
    ]
    assert error_info.value.fields == ['extra', 'name', 'flag', 'kind']
    assert str(error_info.value).startswith('Validation failed: extra: Unexpected field; ')


def test_validate_user_registration():
    assert validate_user_registration({'email': ' sam@example.com ', 'name': 'Sam'}) == {
        'email': 'sam@example.com',
        'name': 'Sam',
    }

    with pytest.raises(ValidationError) as error_info:
        validate_user_registration({'email': 'sam', 'name': 'S', 'password': 'short'})
    assert error_info.value.fields == ['email', 'name', 'password']

    with pytest.raises(ValidationError) as error_info:
        validate_user_registration({})
    assert error_info.value.errors == [
        {'field': 'email', 'message': 'Field is required'},
        {'field': 'name', 'message': 'Field is required'},
    ]


def test_validate_tree_create_defaults():
    assert validate_tree_create({'treeName': 'Smith Family'}) == {
        'treeName': 'Smith Family',
        'isPublic': False,
        'sharedWith': [],
    }


def test_validate_tree_create_errors():
    with pytest.raises(ValidationError) as error_info:
        validate_tree_create({'treeName': '', 'description': 'd' * 501, 'sharedWith': ['ok@example.com', 'bad']})
    assert error_info.value.errors == [
        {'field': 'treeName', 'message': 'Cannot be empty'},
        {'field': 'description', 'message': 'Must be at most 500 characters'},
        {'field': 'sharedWith', 'message': 'Invalid email address(es): bad'},
    ]


def test_validate_tree_update():
    assert validate_tree_update({'description': None}) == {'description': None}
    assert validate_tree_update({'rootPersonId': 'pid', 'isPublic': True}) == {'rootPersonId': 'pid', 'isPublic': True}

    with pytest.raises(ValidationError, match='No fields to update'):
        validate_tree_update({})

    with pytest.raises(ValidationError) as error_info:
        validate_tree_update({'treeName': None})
    assert error_info.value.errors == [{'field': 'treeName', 'message': 'Cannot be null'}]


def test_validate_person_create():
    assert validate_person_create({'firstName': 'John'}) == {'firstName': 'John', 'isLiving': True}

    data = {
        'firstName': 'John',
        'lastName': 'Smith',
        'gender': 'Male',
        'birthDate': '1950-06-01',
        'isLiving': False,
        'deathDate': '2020-01-01',
        'profilePhotoUrl': 'https://example.com/john.jpg',
    }
    assert validate_person_create(data) == data


def test_validate_person_create_errors():
    data = {
        'nickname': 'n' * 51,
        'gender': 'male',
        'birthDate': '1950-02-30',
        'biography': 'b' * 5001,
        'profilePhotoUrl': 'ftp://example.com/john.jpg',
    }
    with pytest.raises(ValidationError) as error_info:
        validate_person_create(data)
    assert error_info.value.errors == [
        {'field': 'firstName', 'message': 'Field is required'},
        {'field': 'nickname', 'message': 'Must be at most 50 characters'},
        {'field': 'gender', 'message': 'Must be one of: Male, Female, Other, Unknown'},
        {'field': 'birthDate', 'message': 'Must be a valid date in YYYY-MM-DD format'},
        {'field': 'biography', 'message': 'Must be at most 5000 characters'},
        {'field': 'profilePhotoUrl', 'message': 'Must be a valid http(s) URL'},
    ]


def test_validate_person_update_omitted_is_not_null():
    # only what was supplied comes back, no defaults filled in
    assert validate_person_update({'nickname': 'Johnny'}) == {'nickname': 'Johnny'}
    assert validate_person_update({'nickname': None, 'notes': 'n'}) == {'nickname': None, 'notes': 'n'}

    with pytest.raises(ValidationError) as error_info:
        validate_person_update({'firstName': None})
    assert error_info.value.errors == [{'field': 'firstName', 'message': 'Cannot be null'}]

    with pytest.raises(ValidationError) as error_info:
        validate_person_update({'treeId': 'tid'})
    assert error_info.value.errors == [{'field': 'treeId', 'message': 'Unexpected field'}]


@pytest.mark.parametrize('person_id', ['p', 'pid', '1f0a7b8e-3c1e-4a3b-9a53-0d1c3c8f3d44'])
def test_validate_relationship_create_self_relationship(person_id):
    data = {'person1Id': person_id, 'person2Id': person_id, 'relationshipType': 'Spouse', 'treeId': 'tid'}
    with pytest.raises(ValidationError) as error_info:
        validate_relationship_create(data)
    assert error_info.value.errors == [
        {'field': 'person2Id', 'message': 'A person cannot have a relationship with themselves'}
    ]


def test_validate_relationship_create():
    data = {'person1Id': 'p1', 'person2Id': 'p2', 'relationshipType': 'Parent', 'treeId': 'tid'}
    assert validate_relationship_create(data) == data

    with pytest.raises(ValidationError) as error_info:
        validate_relationship_create({'person1Id': 'p1', 'person2Id': 'p1', 'relationshipType': 'Cousin'})
    assert error_info.value.errors == [
        {'field': 'relationshipType', 'message': 'Must be one of: Parent, Child, Spouse, Sibling'},
        {'field': 'treeId', 'message': 'Field is required'},
        {'field': 'person2Id', 'message': 'A person cannot have a relationship with themselves'},
    ]
