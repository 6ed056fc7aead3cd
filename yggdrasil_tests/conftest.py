import moto
import pytest

from yggdrasil import models
from yggdrasil.clients import DynamoClient
from yggdrasil.table_schema import main_table_schema


@pytest.fixture
def dynamo_client():
    with moto.mock_aws():
        yield DynamoClient(table_name='Yggdrasil', region_name='us-east-1', create_table_schema=main_table_schema)


@pytest.fixture
def managers(dynamo_client):
    "One registry of managers wired to each other, as the handlers build them"
    managers = {}
    models.TreeManager({'dynamo': dynamo_client}, managers=managers)
    models.UserManager({'dynamo': dynamo_client}, managers=managers)
    yield managers


@pytest.fixture
def user_manager(managers):
    yield managers['user']


@pytest.fixture
def tree_manager(managers):
    yield managers['tree']


@pytest.fixture
def person_manager(managers):
    yield managers['person']


@pytest.fixture
def relationship_manager(managers):
    yield managers['relationship']
