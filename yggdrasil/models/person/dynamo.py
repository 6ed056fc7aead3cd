import logging

import pendulum
from boto3.dynamodb.conditions import Key

from yggdrasil.utils.items import update_item_kwargs

from .exceptions import PersonAlreadyExists, PersonDoesNotExist, PersonNotFoundOrUnauthorized

logger = logging.getLogger()


class PersonDynamo:
    def __init__(self, dynamo_client):
        self.client = dynamo_client

    def pk(self, person_id, user_id):
        return {
            'PK': f'USER#{user_id}',
            'SK': f'PERSON#{person_id}',
        }

    def get_person(self, person_id):
        query_kwargs = {
            'KeyConditionExpression': Key('GSI1PK').eq(f'PERSON#{person_id}'),
            'IndexName': 'GSI1',
        }
        return self.client.query_head(query_kwargs)

    def get_user_person(self, person_id, user_id, strongly_consistent=False):
        return self.client.get_item(self.pk(person_id, user_id), ConsistentRead=strongly_consistent)

    def add_person(self, person_id, user_id, tree_id, record, now=None):
        "`record` is a validated person record, its None values are left out of the item"
        now = now or pendulum.now('utc')
        now_str = now.to_iso8601_string()
        query_kwargs = {
            'Item': {
                **{k: v for k, v in record.items() if v is not None},
                **self.pk(person_id, user_id),
                'schemaVersion': 0,
                'EntityType': 'Person',
                'GSI1PK': f'PERSON#{person_id}',
                'GSI1SK': f'TREE#{tree_id}',
                'GSI2PK': f'TREE#{tree_id}',
                'GSI2SK': f'PERSON#{now_str}',
                'GSI3PK': user_id,
                'GSI3SK': f'PERSON#{now_str}',
                'personId': person_id,
                'treeId': tree_id,
                'userId': user_id,
                'createdAt': now_str,
                'updatedAt': now_str,
                'createdBy': user_id,
                'updatedBy': user_id,
            },
        }
        try:
            return self.client.add_item(query_kwargs)
        except self.client.exceptions.ConditionalCheckFailedException as err:
            raise PersonAlreadyExists(person_id) from err

    def update_person(self, person_id, user_id, record, now=None):
        now = now or pendulum.now('utc')
        now_str = now.to_iso8601_string()
        query_kwargs = update_item_kwargs(
            self.pk(person_id, user_id), record, updatedAt=now_str, updatedBy=user_id, GSI3SK=f'PERSON#{now_str}'
        )
        query_kwargs['ConditionExpression'] = 'userId = :caller_user_id'
        query_kwargs['ExpressionAttributeValues'][':caller_user_id'] = user_id
        try:
            return self.client.update_item(query_kwargs)
        except self.client.exceptions.ConditionalCheckFailedException as err:
            raise PersonNotFoundOrUnauthorized(person_id, user_id) from err

    def delete_person(self, person_id, user_id):
        if item_deleted := self.client.delete_item(self.pk(person_id, user_id)):
            return item_deleted
        raise PersonDoesNotExist(person_id)

    def generate_by_tree(self, tree_id, keys_only=False):
        query_kwargs = {
            'KeyConditionExpression': Key('GSI2PK').eq(f'TREE#{tree_id}') & Key('GSI2SK').begins_with('PERSON#'),
            'IndexName': 'GSI2',
        }
        if keys_only:
            query_kwargs['ProjectionExpression'] = 'PK, SK'
        return self.client.generate_all_query(query_kwargs)

    def generate_by_user(self, user_id):
        query_kwargs = {
            'KeyConditionExpression': Key('PK').eq(f'USER#{user_id}') & Key('SK').begins_with('PERSON#'),
        }
        return self.client.generate_all_query(query_kwargs)
