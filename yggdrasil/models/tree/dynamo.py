import logging

import pendulum
from boto3.dynamodb.conditions import Attr, Key

from yggdrasil.utils.items import update_item_kwargs

from .exceptions import TreeAlreadyExists, TreeDoesNotExist, TreeNotFoundOrUnauthorized

logger = logging.getLogger()


class TreeDynamo:
    def __init__(self, dynamo_client):
        self.client = dynamo_client

    def pk(self, tree_id, user_id):
        return {
            'PK': f'USER#{user_id}',
            'SK': f'TREE#{tree_id}',
        }

    def get_tree(self, tree_id):
        query_kwargs = {
            'KeyConditionExpression': Key('GSI1PK').eq(f'TREE#{tree_id}') & Key('GSI1SK').eq('METADATA'),
            'IndexName': 'GSI1',
        }
        return self.client.query_head(query_kwargs)

    def get_user_tree(self, tree_id, user_id, strongly_consistent=False):
        "Direct lookup when the owner is known, not subject to index lag"
        return self.client.get_item(self.pk(tree_id, user_id), ConsistentRead=strongly_consistent)

    def add_tree(self, tree_id, user_id, tree_name, description=None, is_public=False, shared_with=None, now=None):
        now = now or pendulum.now('utc')
        now_str = now.to_iso8601_string()
        query_kwargs = {
            'Item': {
                **self.pk(tree_id, user_id),
                'schemaVersion': 0,
                'EntityType': 'Tree',
                'GSI1PK': f'TREE#{tree_id}',
                'GSI1SK': 'METADATA',
                'GSI3PK': user_id,
                'GSI3SK': f'TREE#{now_str}',
                'treeId': tree_id,
                'userId': user_id,
                'treeName': tree_name,
                'isPublic': is_public,
                'sharedWith': list(shared_with or []),
                'personCount': 0,
                'generationCount': 0,
                'createdAt': now_str,
                'updatedAt': now_str,
            },
        }
        if description is not None:
            query_kwargs['Item']['description'] = description
        try:
            return self.client.add_item(query_kwargs)
        except self.client.exceptions.ConditionalCheckFailedException as err:
            raise TreeAlreadyExists(tree_id) from err

    def update_tree(self, tree_id, user_id, record, now=None):
        now = now or pendulum.now('utc')
        now_str = now.to_iso8601_string()
        query_kwargs = update_item_kwargs(
            self.pk(tree_id, user_id), record, updatedAt=now_str, GSI3SK=f'TREE#{now_str}'
        )
        query_kwargs['ConditionExpression'] = 'userId = :caller_user_id'
        query_kwargs['ExpressionAttributeValues'][':caller_user_id'] = user_id
        try:
            return self.client.update_item(query_kwargs)
        except self.client.exceptions.ConditionalCheckFailedException as err:
            raise TreeNotFoundOrUnauthorized(tree_id, user_id) from err

    def delete_tree(self, tree_id, user_id):
        if item_deleted := self.client.delete_item(self.pk(tree_id, user_id)):
            return item_deleted
        raise TreeDoesNotExist(tree_id)

    def increment_person_count(self, tree_id, user_id, now=None):
        "Best effort, logs WARNING on failure"
        now = now or pendulum.now('utc')
        query_kwargs = {
            'Key': self.pk(tree_id, user_id),
            'UpdateExpression': 'ADD personCount :one SET updatedAt = :now',
            'ExpressionAttributeValues': {':one': 1, ':now': now.to_iso8601_string()},
        }
        return self.client.update_item(
            query_kwargs, failure_warning=f'Failed to increment personCount for tree `{tree_id}`'
        )

    def decrement_person_count(self, tree_id, user_id, now=None):
        "Best effort, logs WARNING on failure"
        now = now or pendulum.now('utc')
        query_kwargs = {
            'Key': self.pk(tree_id, user_id),
            'UpdateExpression': 'ADD personCount :negative_one SET updatedAt = :now',
            'ExpressionAttributeValues': {':negative_one': -1, ':now': now.to_iso8601_string(), ':zero': 0},
            'ConditionExpression': 'personCount > :zero',
        }
        return self.client.update_item(
            query_kwargs, failure_warning=f'Failed to decrement personCount for tree `{tree_id}`'
        )

    def set_person_count(self, tree_id, user_id, person_count):
        query_kwargs = {
            'Key': self.pk(tree_id, user_id),
            'UpdateExpression': 'SET personCount = :cnt',
            'ExpressionAttributeValues': {':cnt': person_count},
        }
        try:
            return self.client.update_item(query_kwargs)
        except self.client.exceptions.ConditionalCheckFailedException as err:
            raise TreeDoesNotExist(tree_id) from err

    def generate_by_user(self, user_id):
        query_kwargs = {
            'KeyConditionExpression': Key('PK').eq(f'USER#{user_id}') & Key('SK').begins_with('TREE#'),
        }
        return self.client.generate_all_query(query_kwargs)

    def generate_by_user_by_recency(self, user_id):
        query_kwargs = {
            'KeyConditionExpression': Key('GSI3PK').eq(user_id) & Key('GSI3SK').begins_with('TREE#'),
            'IndexName': 'GSI3',
            'ScanIndexForward': False,
        }
        return self.client.generate_all_query(query_kwargs)

    def generate_all_trees(self):
        scan_kwargs = {
            'FilterExpression': Attr('EntityType').eq('Tree'),
        }
        return self.client.generate_all_scan(scan_kwargs)

    def generate_tree_content_keys(self, tree_id):
        "Keys of every person and relationship half in the tree"
        query_kwargs = {
            'KeyConditionExpression': Key('GSI2PK').eq(f'TREE#{tree_id}'),
            'IndexName': 'GSI2',
            'ProjectionExpression': 'PK, SK',
        }
        return self.client.generate_all_query(query_kwargs)
