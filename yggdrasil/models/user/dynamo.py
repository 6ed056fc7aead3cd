import logging

import pendulum
from boto3.dynamodb.conditions import Key

from .exceptions import UserAlreadyExists

logger = logging.getLogger()


class UserDynamo:
    def __init__(self, dynamo_client):
        self.client = dynamo_client

    def pk(self, user_id):
        return {
            'PK': f'USER#{user_id}',
            'SK': 'PROFILE',
        }

    def email_key(self, email):
        return f'EMAIL#{email.strip().lower()}'

    def get_user(self, user_id, strongly_consistent=False):
        return self.client.get_item(self.pk(user_id), ConsistentRead=strongly_consistent)

    def get_user_by_email(self, email):
        query_kwargs = {
            'KeyConditionExpression': Key('GSI1PK').eq(self.email_key(email)),
            'IndexName': 'GSI1',
        }
        return self.client.query_head(query_kwargs)

    def add_user(self, user_id, email, name, password_hash=None, now=None):
        now = now or pendulum.now('utc')
        now_str = now.to_iso8601_string()
        query_kwargs = {
            'Item': {
                **self.pk(user_id),
                'schemaVersion': 0,
                'EntityType': 'User',
                'GSI1PK': self.email_key(email),
                'GSI1SK': 'PROFILE',
                'userId': user_id,
                'email': email,
                'name': name,
                'createdAt': now_str,
                'updatedAt': now_str,
            },
        }
        if password_hash:
            query_kwargs['Item']['passwordHash'] = password_hash
        try:
            return self.client.add_item(query_kwargs)
        except self.client.exceptions.ConditionalCheckFailedException as err:
            raise UserAlreadyExists(user_id) from err

    def set_last_login_at(self, user_id, now=None):
        "Best effort, logs WARNING on failure"
        now = now or pendulum.now('utc')
        query_kwargs = {
            'Key': self.pk(user_id),
            'UpdateExpression': 'SET lastLoginAt = :now',
            'ExpressionAttributeValues': {':now': now.to_iso8601_string()},
        }
        return self.client.update_item(query_kwargs, failure_warning=f'Failed to set lastLoginAt for user `{user_id}`')
