import logging

import pendulum
from boto3.dynamodb.conditions import Attr, Key

from .enums import RelationshipType
from .exceptions import RelationshipAlreadyExists, RelationshipDoesNotExist

logger = logging.getLogger()


class RelationshipDynamo:
    """
    A relationship is stored as two halves, one under each person.
    The half under PERSON#X with sort key PARENT#Y says X is a parent of Y.
    """

    def __init__(self, dynamo_client):
        self.client = dynamo_client

    def pk(self, person_id, relationship_type, other_person_id):
        return {
            'PK': f'PERSON#{person_id}',
            'SK': f'{RelationshipType.key_prefix(relationship_type)}#{other_person_id}',
        }

    def reverse_pk(self, person_id, relationship_type, other_person_id):
        "Key of the other half"
        return self.pk(other_person_id, RelationshipType.inverse(relationship_type), person_id)

    def get_relationship(self, person1_id, person2_id, relationship_type, strongly_consistent=False):
        return self.client.get_item(
            self.pk(person1_id, relationship_type, person2_id), ConsistentRead=strongly_consistent
        )

    def get_relationship_between(self, person1_id, person2_id):
        "The half under person1 pointing to person2, of any type"
        query_kwargs = {
            'KeyConditionExpression': Key('PK').eq(f'PERSON#{person1_id}'),
            'FilterExpression': Attr('person2Id').eq(person2_id),
        }
        return next(self.client.generate_all_query(query_kwargs), None)

    def build_items(self, relationship_id, person1_id, person2_id, relationship_type, tree_id, user_id, now):
        now_str = now.to_iso8601_string()
        shared = {
            'schemaVersion': 0,
            'EntityType': 'Relationship',
            'GSI2PK': f'TREE#{tree_id}',
            'GSI2SK': f'REL#{relationship_id}',
            'relationshipId': relationship_id,
            'treeId': tree_id,
            'userId': user_id,
            'createdAt': now_str,
        }
        primary_item = {
            **self.pk(person1_id, relationship_type, person2_id),
            **shared,
            'person1Id': person1_id,
            'person2Id': person2_id,
            'relationshipType': relationship_type,
        }
        reverse_item = {
            **self.reverse_pk(person1_id, relationship_type, person2_id),
            **shared,
            'person1Id': person2_id,
            'person2Id': person1_id,
            'relationshipType': RelationshipType.inverse(relationship_type),
        }
        return primary_item, reverse_item

    def add_relationship(
        self, relationship_id, person1_id, person2_id, relationship_type, tree_id, user_id, now=None
    ):
        "Write both halves in one transaction. Returns the primary half"
        now = now or pendulum.now('utc')
        items = self.build_items(relationship_id, person1_id, person2_id, relationship_type, tree_id, user_id, now)
        transacts = [
            {'Put': {'Item': item, 'ConditionExpression': 'attribute_not_exists(PK)'}} for item in items
        ]
        transact_exceptions = [RelationshipAlreadyExists(person1_id, person2_id)] * len(transacts)
        self.client.transact_write_items(transacts, transact_exceptions)
        return items[0]

    def delete_relationship(self, relationship_id, person1_id, person2_id, relationship_type):
        "Delete both halves in one transaction, as long as both still belong to `relationship_id`"
        keys = (
            self.pk(person1_id, relationship_type, person2_id),
            self.reverse_pk(person1_id, relationship_type, person2_id),
        )
        transacts = [
            {
                'Delete': {
                    'Key': key,
                    'ConditionExpression': 'relationshipId = :rid',
                    'ExpressionAttributeValues': {':rid': relationship_id},
                }
            }
            for key in keys
        ]
        transact_exceptions = [RelationshipDoesNotExist(relationship_id)] * len(transacts)
        self.client.transact_write_items(transacts, transact_exceptions)

    def generate_by_person(self, person_id, relationship_type=None):
        key_conditions = Key('PK').eq(f'PERSON#{person_id}')
        if relationship_type:
            key_conditions &= Key('SK').begins_with(f'{RelationshipType.key_prefix(relationship_type)}#')
        query_kwargs = {
            'KeyConditionExpression': key_conditions,
        }
        return self.client.generate_all_query(query_kwargs)

    def generate_by_tree(self, tree_id):
        "Both halves of every relationship in the tree"
        query_kwargs = {
            'KeyConditionExpression': Key('GSI2PK').eq(f'TREE#{tree_id}') & Key('GSI2SK').begins_with('REL#'),
            'IndexName': 'GSI2',
        }
        return self.client.generate_all_query(query_kwargs)
