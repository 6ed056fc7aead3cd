import collections
import itertools
import logging
import uuid

import pendulum

from yggdrasil import models
from yggdrasil.exceptions import ValidationError
from yggdrasil.models.person.exceptions import PersonDoesNotExist

from .dynamo import RelationshipDynamo
from .enums import RelationshipType
from .exceptions import RelationshipAlreadyExists, RelationshipUnauthorized
from .model import Relationship
from .validation import validate_relationship_create

logger = logging.getLogger()


class RelationshipManager:
    def __init__(self, clients, managers=None):
        managers = managers if managers is not None else {}
        managers['relationship'] = self
        self.person_manager = managers.get('person') or models.PersonManager(clients, managers=managers)

        self.clients = clients
        if 'dynamo' in clients:
            self.dynamo = RelationshipDynamo(clients['dynamo'])

    def init_relationship(self, relationship_item):
        return Relationship(relationship_item, self.dynamo)

    def create_relationship(self, user_id, data, now=None):
        """
        Connect two persons of the same tree.
        `data['relationshipType']` is the role of person1 toward person2.
        """
        now = now or pendulum.now('utc')
        record = validate_relationship_create(data)
        person1_id, person2_id, tree_id = record['person1Id'], record['person2Id'], record['treeId']
        relationship_type = record['relationshipType']

        persons = [self.person_manager.get_person(person_id) for person_id in (person1_id, person2_id)]
        for person_id, person in zip((person1_id, person2_id), persons):
            if not person:
                raise PersonDoesNotExist(person_id)
        for person in persons:
            if person.user_id != user_id:
                raise RelationshipUnauthorized(person.id, user_id)
        if any(person.tree_id != tree_id for person in persons):
            raise ValidationError([{'field': 'treeId', 'message': 'Both persons must belong to the tree'}])

        # racy, the transaction's guards catch what slips through. A lone half may sit under either person
        if self.dynamo.get_relationship_between(person1_id, person2_id) or self.dynamo.get_relationship_between(
            person2_id, person1_id
        ):
            raise RelationshipAlreadyExists(person1_id, person2_id)

        relationship_id = str(uuid.uuid4())
        relationship_item = self.dynamo.add_relationship(
            relationship_id, person1_id, person2_id, relationship_type, tree_id, user_id, now=now
        )
        return self.init_relationship(relationship_item)

    def delete_relationship(self, relationship_id, person1_id, person2_id, relationship_type, user_id):
        "Ownership of person1 stands in for ownership of the relationship"
        person1 = self.person_manager.get_person(person1_id)
        if not person1 or person1.user_id != user_id:
            raise RelationshipUnauthorized(person1_id, user_id)
        self.dynamo.delete_relationship(relationship_id, person1_id, person2_id, relationship_type)

    def relationship_exists(self, person1_id, person2_id, relationship_type):
        return self.dynamo.get_relationship(person1_id, person2_id, relationship_type) is not None

    def get_relationship_between(self, person1_id, person2_id):
        relationship_item = self.dynamo.get_relationship_between(person1_id, person2_id)
        return self.init_relationship(relationship_item) if relationship_item else None

    def get_person_relationships(self, person_id, relationship_type=None):
        generator = self.dynamo.generate_by_person(person_id, relationship_type=relationship_type)
        return [self.init_relationship(item) for item in generator]

    # the half under the person records *their* role, so their parents are where they are the child

    def get_person_parents(self, person_id):
        return self.get_person_relationships(person_id, relationship_type=RelationshipType.CHILD)

    def get_person_children(self, person_id):
        return self.get_person_relationships(person_id, relationship_type=RelationshipType.PARENT)

    def get_person_spouses(self, person_id):
        return self.get_person_relationships(person_id, relationship_type=RelationshipType.SPOUSE)

    def get_person_siblings(self, person_id):
        return self.get_person_relationships(person_id, relationship_type=RelationshipType.SIBLING)

    def get_tree_relationships(self, tree_id):
        "One entry per relationship, the first half encountered"
        relationships, seen = [], set()
        for relationship_item in self.dynamo.generate_by_tree(tree_id):
            if relationship_item['relationshipId'] in seen:
                continue
            seen.add(relationship_item['relationshipId'])
            relationships.append(self.init_relationship(relationship_item))
        return relationships

    def delete_all_of_person(self, person_id):
        "Delete both halves of every relationship of the person. Returns count of deletes requested"
        relationships = self.get_person_relationships(person_id)
        key_generator = itertools.chain.from_iterable((r.key, r.reverse_key) for r in relationships)
        return self.dynamo.client.batch_delete(key_generator)

    def sweep_half_relationships(self, tree_id):
        "Delete relationship halves whose other half is missing. Returns how many were deleted"
        halves = collections.defaultdict(list)
        for relationship_item in self.dynamo.generate_by_tree(tree_id):
            halves[relationship_item['relationshipId']].append(relationship_item)

        # the index lags the table, so a half seen alone there is only deleted once the table confirms it
        lone_halves = [
            items[0] for items in halves.values() if len(items) == 1 and not self.partner_half_exists(items[0])
        ]
        for item in lone_halves:
            logger.warning(
                f'Deleting half relationship `{item["relationshipId"]}` under `{item["PK"]}` in tree `{tree_id}`'
            )
        return self.dynamo.client.batch_delete_items(lone_halves)

    def partner_half_exists(self, relationship_item):
        "Strongly consistent check of the table for the other half of `relationship_item`"
        partner_key = self.dynamo.reverse_pk(
            relationship_item['person1Id'], relationship_item['relationshipType'], relationship_item['person2Id']
        )
        partner_item = self.dynamo.client.get_item(partner_key, ConsistentRead=True)
        return bool(partner_item) and partner_item.get('relationshipId') == relationship_item['relationshipId']
