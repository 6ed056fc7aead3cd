import logging
import uuid

import pendulum

from yggdrasil import models
from yggdrasil.models.tree.exceptions import TreeDoesNotExist

from .dynamo import PersonDynamo
from .exceptions import PersonNotFoundOrUnauthorized
from .model import Person
from .validation import validate_person_create, validate_person_update

logger = logging.getLogger()


class PersonManager:
    def __init__(self, clients, managers=None):
        managers = managers if managers is not None else {}
        managers['person'] = self
        self.relationship_manager = managers.get('relationship') or models.RelationshipManager(
            clients, managers=managers
        )
        self.tree_manager = managers.get('tree') or models.TreeManager(clients, managers=managers)

        self.clients = clients
        if 'dynamo' in clients:
            self.dynamo = PersonDynamo(clients['dynamo'])

    def init_person(self, person_item):
        return Person(person_item, self.dynamo)

    def get_person(self, person_id, requesting_user_id=None):
        "Persons of other users are reported as absent"
        person_item = self.dynamo.get_person(person_id)
        if not person_item:
            return None
        if requesting_user_id is not None and person_item['userId'] != requesting_user_id:
            return None
        return self.init_person(person_item)

    def get_tree_persons(self, tree_id, requesting_user_id=None):
        persons = [self.init_person(item) for item in self.dynamo.generate_by_tree(tree_id)]
        if requesting_user_id is not None:
            persons = [p for p in persons if p.user_id == requesting_user_id]
        return persons

    def get_user_persons(self, user_id):
        return [self.init_person(item) for item in self.dynamo.generate_by_user(user_id)]

    def count_tree_persons(self, tree_id):
        return sum(1 for _ in self.dynamo.generate_by_tree(tree_id, keys_only=True))

    def search_persons_by_name(self, tree_id, term, requesting_user_id=None):
        "Case-insensitive substring match over first, middle and last name"
        persons = self.get_tree_persons(tree_id, requesting_user_id=requesting_user_id)
        return [p for p in persons if p.matches_name(term)]

    def create_person(self, user_id, tree_id, data, now=None):
        """
        Add a person to the user's tree and bump the tree's personCount.
        The two writes are independent, a failed count bump only leaves the counter behind.
        """
        now = now or pendulum.now('utc')
        record = validate_person_create(data)
        if not self.tree_manager.get_user_tree(tree_id, user_id):
            raise TreeDoesNotExist(tree_id)

        person_id = str(uuid.uuid4())
        person_item = self.dynamo.add_person(person_id, user_id, tree_id, record, now=now)
        self.tree_manager.increment_tree_person_count(tree_id, user_id, now=now)
        return self.init_person(person_item)

    def update_person(self, person_id, user_id, data, now=None):
        record = validate_person_update(data)
        person_item = self.dynamo.update_person(person_id, user_id, record, now=now)
        return self.init_person(person_item)

    def delete_person(self, person_id, user_id, now=None):
        "Delete the person, both halves of each of their relationships, and decrement the tree's personCount"
        person_item = self.dynamo.get_user_person(person_id, user_id, strongly_consistent=True)
        if not person_item:
            raise PersonNotFoundOrUnauthorized(person_id, user_id)

        self.relationship_manager.delete_all_of_person(person_id)
        self.dynamo.delete_person(person_id, user_id)
        self.tree_manager.decrement_tree_person_count(person_item['treeId'], user_id, now=now)
        logger.info(f'Deleted person `{person_id}` from tree `{person_item["treeId"]}`')
