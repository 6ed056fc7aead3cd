import logging
import uuid

import pendulum

from yggdrasil import models
from yggdrasil.exceptions import StoreError

from .dynamo import TreeDynamo
from .exceptions import TreeNotFoundOrUnauthorized
from .model import Tree
from .validation import validate_tree_create, validate_tree_update

logger = logging.getLogger()


class TreeManager:
    def __init__(self, clients, managers=None):
        managers = managers if managers is not None else {}
        managers['tree'] = self
        self.person_manager = managers.get('person') or models.PersonManager(clients, managers=managers)

        self.clients = clients
        if 'dynamo' in clients:
            self.dynamo = TreeDynamo(clients['dynamo'])

    def init_tree(self, tree_item):
        return Tree(tree_item, self.dynamo)

    def get_tree(self, tree_id, requesting_user_id=None):
        "Private trees of other users are reported as absent"
        tree_item = self.dynamo.get_tree(tree_id)
        if not tree_item:
            return None
        tree = self.init_tree(tree_item)
        if requesting_user_id is not None and not tree.is_visible_to(requesting_user_id):
            return None
        return tree

    def get_user_tree(self, tree_id, user_id):
        tree_item = self.dynamo.get_user_tree(tree_id, user_id)
        return self.init_tree(tree_item) if tree_item else None

    def get_user_trees(self, user_id):
        return [self.init_tree(item) for item in self.dynamo.generate_by_user(user_id)]

    def get_user_trees_by_recency(self, user_id):
        "Most recently updated first"
        return [self.init_tree(item) for item in self.dynamo.generate_by_user_by_recency(user_id)]

    def create_tree(self, user_id, data, now=None):
        now = now or pendulum.now('utc')
        record = validate_tree_create(data)
        tree_id = str(uuid.uuid4())
        tree_item = self.dynamo.add_tree(
            tree_id,
            user_id,
            record['treeName'],
            description=record.get('description'),
            is_public=record['isPublic'],
            shared_with=record['sharedWith'],
            now=now,
        )
        return self.init_tree(tree_item)

    def update_tree(self, tree_id, user_id, data, now=None):
        record = validate_tree_update(data)
        tree_item = self.dynamo.update_tree(tree_id, user_id, record, now=now)
        return self.init_tree(tree_item)

    def delete_tree(self, tree_id, user_id):
        """
        Delete the tree along with every person and relationship in it.
        The content is removed in batches, which are not atomic. Should that be interrupted, the
        tree item is still in place and the delete can simply be retried.
        """
        tree_item = self.dynamo.get_user_tree(tree_id, user_id, strongly_consistent=True)
        if not tree_item:
            raise TreeNotFoundOrUnauthorized(tree_id, user_id)

        generator = self.dynamo.generate_tree_content_keys(tree_id)
        deleted_cnt = self.dynamo.client.batch_delete_items(generator)
        self.dynamo.delete_tree(tree_id, user_id)
        logger.info(f'Deleted tree `{tree_id}` and {deleted_cnt} item(s) within it')

    def increment_tree_person_count(self, tree_id, user_id, now=None):
        "Best effort, a failure is logged and never raised"
        try:
            return self.dynamo.increment_person_count(tree_id, user_id, now=now)
        except StoreError as err:
            logger.warning(f'Failed to increment personCount for tree `{tree_id}`: {err}')

    def decrement_tree_person_count(self, tree_id, user_id, now=None):
        "Best effort, a failure is logged and never raised"
        try:
            return self.dynamo.decrement_person_count(tree_id, user_id, now=now)
        except StoreError as err:
            logger.warning(f'Failed to decrement personCount for tree `{tree_id}`: {err}')

    def reconcile_person_count(self, tree_id, user_id):
        "Recount the persons in the tree and overwrite personCount. Returns (old count, new count)"
        tree_item = self.dynamo.get_user_tree(tree_id, user_id, strongly_consistent=True)
        if not tree_item:
            raise TreeNotFoundOrUnauthorized(tree_id, user_id)
        old_count = self.init_tree(tree_item).person_count
        new_count = self.person_manager.count_tree_persons(tree_id)
        if new_count != old_count:
            logger.warning(f'Tree `{tree_id}` personCount drifted: was {old_count}, recounted {new_count}')
            self.dynamo.set_person_count(tree_id, user_id, new_count)
        return old_count, new_count

    def reconcile_all_person_counts(self, user_id=None):
        "Reconcile every tree, or every tree of `user_id`. Returns how many counts were corrected"
        generator = self.dynamo.generate_by_user(user_id) if user_id else self.dynamo.generate_all_trees()
        corrected = 0
        for tree_item in generator:
            old_count, new_count = self.reconcile_person_count(tree_item['treeId'], tree_item['userId'])
            corrected += old_count != new_count
        return corrected
