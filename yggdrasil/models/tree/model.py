import logging

from yggdrasil.utils.items import strip_keys

logger = logging.getLogger()


class Tree:
    def __init__(self, tree_item, tree_dynamo):
        assert tree_item.get('EntityType') == 'Tree', f'Not a tree item: `{tree_item.get("EntityType")}`'
        self.dynamo = tree_dynamo
        self.item = tree_item
        self.id = tree_item['treeId']
        self.user_id = tree_item['userId']

    @property
    def person_count(self):
        return int(self.item.get('personCount', 0))

    @property
    def is_public(self):
        return bool(self.item.get('isPublic'))

    def refresh_item(self, strongly_consistent=False):
        self.item = self.dynamo.get_user_tree(self.id, self.user_id, strongly_consistent=strongly_consistent)
        return self

    def is_visible_to(self, user_id):
        return user_id == self.user_id or self.is_public

    def serialize(self):
        return strip_keys(self.item)
