import logging

from yggdrasil.utils.items import strip_keys

logger = logging.getLogger()


class Person:
    def __init__(self, person_item, person_dynamo):
        assert person_item.get('EntityType') == 'Person', f'Not a person item: `{person_item.get("EntityType")}`'
        self.dynamo = person_dynamo
        self.item = person_item
        self.id = person_item['personId']
        self.user_id = person_item['userId']
        self.tree_id = person_item['treeId']

    @property
    def full_name(self):
        names = (self.item.get('firstName'), self.item.get('middleName'), self.item.get('lastName'))
        return ' '.join(name for name in names if name)

    def refresh_item(self, strongly_consistent=False):
        self.item = self.dynamo.get_user_person(self.id, self.user_id, strongly_consistent=strongly_consistent)
        return self

    def matches_name(self, term):
        return term.strip().lower() in self.full_name.lower()

    def serialize(self):
        return strip_keys(self.item)
