from yggdrasil.utils.items import strip_keys


class Relationship:
    "One half of a relationship, seen from `person1_id`"

    def __init__(self, relationship_item, relationship_dynamo):
        assert relationship_item.get('EntityType') == 'Relationship', (
            f'Not a relationship item: `{relationship_item.get("EntityType")}`'
        )
        self.dynamo = relationship_dynamo
        self.item = relationship_item
        self.id = relationship_item['relationshipId']
        self.person1_id = relationship_item['person1Id']
        self.person2_id = relationship_item['person2Id']
        self.relationship_type = relationship_item['relationshipType']
        self.tree_id = relationship_item['treeId']
        self.user_id = relationship_item['userId']

    @property
    def key(self):
        return {k: self.item[k] for k in ('PK', 'SK')}

    @property
    def reverse_key(self):
        return self.dynamo.reverse_pk(self.person1_id, self.relationship_type, self.person2_id)

    def serialize(self):
        return strip_keys(self.item)
