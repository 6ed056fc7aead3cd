class RelationshipType:
    PARENT = 'Parent'
    CHILD = 'Child'
    SPOUSE = 'Spouse'
    SIBLING = 'Sibling'

    _ALL = (PARENT, CHILD, SPOUSE, SIBLING)
    _INVERSE = {
        PARENT: CHILD,
        CHILD: PARENT,
        SPOUSE: SPOUSE,
        SIBLING: SIBLING,
    }

    @classmethod
    def inverse(cls, relationship_type):
        "The type of the same relationship seen from the other person"
        return cls._INVERSE[relationship_type]

    @classmethod
    def key_prefix(cls, relationship_type):
        assert relationship_type in cls._ALL, f'Unknown relationship type `{relationship_type}`'
        return relationship_type.upper()
