__all__ = [
    'PersonManager',
    'RelationshipManager',
    'TreeManager',
    'UserManager',
]

from .person.manager import PersonManager
from .relationship.manager import RelationshipManager
from .tree.manager import TreeManager
from .user.manager import UserManager
