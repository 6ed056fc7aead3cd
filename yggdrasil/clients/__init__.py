__all__ = [
    'DynamoClient',
]
from .dynamo import DynamoClient
