import os

DEFAULT_TABLE_NAME = 'Yggdrasil'
DEFAULT_REGION_NAME = 'us-east-1'


class Config:
    "Everything the data-access core needs to know about its environment"

    def __init__(self, table_name=DEFAULT_TABLE_NAME, endpoint_url=None, region_name=None, log_level='INFO'):
        assert table_name, 'Table name is required'
        self.table_name = table_name
        self.endpoint_url = endpoint_url or None
        self.region_name = region_name or DEFAULT_REGION_NAME
        self.log_level = log_level

    @classmethod
    def from_env(cls, environ=None):
        """
        Build a Config from environment variables.
        Setting DYNAMODB_ENDPOINT points the client at a local DynamoDB (ex: docker) rather than AWS.
        """
        environ = os.environ if environ is None else environ
        return cls(
            table_name=environ.get('DYNAMODB_TABLE_NAME') or DEFAULT_TABLE_NAME,
            endpoint_url=environ.get('DYNAMODB_ENDPOINT'),
            region_name=environ.get('AWS_REGION') or environ.get('AWS_DEFAULT_REGION'),
            log_level=environ.get('LOG_LEVEL') or 'INFO',
        )

    @property
    def is_local(self):
        return self.endpoint_url is not None

    def __repr__(self):
        return (
            f'Config(table_name={self.table_name!r}, endpoint_url={self.endpoint_url!r}, '
            f'region_name={self.region_name!r}, log_level={self.log_level!r})'
        )
