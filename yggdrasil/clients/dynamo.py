import contextlib
import logging
import re

import boto3
import botocore.exceptions

from yggdrasil.exceptions import PartialWriteError, StoreError

logger = logging.getLogger()

# error codes the dynamo layers translate into domain errors themselves
PASSTHROUGH_ERROR_CODES = ('ConditionalCheckFailedException', 'TransactionCanceledException')
BATCH_WRITE_MAX_OPERATIONS = 25


@contextlib.contextmanager
def store_errors(operation):
    "Re-raise infrastructure failures from boto as StoreError"
    try:
        yield
    except botocore.exceptions.ClientError as err:
        error = err.response.get('Error', {})
        if error.get('Code') in PASSTHROUGH_ERROR_CODES:
            raise
        raise StoreError(operation, error.get('Message')) from err
    except botocore.exceptions.BotoCoreError as err:
        raise StoreError(operation, str(err)) from err


def guarded(query_kwargs, guard):
    "AND the `guard` condition onto whatever condition the caller already put in `query_kwargs`"
    if caller_condition := query_kwargs.get('ConditionExpression'):
        guard = f'{guard} and ({caller_condition})'
    query_kwargs['ConditionExpression'] = guard
    return query_kwargs


class DynamoClient:
    def __init__(self, table_name=None, endpoint_url=None, region_name=None, create_table_schema=None):
        "Pass `create_table_schema` to have the table created, as the tests and local setup do"
        assert table_name, 'A table name is required'
        self.table_name = table_name

        dynamodb = boto3.resource('dynamodb', endpoint_url=endpoint_url, region_name=region_name)
        if create_table_schema:
            self.table = dynamodb.create_table(TableName=table_name, **create_table_schema)
        else:
            self.table = dynamodb.Table(table_name)

        # the resource's client accepts and returns plain python values, rather than typed attribute values
        self.boto3_client = self.table.meta.client
        self.exceptions = self.boto3_client.exceptions

    @classmethod
    def from_config(cls, config, create_table_schema=None):
        return cls(
            table_name=config.table_name,
            endpoint_url=config.endpoint_url,
            region_name=config.region_name,
            create_table_schema=create_table_schema,
        )

    def add_item(self, query_kwargs):
        "Put a new item, failing with ConditionalCheckFailedException if one is already there. Returns the item"
        guarded(query_kwargs, 'attribute_not_exists(PK)')
        with store_errors('put_item'):
            self.table.put_item(**query_kwargs)
        return query_kwargs['Item']

    def get_item(self, pk, **kwargs):
        with store_errors('get_item'):
            resp = self.table.get_item(Key=pk, **kwargs)
        return resp.get('Item')

    def update_item(self, query_kwargs, failure_warning=None):
        """
        Update an existing item, returning the item as it is afterwards.
        With `failure_warning`, a failed condition (including the item not existing) is logged
        at WARNING level and None returned, instead of ConditionalCheckFailedException raised.
        """
        guarded(query_kwargs, 'attribute_exists(PK)')
        query_kwargs['ReturnValues'] = 'ALL_NEW'
        try:
            with store_errors('update_item'):
                resp = self.table.update_item(**query_kwargs)
        except self.exceptions.ConditionalCheckFailedException:
            if failure_warning is None:
                raise
            logger.warning(failure_warning)
            return None
        return resp['Attributes']

    def delete_item(self, pk, **kwargs):
        "Delete an item, returning it. Returns None if there was nothing to delete"
        kwargs.setdefault('ReturnValues', 'ALL_OLD')
        with store_errors('delete_item'):
            resp = self.table.delete_item(Key=pk, **kwargs)
        return resp.get('Attributes') or None

    def batch_write(self, operations):
        """
        Apply up to 25 put and delete operations in one BatchWriteItem call.
        Each operation is either {'put': item} or {'delete': key}.

        This is *not* atomic: should the store leave any of the operations unprocessed,
        the rest have still been applied and PartialWriteError is raised with the leftovers.
        """
        assert len(operations) <= BATCH_WRITE_MAX_OPERATIONS, 'Max 25 operations per batch write'
        if not operations:
            return 0
        requests = []
        for op in operations:
            if 'put' in op:
                requests.append({'PutRequest': {'Item': op['put']}})
            elif 'delete' in op:
                requests.append({'DeleteRequest': {'Key': op['delete']}})
            else:
                raise AssertionError(f'Unrecognized batch write operation: `{op}`')

        with store_errors('batch_write_item'):
            resp = self.boto3_client.batch_write_item(RequestItems={self.table_name: requests})

        unprocessed = (resp.get('UnprocessedItems') or {}).get(self.table_name)
        if unprocessed:
            unprocessed_ops = [
                {'put': req['PutRequest']['Item']} if 'PutRequest' in req else {'delete': req['DeleteRequest']['Key']}
                for req in unprocessed
            ]
            logger.error(
                f'Batch write left {len(unprocessed_ops)} of {len(operations)} operation(s) unprocessed: '
                f'`{unprocessed_ops}`'
            )
            raise PartialWriteError(unprocessed_ops)
        return len(operations)

    def batch_delete_items(self, items):
        "Delete the given items (or anything else holding their PK and SK). Returns how many deletes were sent"
        return self.batch_delete({'PK': item['PK'], 'SK': item['SK']} for item in items)

    def batch_delete(self, keys):
        "Delete by key, 25 to a batch. Returns how many deletes were sent"
        # BatchWriteItem rejects a batch that names the same key twice
        cnt, seen, chunk = 0, set(), []
        for key in keys:
            if (key['PK'], key['SK']) in seen:
                continue
            seen.add((key['PK'], key['SK']))
            chunk.append({'delete': key})
            if len(chunk) == BATCH_WRITE_MAX_OPERATIONS:
                cnt += self.batch_write(chunk)
                chunk = []
        cnt += self.batch_write(chunk)
        return cnt

    def query_head(self, query_kwargs):
        "First item the query finds, or None. Filters are applied after the limit, so they are not allowed"
        assert 'FilterExpression' not in query_kwargs
        with store_errors('query'):
            items = self.table.query(Limit=1, **query_kwargs)['Items']
        return items[0] if items else None

    def generate_all_query(self, query_kwargs):
        "Every item the query finds, page after page"
        return self._generate_all(self.table.query, query_kwargs, 'query')

    def generate_all_scan(self, scan_kwargs):
        "Every item the scan finds, page after page"
        return self._generate_all(self.table.scan, scan_kwargs, 'scan')

    def _generate_all(self, method, kwargs, operation):
        page_kwargs = dict(kwargs)
        while True:
            with store_errors(operation):
                resp = method(**page_kwargs)
            yield from resp['Items']
            if 'LastEvaluatedKey' not in resp:
                return
            page_kwargs['ExclusiveStartKey'] = resp['LastEvaluatedKey']

    def transact_write_items(self, transact_items, transact_exceptions=None):
        """
        Apply all of `transact_items` (Put, Update, Delete or ConditionCheck entries, without a TableName)
        or none of them.

        `transact_exceptions` lines up with `transact_items`: when the condition of an item fails, its
        exception is raised. Without one, a cancelled transaction raises StoreError.
        """
        transact_exceptions = transact_exceptions or [None] * len(transact_items)
        assert len(transact_items) == len(transact_exceptions)

        for transact_item in transact_items:
            (operation,) = transact_item.values()
            operation['TableName'] = self.table_name

        try:
            with store_errors('transact_write_items'):
                self.boto3_client.transact_write_items(TransactItems=transact_items)
        except self.exceptions.TransactionCanceledException as err:
            reasons = self.parse_cancellation_reasons(err)
            for reason, transact_exception in zip(reasons, transact_exceptions):
                if reason == 'ConditionalCheckFailed' and transact_exception is not None:
                    raise transact_exception from err
            raise StoreError('transact_write_items', str(err)) from err

    def parse_cancellation_reasons(self, err):
        if reasons := err.response.get('CancellationReasons'):
            return [reason.get('Code') for reason in reasons]
        # some endpoints only list the reasons in the message
        match = re.search(r'\[(.*)\]$', err.response['Error']['Message'])
        return match.group(1).split(', ') if match else []
