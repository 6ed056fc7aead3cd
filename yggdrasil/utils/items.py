import collections
from decimal import Decimal

# attributes that exist only to place an item in the table and its indexes
KEY_ATTRIBUTES = (
    'PK',
    'SK',
    'GSI1PK',
    'GSI1SK',
    'GSI2PK',
    'GSI2SK',
    'GSI3PK',
    'GSI3SK',
    'EntityType',
    'schemaVersion',
)


def undecimal(value):
    "Dynamo hands numbers back as Decimals, convert them (recursively) to int or float"
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else float(value)
    if isinstance(value, list):
        return [undecimal(v) for v in value]
    if isinstance(value, dict):
        return {k: undecimal(v) for k, v in value.items()}
    return value


def strip_keys(item, exclude=()):
    "The item as a plain entity dict, without any of its table/index key attributes"
    return {k: undecimal(v) for k, v in item.items() if k not in KEY_ATTRIBUTES and k not in exclude}


def update_item_kwargs(key, record, **always_set):
    """
    Build update_item kwargs that SET every attribute in `record` and `always_set`,
    except those whose value is None, which are REMOVEd.
    """
    exp_actions = collections.defaultdict(list)
    exp_names = {}
    exp_values = {}

    for name, value in {**record, **always_set}.items():
        exp_names[f'#{name}'] = name
        if value is None:
            exp_actions['REMOVE'].append(f'#{name}')
        else:
            exp_actions['SET'].append(f'#{name} = :{name}')
            exp_values[f':{name}'] = value

    query_kwargs = {
        'Key': key,
        'UpdateExpression': ' '.join([f'{k} {", ".join(v)}' for k, v in exp_actions.items()]),
        'ExpressionAttributeNames': exp_names,
    }
    if exp_values:
        query_kwargs['ExpressionAttributeValues'] = exp_values
    return query_kwargs
