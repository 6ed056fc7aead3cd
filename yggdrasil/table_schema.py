# The schema of the single table holding users, trees, persons and relationships
# Every index projects all attributes


def _gsi(name):
    return {
        'IndexName': name,
        'KeySchema': [
            {'AttributeName': f'{name}PK', 'KeyType': 'HASH'},
            {'AttributeName': f'{name}SK', 'KeyType': 'RANGE'},
        ],
        'Projection': {'ProjectionType': 'ALL'},
    }


main_table_schema = {
    'KeySchema': [
        {'AttributeName': 'PK', 'KeyType': 'HASH'},
        {'AttributeName': 'SK', 'KeyType': 'RANGE'},
    ],
    'GlobalSecondaryIndexes': [_gsi('GSI1'), _gsi('GSI2'), _gsi('GSI3')],
    'AttributeDefinitions': [
        {'AttributeName': 'PK', 'AttributeType': 'S'},
        {'AttributeName': 'SK', 'AttributeType': 'S'},
        {'AttributeName': 'GSI1PK', 'AttributeType': 'S'},
        {'AttributeName': 'GSI1SK', 'AttributeType': 'S'},
        {'AttributeName': 'GSI2PK', 'AttributeType': 'S'},
        {'AttributeName': 'GSI2SK', 'AttributeType': 'S'},
        {'AttributeName': 'GSI3PK', 'AttributeType': 'S'},
        {'AttributeName': 'GSI3SK', 'AttributeType': 'S'},
    ],
    'BillingMode': 'PAY_PER_REQUEST',
}
