#!/usr/bin/env python
import argparse
import logging

import dotenv

from yggdrasil.clients import DynamoClient
from yggdrasil.config import Config
from yggdrasil.logging import configure_logging
from yggdrasil.table_schema import main_table_schema

dotenv.load_dotenv()

logger = logging.getLogger()


def parse_args():
    parser = argparse.ArgumentParser(description="Create the single dynamo table and its three indexes")
    parser.add_argument('-t', dest='table_name', help='Table name, overrides DYNAMODB_TABLE_NAME')
    parser.add_argument('-e', dest='endpoint_url', help='Ex: http://localhost:8000, overrides DYNAMODB_ENDPOINT')
    return parser.parse_args()


def main():
    args = parse_args()
    config = Config.from_env()
    config = Config(
        table_name=args.table_name or config.table_name,
        endpoint_url=args.endpoint_url or config.endpoint_url,
        region_name=config.region_name,
        log_level=config.log_level,
    )
    configure_logging(config.log_level)

    logger.info(f'Creating table with {config}')
    dynamo_client = DynamoClient.from_config(config, create_table_schema=main_table_schema)
    dynamo_client.table.wait_until_exists()
    logger.info(f'Table `{dynamo_client.table_name}` is {dynamo_client.table.table_status}')


if __name__ == '__main__':
    main()
