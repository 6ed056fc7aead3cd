#!/usr/bin/env python
import argparse
import logging

import dotenv

from yggdrasil import models
from yggdrasil.clients import DynamoClient
from yggdrasil.config import Config
from yggdrasil.logging import configure_logging

dotenv.load_dotenv()

logger = logging.getLogger()


def parse_args():
    parser = argparse.ArgumentParser(
        description="Recount the persons in a tree and delete its half-written relationships"
    )
    parser.add_argument('-t', dest='tree_id', required=True, help='Id of the tree')
    parser.add_argument('-u', dest='user_id', required=True, help='Id of the user that owns the tree')
    args = parser.parse_args()
    return args.tree_id, args.user_id


def main():
    tree_id, user_id = parse_args()
    config = Config.from_env()
    configure_logging(config.log_level)

    clients = {'dynamo': DynamoClient.from_config(config)}
    managers = {}
    tree_manager = models.TreeManager(clients, managers=managers)
    relationship_manager = managers['relationship']

    old_count, new_count = tree_manager.reconcile_person_count(tree_id, user_id)
    deleted_cnt = relationship_manager.sweep_half_relationships(tree_id)
    print(f'personCount: {old_count} -> {new_count}')
    print(f'half relationships deleted: {deleted_cnt}')


if __name__ == '__main__':
    main()
