import logging

from yggdrasil import models
from yggdrasil.clients import DynamoClient
from yggdrasil.config import Config
from yggdrasil.logging import LogLevelContext, handler_logging

logger = logging.getLogger()

config = Config.from_env()
logger.setLevel(config.log_level)

clients = {
    'dynamo': DynamoClient.from_config(config),
}

managers = {}
person_manager = managers.get('person') or models.PersonManager(clients, managers=managers)
relationship_manager = managers.get('relationship') or models.RelationshipManager(clients, managers=managers)
tree_manager = managers.get('tree') or models.TreeManager(clients, managers=managers)


def _event_user_id(event):
    return {'userId': event['userId']} if (event or {}).get('userId') else {}


@handler_logging(event_to_extras=_event_user_id)
def reconcile_person_counts(event, context):
    "Recount the persons of every tree, or of every tree of `event['userId']`"
    user_id = (event or {}).get('userId')
    corrected_cnt = tree_manager.reconcile_all_person_counts(user_id=user_id)
    with LogLevelContext(logger, logging.INFO):
        logger.info(f'Tree person counts corrected: {corrected_cnt}')


@handler_logging
def sweep_half_relationships(event, context):
    tree_cnt, deleted_cnt = 0, 0
    for tree_item in tree_manager.dynamo.generate_all_trees():
        tree_cnt += 1
        deleted_cnt += relationship_manager.sweep_half_relationships(tree_item['treeId'])
    with LogLevelContext(logger, logging.INFO):
        logger.info(f'Half relationships deleted: {deleted_cnt} across {tree_cnt} trees')
