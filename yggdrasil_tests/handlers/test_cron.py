import logging

import pytest

from yggdrasil.handlers import cron


@pytest.fixture
def cron_managers(monkeypatch, tree_manager, relationship_manager):
    monkeypatch.setattr(cron, 'tree_manager', tree_manager)
    monkeypatch.setattr(cron, 'relationship_manager', relationship_manager)
    yield


@pytest.fixture
def tree(tree_manager):
    yield tree_manager.create_tree('uid', {'treeName': 'Smith Family'})


def test_reconcile_person_counts(cron_managers, tree_manager, person_manager, tree, caplog):
    person_manager.create_person('uid', tree.id, {'firstName': 'John'})
    tree_manager.dynamo.set_person_count(tree.id, 'uid', 9)

    # other users' trees are not touched
    cron.reconcile_person_counts({'userId': 'other-uid'}, None)
    assert tree_manager.get_tree(tree.id).person_count == 9

    with caplog.at_level(logging.INFO):
        cron.reconcile_person_counts({}, None)
    assert tree_manager.get_tree(tree.id).person_count == 1
    assert 'Tree person counts corrected: 1' in [r.msg for r in caplog.records]


def test_sweep_half_relationships(cron_managers, person_manager, relationship_manager, tree, caplog):
    john = person_manager.create_person('uid', tree.id, {'firstName': 'John'})
    mary = person_manager.create_person('uid', tree.id, {'firstName': 'Mary'})
    data = {'person1Id': john.id, 'person2Id': mary.id, 'relationshipType': 'Spouse', 'treeId': tree.id}
    relationship = relationship_manager.create_relationship('uid', data)
    relationship_manager.dynamo.client.delete_item(relationship.key)

    with caplog.at_level(logging.INFO):
        cron.sweep_half_relationships({}, None)
    assert relationship_manager.get_tree_relationships(tree.id) == []
    assert 'Half relationships deleted: 1 across 1 trees' in [r.msg for r in caplog.records]


def test_handler_failure_is_logged_and_raised(cron_managers, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise Exception('store is down')

    monkeypatch.setattr(cron.tree_manager, 'reconcile_all_person_counts', broken)
    with pytest.raises(Exception, match='store is down'):
        cron.reconcile_person_counts({}, None)
    assert [r.msg for r in caplog.records if r.levelno == logging.ERROR] == ['store is down']
