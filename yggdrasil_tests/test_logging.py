import json
import logging
import sys

import pytest

from yggdrasil.logging import JsonFormatter, LogLevelContext, handler_logging


def make_record(msg, level=logging.INFO, exc_info=None):
    return logging.LogRecord('root', level, __file__, 42, msg, None, exc_info)


def parse(formatted):
    prefix, data = formatted.split(' Data: ', 1)
    return prefix, json.loads(data)


def test_json_formatter():
    formatter = JsonFormatter(extras={'handler': 'my_handler'})
    prefix, data = parse(formatter.format(make_record('hello there', level=logging.WARNING)))
    assert prefix == 'WARNING RequestId: None'
    assert data['message'] == 'hello there'
    assert data['level'] == 'WARNING'
    assert data['handler'] == 'my_handler'
    assert data['sourceLine'] == 42
    assert data['sourceFile'].endswith('test_logging.py')
    assert 'exceptionInfo' not in data


def test_json_formatter_exception():
    try:
        raise Exception('oops')
    except Exception:
        record = make_record('failed', level=logging.ERROR, exc_info=sys.exc_info())
    _, data = parse(JsonFormatter().format(record))
    assert data['exceptionInfo'][0] == 'Traceback (most recent call last):'
    assert data['exceptionInfo'][-1] == 'Exception: oops'


def test_log_level_context():
    logger = logging.getLogger('yggdrasil.test')
    logger.setLevel(logging.WARNING)
    with LogLevelContext(logger, logging.DEBUG):
        assert logger.level == logging.DEBUG
    assert logger.level == logging.WARNING


def test_handler_logging_logs_and_reraises(caplog):
    @handler_logging
    def my_handler(event, context):
        "my docstring"
        raise ValueError(f'bad event {event["id"]}')

    assert my_handler.__name__ == 'my_handler'
    assert my_handler.__doc__ == 'my docstring'
    with pytest.raises(ValueError):
        my_handler({'id': 'eid'}, None)
    assert [r.msg for r in caplog.records if r.levelno == logging.ERROR] == ['bad event eid']


def test_handler_logging_with_extras():
    @handler_logging(event_to_extras=lambda event: {'userId': event['userId']})
    def my_handler(event, context):
        return event['userId']

    assert my_handler({'userId': 'uid'}, None) == 'uid'
