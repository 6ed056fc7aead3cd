import contextlib
import functools
import json
import logging
import os

# source paths in log records are reported relative to the directory holding the package
SOURCE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + os.sep


def use_json_formatter(logger, extras=None):
    for log_handler in logger.handlers:
        log_handler.setFormatter(JsonFormatter(extras=extras))


def configure_logging(level='INFO', extras=None):
    "Log json from the root logger at `level`, giving it a stream handler if it has none"
    logger = logging.getLogger()
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler())
    use_json_formatter(logger, extras=extras)
    logger.setLevel(level)
    return logger


def handler_logging(*args, event_to_extras=None):
    """
    Wraps a scheduled handler so everything it logs is json tagged with the handler name,
    and so anything it raises gets logged before propagating.

        @handler_logging
        def my_handler(event, context):

        @handler_logging(event_to_extras=lambda event: {'userId': event.get('userId')})
        def my_handler(event, context):
    """

    def decorate(func):
        @functools.wraps(func)
        def wrapper(event, context):
            extras = {'handler': func.__name__}
            if callable(event_to_extras):
                extras.update(event_to_extras(event) or {})

            # the runtime installs its own handler on the root logger, reformat whatever is there
            logger = logging.getLogger()
            use_json_formatter(logger, extras=extras)

            try:
                return func(event, context)
            except Exception as err:
                logger.exception(str(err))
                raise

        return wrapper

    return decorate(args[0]) if args else decorate


@contextlib.contextmanager
def LogLevelContext(logger, level):
    "Temporarily run `logger` at `level`"
    previous = logger.level
    logger.setLevel(level)
    try:
        yield logger
    finally:
        logger.setLevel(previous)


class JsonFormatter(logging.Formatter):
    "One line per record: a plain prefix for grepping, then the record as json"

    def __init__(self, extras=None, **kwargs):
        super().__init__(**kwargs)
        self.extras = dict(extras or {})

    def format(self, record):
        source_file = record.pathname
        if source_file.startswith(SOURCE_ROOT):
            source_file = source_file[len(SOURCE_ROOT) :]

        # only present when running inside lambda
        request_id = getattr(record, 'aws_request_id', None)

        data = {'message': record.getMessage(), 'level': record.levelname, 'requestId': request_id}
        data.update(self.extras)
        data.update(sourceFile=source_file, sourceLine=record.lineno)

        if record.exc_info:
            record.exc_text = record.exc_text or self.formatException(record.exc_info)
            data['exceptionInfo'] = record.exc_text.splitlines()
        if record.stack_info:
            data['stackInfo'] = record.stack_info.splitlines()
        return f'{record.levelname} RequestId: {request_id} Data: {json.dumps(data, default=str)}'
