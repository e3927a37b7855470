from datetime import datetime
import os
import logging
import json
import sys

# Keys of LogRecord that belong to the logging module itself
_RESERVED_FIELDS = frozenset(vars(logging.LogRecord(
    "", logging.INFO, "", 0, "", (), None)).keys()) | {"message", "asctime"}


class JsonLogger(logging.Formatter):
    """Formatter that renders each log record as a single JSON object."""

    def format(self, record):
        """
        Format the log record as a JSON string.

        Structured data passed as ``extra={"metrics": {...}}`` is emitted
        under the ``metrics`` key. Any other extra fields are emitted at the
        top level.

        Args:
            record: The log record to format

        Returns:
            str: JSON formatted log string
        """
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
            'function': record.funcName
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_FIELDS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=str, ensure_ascii=False)


def get_project_root():
    """
    Get the absolute path to the project root directory.

    Returns:
        str: Path to project root directory
    """
    current_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.abspath(os.path.join(current_dir, '..', '..'))


def determine_log_path(log_file=None):
    """
    Resolve the log file path and make sure its directory exists.

    Relative paths are resolved against the project root. When no path is
    given a timestamped file under ``<project_root>/logs`` is used.

    Args:
        log_file (str, optional): Specific log file path

    Returns:
        str: Absolute path to use for logging
    """
    project_root = get_project_root()

    if log_file:
        log_path = log_file if os.path.isabs(log_file) else os.path.join(project_root, log_file)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = os.path.join(project_root, 'logs', f"char_language_model_{timestamp}.log")

    os.makedirs(os.path.dirname(log_path), exist_ok=True)
    return log_path


def get_logger(logger_name, log_file=None, clear_existing=True, console_json=True,
               level=logging.DEBUG):
    """
    Get a configured logger instance with JSON formatting.

    Args:
        logger_name (str): Name for the logger
        log_file (str, optional): Path to a log file; file output is skipped if None
        clear_existing (bool): Whether to clear existing handlers
        console_json (bool): Whether to use JSON formatting for console output
        level (int): Level of the logger itself

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    if clear_existing and logger.handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)

    if console_json:
        console_handler.setFormatter(JsonLogger())
    else:
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(determine_log_path(log_file), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonLogger())
        logger.addHandler(file_handler)

    return logger


def log_json(logger, message, data=None, level=logging.INFO):
    """
    Log a message with optional structured data.

    Args:
        logger (logging.Logger): Logger instance
        message (str): Log message
        data (dict, optional): Data to attach under the ``metrics`` key
        level (int): Logging level to use
    """
    if data is None:
        logger.log(level, message)
    else:
        logger.log(level, message, extra={"metrics": data})
