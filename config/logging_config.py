import json
import logging
import sys
import traceback
from datetime import date, datetime
from decimal import Decimal
from logging.handlers import RotatingFileHandler
from pathlib import Path


class CustomJSONEncoder(json.JSONEncoder):
	def default(self, o):
		if isinstance(o, (datetime, date)):
			return o.isoformat()
		if isinstance(o, Decimal):
			return str(o)
		return super().default(o)


class JSONFormatter(logging.Formatter):
	"""
	Custom formatter that outputs structured JSON logs.
	"""

	def format(self, record: logging.LogRecord) -> str:
		log_entry = {
			'timestamp': datetime.now().isoformat(),
			'level': record.levelname,
			'logger': record.name,
			'message': record.getMessage(),
			'module': record.module,
			'function': record.funcName,
			'line': record.lineno,
		}

		if record.exc_info and record.exc_info[0] is not None:
			log_entry['exception'] = {
				'type': record.exc_info[0].__name__,
				'message': str(record.exc_info[1]),
				'traceback': traceback.format_exception(*record.exc_info),
			}

		if hasattr(record, 'extra_data'):
			log_entry['data'] = record.extra_data

		return json.dumps(log_entry, ensure_ascii=False, cls=CustomJSONEncoder)


def configure_logging(
	console_level: str = 'INFO',
	log_directory: str | None = 'logs',
	file_level: str = 'DEBUG',
	max_file_size: int = 10 * 1024 * 1024,
	backup_count: int = 5,
) -> None:
	"""Centralized logging setup: human-readable console output plus rotating JSON files."""
	root_logger = logging.getLogger()
	root_logger.handlers.clear()
	root_logger.setLevel(logging.DEBUG)

	logging.getLogger('httpx').setLevel(logging.WARNING)
	logging.getLogger('httpcore').setLevel(logging.WARNING)

	console_handler = logging.StreamHandler(sys.stdout)
	console_handler.setLevel(getattr(logging, console_level.upper()))
	console_handler.setFormatter(
		logging.Formatter('%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s', datefmt='%H:%M:%S')
	)
	root_logger.addHandler(console_handler)

	if not log_directory:
		return

	log_dir = Path(log_directory)
	log_dir.mkdir(parents=True, exist_ok=True)

	file_handler = RotatingFileHandler(
		log_dir / 'app.log', maxBytes=max_file_size, backupCount=backup_count, encoding='utf-8'
	)
	file_handler.setLevel(getattr(logging, file_level.upper()))
	file_handler.setFormatter(JSONFormatter())
	root_logger.addHandler(file_handler)

	error_handler = RotatingFileHandler(
		log_dir / 'errors.log', maxBytes=max_file_size, backupCount=backup_count, encoding='utf-8'
	)
	error_handler.setLevel(logging.WARNING)
	error_handler.setFormatter(JSONFormatter())
	root_logger.addHandler(error_handler)
