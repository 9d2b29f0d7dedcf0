# DEPENDENCIES
import sys
import time
import json
import logging
import traceback
from typing import Any
from typing import Dict
from typing import Union
from pathlib import Path
from typing import Optional
from functools import wraps
from datetime import datetime
from logging.handlers import RotatingFileHandler
from config.settings import settings


APP_LOGGER_NAME = "contract_pipeline"


class ContractAnalyzerLogger:
    """
    Logging for the contract analysis pipeline

    Three loggers are configured under one application name:
    - main log        : structured JSON events from every component
    - error log       : exceptions with traceback and context
    - performance log : durations of pipeline operations
    """
    _loggers : Dict[str, logging.Logger] = dict()
    _log_dir : Optional[Path]            = None

    _FORMAT                              = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    _DATE_FORMAT                         = '%Y-%m-%d %H:%M:%S'


    @classmethod
    def setup(cls, log_dir: Optional[Union[str, Path]] = None, app_name: str = APP_LOGGER_NAME, level: Optional[str] = None):
        """
        Setup logging system

        Arguments:
        ----------
            log_dir  { str } : Directory for log files (default: settings.LOG_DIR)

            app_name { str } : Application name, used as logger name and file prefix

            level    { str } : Level of the main logger (default: settings.LOG_LEVEL)
        """
        cls._log_dir = Path(log_dir or settings.LOG_DIR)
        cls._log_dir.mkdir(parents = True, exist_ok = True)

        main_level   = logging.getLevelName((level or settings.LOG_LEVEL).upper())

        if not isinstance(main_level, int):
            main_level = logging.INFO

        cls._create_logger(name     = app_name,
                           log_file = cls._log_dir / f"{app_name}.log",
                           level    = main_level,
                          )

        cls._create_logger(name     = f"{app_name}.error",
                           log_file = cls._log_dir / f"{app_name}_error.log",
                           level    = logging.ERROR,
                          )

        cls._create_logger(name     = f"{app_name}.performance",
                           log_file = cls._log_dir / f"{app_name}_performance.log",
                           level    = logging.INFO,
                          )


    @classmethod
    def _create_logger(cls, name: str, log_file: Path, level: int) -> logging.Logger:
        """
        Create a logger with a rotating file handler and a console handler for warnings
        """
        logger           = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        logger.handlers.clear()

        formatter        = logging.Formatter(cls._FORMAT, datefmt = cls._DATE_FORMAT)

        file_handler     = RotatingFileHandler(log_file,
                                               maxBytes    = settings.LOG_MAX_BYTES,
                                               backupCount = settings.LOG_BACKUP_COUNT,
                                               encoding    = "utf-8",
                                              )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

        console_handler  = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        cls._loggers[name] = logger

        return logger


    @classmethod
    def get_logger(cls, name: str = APP_LOGGER_NAME) -> logging.Logger:
        """
        Get logger by name, setting up the logging system on first use
        """
        if not cls._loggers:
            cls.setup()

        return cls._loggers.get(name, logging.getLogger(name))


    @classmethod
    def log_structured(cls, level: int, message: str, **kwargs):
        """
        Log a message with structured fields as one JSON document
        """
        log_data = {"timestamp" : datetime.now().isoformat(),
                    "message"   : message,
                    **kwargs
                   }

        cls.get_logger().log(level, json.dumps(log_data, default = str))


    @classmethod
    def log_error(cls, error: Union[Exception, str], context: Optional[Dict[str, Any]] = None):
        """
        Log an error with traceback and context

        Arguments:
        ----------
            error   { Exception | str } : Exception object or plain error message

            context { dict }            : Additional context dictionary
        """
        error_logger = cls.get_logger(f"{APP_LOGGER_NAME}.error")

        if isinstance(error, Exception):
            error_data = {"error_type"    : type(error).__name__,
                          "error_message" : str(error),
                          "error_code"    : getattr(error, "code", None),
                          "traceback"     : traceback.format_exc(),
                         }

        else:
            error_data = {"error_type"    : "message",
                          "error_message" : str(error),
                         }

        error_data["timestamp"] = datetime.now().isoformat()
        error_data["context"]   = context or {}

        error_logger.error(json.dumps(error_data, indent = 2, default = str))


    @classmethod
    def log_performance(cls, operation: str, duration: float, **metrics):
        """
        Log the duration of an operation
        """
        perf_data = {"timestamp"        : datetime.now().isoformat(),
                     "operation"        : operation,
                     "duration_seconds" : round(duration, 3),
                     **metrics
                    }

        cls.get_logger(f"{APP_LOGGER_NAME}.performance").info(json.dumps(perf_data, default = str))


    @staticmethod
    def log_execution_time(operation_name: Optional[str] = None):
        """
        Decorator recording duration and outcome of a function; exceptions are logged and re-raised
        """
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                op_name    = operation_name or func.__name__
                start_time = time.perf_counter()

                try:
                    result = func(*args, **kwargs)

                except Exception as e:
                    ContractAnalyzerLogger.log_performance(operation = op_name,
                                                           duration  = time.perf_counter() - start_time,
                                                           status    = "error",
                                                           error     = str(e),
                                                          )

                    ContractAnalyzerLogger.log_error(e, context = {"operation" : op_name})
                    raise

                ContractAnalyzerLogger.log_performance(operation = op_name,
                                                       duration  = time.perf_counter() - start_time,
                                                       status    = "success",
                                                      )
                return result

            return wrapper

        return decorator



# Convenience functions
def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    return ContractAnalyzerLogger.get_logger(name)


def log_info(message: str, **kwargs):
    ContractAnalyzerLogger.log_structured(logging.INFO, message, **kwargs)


def log_warning(message: str, **kwargs):
    ContractAnalyzerLogger.log_structured(logging.WARNING, message, **kwargs)


def log_debug(message: str, **kwargs):
    ContractAnalyzerLogger.log_structured(logging.DEBUG, message, **kwargs)


def log_error(error: Union[Exception, str], context: Optional[Dict[str, Any]] = None):
    ContractAnalyzerLogger.log_error(error, context)
