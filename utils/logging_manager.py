"""
统一的日志管理模块
为客户端各模块提供按名称区分的日志器、操作上下文日志和计数指标
"""

import asyncio
import functools
import logging
import sys
import time
from collections import Counter
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config_manager import config_manager
from .exceptions import ApiError, ErrorCodes, QuoteClientError
from .path_utils import BASE_DIR, LOG_DIR


@dataclass
class LogConfig:
    """日志配置"""
    level: str = "INFO"
    format: str = "[%(levelname)s][%(asctime)s][%(name)s] - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_max_bytes: int = 10 * 1024 * 1024
    file_backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = True
    log_directory: Optional[str] = None
    log_filename: str = "client.log"


class LoggingManager:
    """日志管理器（单例）"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = LogConfig()
            cls._instance._handlers = []
        return cls._instance

    def configure(self, config: LogConfig = None):
        """按给定配置重建根日志器的处理器"""
        if config:
            self._config = config

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, self._config.level.upper()))

        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        formatter = logging.Formatter(self._config.format, datefmt=self._config.date_format)

        if self._config.enable_console:
            # 标准输出留给命令行结果
            self._add_handler(root_logger, logging.StreamHandler(sys.stderr), formatter)

        if self._config.enable_file:
            log_directory = Path(self._config.log_directory or LOG_DIR)
            log_directory.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                filename=log_directory / self._config.log_filename,
                maxBytes=self._config.file_max_bytes,
                backupCount=self._config.file_backup_count,
                encoding="utf-8"
            )
            self._add_handler(root_logger, file_handler, formatter)

    def _add_handler(self, root_logger: logging.Logger, handler: logging.Handler,
                     formatter: logging.Formatter):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
        self._handlers.append(handler)

    def configure_from_config_file(self):
        """从 config/logging.json 加载日志配置"""
        try:
            logging_config = config_manager.get_logging_config()
            file_config = logging_config.file_config
            rotation = file_config.rotation or {}

            log_directory = Path(file_config.directory)
            if not log_directory.is_absolute():
                log_directory = BASE_DIR / log_directory

            self.configure(LogConfig(
                level=logging_config.level,
                format=logging_config.format,
                date_format=logging_config.date_format,
                file_max_bytes=int(rotation.get('max_bytes_mb', 10) * 1024 * 1024),
                file_backup_count=rotation.get('backup_count', 5),
                enable_console=logging_config.console_config.enabled,
                enable_file=file_config.enabled,
                log_directory=str(log_directory),
                log_filename=file_config.filename
            ))

            for module_name, module_config in logging_config.modules.items():
                level = module_config.level if module_config.enabled else 'CRITICAL'
                self.set_level(level, module_name)

            return logging_config

        except (OSError, ValueError, AttributeError) as e:
            raise QuoteClientError(
                f"Failed to configure logging from config file: {e}",
                ErrorCodes.CONFIG_INVALID_FORMAT
            ) from e

    def get_logger(self, name: str = None) -> logging.Logger:
        return logging.getLogger(name or "QuoteClient")

    def set_level(self, level: str, logger_name: str = None):
        """设置日志级别；未指定名称时作用于根日志器"""
        log_level = getattr(logging, level.upper(), logging.INFO)
        if logger_name:
            self.get_logger(logger_name).setLevel(log_level)
        else:
            logging.getLogger().setLevel(log_level)


class LogContext:
    """
    操作日志上下文

    进入时记录开始，退出时记录耗时与结果。服务端或网络故障记为 WARNING，
    其他异常记为 ERROR 并附带异常信息。异常不会被吞掉。
    """

    def __init__(self, module: str, operation: str, quote_id: Any = None,
                 extra_context: Dict[str, Any] = None):
        self.module = module
        self.operation = operation
        self.quote_id = quote_id
        self.extra_context = extra_context or {}
        self.logger = logging_manager.get_logger(module)
        self._started: Optional[float] = None

    @property
    def label(self) -> str:
        parts = [self.module, self.operation]
        if self.quote_id is not None:
            parts.append(f"ID:{self.quote_id}")
        parts.extend(f"{key}:{value}" for key, value in self.extra_context.items())
        return ".".join(parts)

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.debug(f"[{self.label}] Starting")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - self._started
        if exc_val is None:
            self.logger.info(f"[{self.label}] Completed in {elapsed:.3f}s")
        elif isinstance(exc_val, (ApiError, QuoteClientError)):
            self.logger.warning(f"[{self.label}] Failed in {elapsed:.3f}s: {exc_val}")
        else:
            self.logger.error(f"[{self.label}] Failed in {elapsed:.3f}s: {exc_val!r}",
                              exc_info=(exc_type, exc_val, exc_tb))
        return False


def log_execution(module: str, operation: str = None):
    """为同步或异步函数包裹 LogContext，自动读取关键字参数 quote_id"""
    def decorator(func: Callable) -> Callable:
        name = operation or func.__name__

        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with LogContext(module, name, quote_id=kwargs.get('quote_id')):
                    return await func(*args, **kwargs)
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            with LogContext(module, name, quote_id=kwargs.get('quote_id')):
                return func(*args, **kwargs)
        return sync_wrapper

    return decorator


class MetricsLogger:
    """按模块统计的计数器"""

    def __init__(self, module: str):
        self.module = module
        self._counts = Counter()

    def increment(self, metric_name: str, value: int = 1):
        self._counts[metric_name] += value
        logging_manager.get_logger(self.module).debug(
            f"[Metrics] {self.module}.{metric_name}: {self._counts[metric_name]}"
        )

    def count(self, metric_name: str) -> int:
        return self._counts[metric_name]

    def get_metrics(self) -> Dict[str, int]:
        return {f"{self.module}.{name}": value for name, value in self._counts.items()}

    def reset(self):
        self._counts.clear()


# 全局日志管理器实例
logging_manager = LoggingManager()

logger = logging_manager.get_logger()

api_metrics = MetricsLogger("QuoteApi")
cache_metrics = MetricsLogger("Cache")
mutation_metrics = MetricsLogger("Mutation")


class ModuleLoggers:
    """模块专用日志器集合"""

    Config = logging_manager.get_logger("Config")
    QuoteApi = logging_manager.get_logger("QuoteApi")
    Mutation = logging_manager.get_logger("Mutation")
    Notification = logging_manager.get_logger("Notification")
    Cache = logging_manager.get_logger("Cache")
    Validation = logging_manager.get_logger("Validation")


config_logger = ModuleLoggers.Config
api_logger = ModuleLoggers.QuoteApi
mutation_logger = ModuleLoggers.Mutation
notification_logger = ModuleLoggers.Notification
cache_logger = ModuleLoggers.Cache
validation_logger = ModuleLoggers.Validation


def initialize_logging(use_config_file: bool = True) -> bool:
    """初始化日志系统；配置文件不可用时退回仅控制台输出"""
    if not use_config_file:
        logging_manager.configure()
        return True

    try:
        logging_config = logging_manager.configure_from_config_file()
        logger.debug(f"Logging initialized from config file (level {logging_config.level})")
    except QuoteClientError as e:
        logging_manager.configure(LogConfig(enable_file=False))
        logger.warning(f"Falling back to console logging: {e}")
    return True


initialize_logging(use_config_file=True)
