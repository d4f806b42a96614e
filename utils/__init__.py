"""
工具模块包
提供客户端所需的配置、日志、异常和缓存工具
"""

# 导出核心工具
from .config_manager import (
    config_manager,
    UnifiedConfigManager,
    ApiConfig,
    CacheConfig,
    NotificationConfig,
    LoggingConfig,
)
from .exceptions import (
    QuoteClientError,
    ConfigurationError,
    ValidationError,
    ApiError,
    TransportFault,
    ServerRejection,
    ErrorCodes,
    create_error_response,
)
from .logging_manager import (
    LogContext,
    log_execution,
    MetricsLogger,
    logging_manager,
    logger,
    api_metrics,
    cache_metrics,
    mutation_metrics,
    LogConfig,
    initialize_logging,
    ModuleLoggers,
    config_logger,
    api_logger,
    mutation_logger,
    notification_logger,
    cache_logger,
    validation_logger,
)
from .cache import QueryCache, CacheEntry, QUOTES_QUERY_KEY, query_cache, create_query_cache
from .path_utils import BASE_DIR, CONFIG_DIR, LOG_DIR

__version__ = "1.0.0"

__all__ = [
    # 配置管理
    "config_manager",
    "UnifiedConfigManager",
    "ApiConfig",
    "CacheConfig",
    "NotificationConfig",
    "LoggingConfig",

    # 异常处理
    "QuoteClientError",
    "ConfigurationError",
    "ValidationError",
    "ApiError",
    "TransportFault",
    "ServerRejection",
    "ErrorCodes",
    "create_error_response",

    # 日志工具
    "LogContext",
    "log_execution",
    "MetricsLogger",
    "logging_manager",
    "logger",
    "api_metrics",
    "cache_metrics",
    "mutation_metrics",
    "LogConfig",
    "initialize_logging",
    "ModuleLoggers",
    "config_logger",
    "api_logger",
    "mutation_logger",
    "notification_logger",
    "cache_logger",
    "validation_logger",

    # 读缓存
    "QueryCache",
    "CacheEntry",
    "QUOTES_QUERY_KEY",
    "query_cache",
    "create_query_cache",

    # 路径工具
    "BASE_DIR",
    "CONFIG_DIR",
    "LOG_DIR",
]
