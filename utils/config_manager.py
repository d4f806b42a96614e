"""
统一的配置管理模块
读取 config/ 目录下的全部 JSON 文件并合并，按配置段提供类型化访问
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

from .exceptions import ConfigurationError, ErrorCodes
from .path_utils import CONFIG_DIR

config_logger = logging.getLogger("Config")

T = TypeVar('T')

DEFAULT_SUCCESS_MESSAGES = {
    'create': "Quote create successfully",
    'update': "Quote updated successfully",
    'delete': "Quote deleted successfully",
}


@dataclass
class LoggingModuleConfig:
    level: str = "INFO"
    enabled: bool = True


@dataclass
class FileLoggingConfig:
    enabled: bool = True
    directory: str = "log"
    filename: str = "client.log"
    rotation: Optional[Dict[str, Any]] = None


@dataclass
class ConsoleLoggingConfig:
    enabled: bool = True


@dataclass
class LoggingConfig:
    """logging_config 段"""
    level: str = "INFO"
    format: str = "[%(levelname)s][%(asctime)s][%(name)s] - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_config: FileLoggingConfig = field(default_factory=FileLoggingConfig)
    console_config: ConsoleLoggingConfig = field(default_factory=ConsoleLoggingConfig)
    modules: Dict[str, LoggingModuleConfig] = field(default_factory=dict)


@dataclass
class ApiConfig:
    """api_config 段：远端名言服务"""
    base_url: str = "http://localhost:8080/api/"
    timeout: float = 30.0
    with_credentials: bool = True
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})


@dataclass
class CacheConfig:
    """cache_config 段：读缓存"""
    max_size: int = 100
    default_ttl: Optional[float] = None  # None 表示只靠失效标记


@dataclass
class NotificationConfig:
    """notification_config 段：通知位置与成功文案"""
    placement: str = "top-right"
    messages: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SUCCESS_MESSAGES))


def _build_logging_config(data: Dict[str, Any]) -> LoggingConfig:
    defaults = LoggingConfig()
    file_data = data.get('file_config', {})
    return LoggingConfig(
        level=data.get('level', defaults.level),
        format=data.get('format', defaults.format),
        date_format=data.get('date_format', defaults.date_format),
        file_config=FileLoggingConfig(**{k: v for k, v in file_data.items()
                                         if k in FileLoggingConfig.__dataclass_fields__}),
        console_config=ConsoleLoggingConfig(
            enabled=data.get('console_config', {}).get('enabled', True)
        ),
        modules={
            name: LoggingModuleConfig(level=module.get('level', 'INFO'),
                                      enabled=module.get('enabled', True))
            for name, module in data.get('modules', {}).items()
        }
    )


def _build_api_config(data: Dict[str, Any]) -> ApiConfig:
    defaults = ApiConfig()
    return ApiConfig(
        base_url=data.get('base_url', defaults.base_url),
        timeout=float(data.get('timeout', defaults.timeout)),
        with_credentials=bool(data.get('with_credentials', defaults.with_credentials)),
        headers=dict(data.get('headers', defaults.headers))
    )


def _build_cache_config(data: Dict[str, Any]) -> CacheConfig:
    ttl = data.get('default_ttl')
    return CacheConfig(
        max_size=int(data.get('max_size', CacheConfig.max_size)),
        default_ttl=float(ttl) if ttl is not None else None
    )


def _build_notification_config(data: Dict[str, Any]) -> NotificationConfig:
    messages = dict(DEFAULT_SUCCESS_MESSAGES)
    messages.update(data.get('messages', {}))
    return NotificationConfig(placement=data.get('placement', NotificationConfig.placement),
                              messages=messages)


class UnifiedConfigManager:
    """统一配置管理器"""

    def __init__(self, config_dir: Optional[str] = None):
        self._config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self._config_data: Dict[str, Any] = {}
        self._typed_cache: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """按文件名顺序加载并合并所有 JSON 配置文件"""
        if not self._config_dir.is_dir():
            raise ConfigurationError(
                f"Configuration path is not a directory: {self._config_dir}",
                ErrorCodes.CONFIG_NOT_FOUND
            )

        config_files = sorted(self._config_dir.glob('*.json'))
        if not config_files:
            raise ConfigurationError(
                f"No configuration files (.json) found in: {self._config_dir}",
                ErrorCodes.CONFIG_NOT_FOUND
            )

        merged = {}
        for config_file in config_files:
            try:
                merged.update(json.loads(config_file.read_text(encoding='utf-8')))
            except json.JSONDecodeError as e:
                raise ConfigurationError(
                    f"Invalid JSON in configuration file {config_file.name}: {e}",
                    ErrorCodes.CONFIG_INVALID_FORMAT
                ) from e
            except OSError as e:
                raise ConfigurationError(
                    f"Failed to read configuration file {config_file.name}: {e}",
                    ErrorCodes.CONFIG_LOAD_ERROR
                ) from e

        self._config_data = merged
        self._typed_cache.clear()
        config_logger.debug(f"Loaded {len(config_files)} configuration files from {self._config_dir}")

    def __contains__(self, key: str) -> bool:
        return key in self._config_data

    def get_nested(self, path: str, default: Optional[T] = None) -> Optional[T]:
        """获取嵌套配置值，支持点分隔路径"""
        current = self._config_data
        for key in path.split('.'):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    def _section(self, name: str, builder: Callable[[Dict[str, Any]], T], fallback: Callable[[], T]) -> T:
        """解析并缓存一个配置段；格式错误时记录日志并使用默认值"""
        if name not in self._typed_cache:
            data = self.get_nested(name, {})
            try:
                if not isinstance(data, dict):
                    raise TypeError(f"expected an object, got {type(data).__name__}")
                self._typed_cache[name] = builder(data)
            except (AttributeError, TypeError, ValueError) as e:
                config_logger.error(f"Failed to parse {name}: {e}")
                self._typed_cache[name] = fallback()
        return self._typed_cache[name]

    def get_logging_config(self) -> LoggingConfig:
        return self._section('logging_config', _build_logging_config, LoggingConfig)

    def get_api_config(self) -> ApiConfig:
        return self._section('api_config', _build_api_config, ApiConfig)

    def get_cache_config(self) -> CacheConfig:
        return self._section('cache_config', _build_cache_config, CacheConfig)

    def get_notification_config(self) -> NotificationConfig:
        return self._section('notification_config', _build_notification_config, NotificationConfig)

    def update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """用字典覆盖顶层配置段，并清除类型化缓存"""
        self._config_data.update(config_dict)
        self._typed_cache.clear()


config_manager = UnifiedConfigManager()
