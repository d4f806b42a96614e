"""
Collaborator interfaces consumed by the mutation controller.
Provides the notification surface and the global progress indicator.
"""

from enum import Enum
from typing import List, Protocol, Tuple

from utils import notification_logger, config_manager


class NotificationKind(str, Enum):
    """通知类型"""
    SUCCESS = "success"
    ERROR = "error"


class Placement(str, Enum):
    """通知位置"""
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    TOP_CENTER = "top-center"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM_CENTER = "bottom-center"


def default_placement() -> Placement:
    """从配置读取默认通知位置"""
    return Placement(config_manager.get_notification_config().placement)


class Notifier(Protocol):
    def notify(self, message: str, kind: NotificationKind, placement: Placement) -> None:
        ...


class ProgressIndicator(Protocol):
    def start(self) -> None:
        ...

    def done(self) -> None:
        ...


class LoggingNotifier:
    """把通知写入 Notification 日志器，并保留历史记录"""

    def __init__(self):
        self.history: List[Tuple[str, NotificationKind, Placement]] = []

    def notify(self, message: str, kind: NotificationKind, placement: Placement) -> None:
        self.history.append((message, kind, placement))
        if kind is NotificationKind.ERROR:
            notification_logger.error(f"[Notification] ({placement.value}) {message}")
        else:
            notification_logger.info(f"[Notification] ({placement.value}) {message}")


class LoggingProgressIndicator:
    """全局进度指示器；start/done 不计数，与页面顶部进度条的行为一致"""

    def __init__(self):
        self.running = False

    def start(self) -> None:
        self.running = True
        notification_logger.debug("[Progress] started")

    def done(self) -> None:
        self.running = False
        notification_logger.debug("[Progress] done")


# 全局进度指示器实例，所有表单共享
progress_indicator = LoggingProgressIndicator()
