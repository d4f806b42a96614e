"""
Mutation controller for quote forms.

One controller backs one form instance and allows at most one write in flight.
A submission is validated synchronously; only valid input starts the progress
indicator and schedules the request as a detached task. When the request
settles the task stops the progress indicator, closes the form and emits
exactly one notification. Successful writes also mark the shared read cache
stale. The task is never cancelled when the form goes away, so these side
effects still run after the UI that started them is gone.
"""

import asyncio
import functools
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Set

from utils import (
    QUOTES_QUERY_KEY, QueryCache, config_manager, mutation_logger, mutation_metrics, query_cache,
)
from utils.validation import (
    ValidationResult, validate_create_input, validate_quote_id, validate_update_input,
)
from .collaborators import (
    LoggingNotifier, NotificationKind, Notifier, Placement, ProgressIndicator,
    default_placement, progress_indicator,
)
from .error_messages import resolve_error_message

# 未完成的后台任务，保持强引用直到完成
_background_tasks: Set[asyncio.Task] = set()


class MutationPhase(str, Enum):
    """表单提交阶段"""
    IDLE = "idle"
    PENDING = "pending"


async def drain() -> None:
    """等待所有未完成的变更任务"""
    while _background_tasks:
        await asyncio.gather(*list(_background_tasks))


class MutationController:
    """单个表单实例的写操作协调器"""

    def __init__(self, name: str,
                 mutation_fn: Callable[[Any], Awaitable[Any]],
                 validate_fn: Callable[[Any], ValidationResult],
                 success_message: str,
                 cache: Optional[QueryCache] = None,
                 notifier: Optional[Notifier] = None,
                 progress: Optional[ProgressIndicator] = None,
                 invalidate_keys: Iterable[str] = (QUOTES_QUERY_KEY,),
                 on_close: Optional[Callable[[], None]] = None,
                 placement: Optional[Placement] = None):
        self.name = name
        self._mutation_fn = mutation_fn
        self._validate_fn = validate_fn
        self.success_message = success_message
        self._cache = cache if cache is not None else query_cache
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._progress = progress if progress is not None else progress_indicator
        self.invalidate_keys = tuple(invalidate_keys)
        self._on_close = on_close
        self.placement = placement or default_placement()

        self._phase = MutationPhase.IDLE
        self._progress_active = False
        self._field_errors: Dict[str, str] = {}
        self.last_result: Any = None
        self.last_error: Optional[BaseException] = None

    @property
    def phase(self) -> MutationPhase:
        return self._phase

    @property
    def is_pending(self) -> bool:
        return self._phase is MutationPhase.PENDING

    @property
    def field_errors(self) -> Dict[str, str]:
        return dict(self._field_errors)

    def submit(self, data: Any) -> Optional[asyncio.Task]:
        """
        提交一次变更

        Returns:
            已调度的后台任务；验证失败或已有请求在途时返回 None
        """
        if self.is_pending:
            mutation_metrics.increment("ignored")
            mutation_logger.warning(f"[Mutation:{self.name}] Submission ignored, a request is already pending")
            return None

        result = self._validate_fn(data)
        if not result.is_valid:
            self._field_errors = dict(result.errors)
            mutation_logger.info(f"[Mutation:{self.name}] Validation failed: {sorted(result.errors)}")
            return None

        self._field_errors = {}
        # 没有运行中的事件循环时在改变状态之前抛出
        loop = asyncio.get_running_loop()

        self._phase = MutationPhase.PENDING
        self._progress.start()
        self._progress_active = True
        try:
            task = loop.create_task(self._execute(result.value))
        except BaseException:
            self._stop_progress()
            self._phase = MutationPhase.IDLE
            raise
        mutation_metrics.increment("submitted")
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        return task

    async def submit_and_wait(self, data: Any) -> Any:
        """提交并等待结算，返回成功结果；失败或未提交时返回 None"""
        task = self.submit(data)
        if task is None:
            return None
        return await task

    async def _execute(self, value: Any) -> Any:
        try:
            result = await self._mutation_fn(value)
        except Exception as e:
            self._settle_error(e)
            return None
        else:
            self._settle_success(result)
            return result
        finally:
            # 任务被外部取消时也不能停留在 Pending
            self._stop_progress()
            self._phase = MutationPhase.IDLE

    def _settle_success(self, result: Any) -> None:
        self.last_result = result
        self.last_error = None
        mutation_metrics.increment("succeeded")
        mutation_logger.info(f"[Mutation:{self.name}] Succeeded")
        try:
            self._stop_progress()
            for key in self.invalidate_keys:
                self._cache.invalidate(key)
            self._close()
        finally:
            self._notifier.notify(self.success_message, NotificationKind.SUCCESS, self.placement)

    def _settle_error(self, error: Exception) -> None:
        self.last_error = error
        mutation_metrics.increment("failed")
        mutation_logger.warning(f"[Mutation:{self.name}] Failed: {error!s}")
        try:
            self._stop_progress()
            self._close()
        finally:
            self._notifier.notify(resolve_error_message(error), NotificationKind.ERROR, self.placement)

    def _stop_progress(self) -> None:
        if self._progress_active:
            self._progress_active = False
            self._progress.done()

    def _close(self) -> None:
        if self._on_close is None:
            return
        try:
            self._on_close()
        except Exception:
            # 表单已卸载等情况不影响结算
            mutation_logger.exception(f"[Mutation:{self.name}] on_close failed")


def _success_message(action: str) -> str:
    return config_manager.get_notification_config().messages[action]


def create_quote_controller(client, **kwargs) -> MutationController:
    """创建名言表单的控制器"""
    return MutationController(
        "create", client.create, validate_create_input, _success_message('create'), **kwargs
    )


def update_quote_controller(client, quote_id: int, **kwargs) -> MutationController:
    """更新指定名言的表单控制器"""
    return MutationController(
        f"update:{quote_id}", functools.partial(client.update, quote_id), validate_update_input,
        _success_message('update'), **kwargs
    )


def delete_quote_controller(client, **kwargs) -> MutationController:
    """删除名言的控制器，提交的数据为名言ID"""
    return MutationController(
        "delete", client.delete, validate_quote_id, _success_message('delete'), **kwargs
    )
