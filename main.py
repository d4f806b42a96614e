"""
Main entry point for the Quote Client.
Provides a command-line form for creating, reading, updating and deleting quotes.
"""

import asyncio
import argparse
import json
import sys
from typing import Any, Dict, Optional

from utils import (
    QUOTES_QUERY_KEY, QuoteClientError, create_error_response, logger, query_cache,
)
from api.client import QuoteApiClient
from mutation import (
    LoggingNotifier, MutationController, create_quote_controller, delete_quote_controller,
    drain, update_quote_controller,
)


class QuoteClientApp:
    """命令行客户端主类，扮演表单的角色"""

    def __init__(self, base_url: Optional[str] = None, as_json: bool = False):
        self.client = QuoteApiClient(base_url=base_url)
        self.notifier = LoggingNotifier()
        self.as_json = as_json
        self.form_open = True

    def _close_form(self):
        self.form_open = False
        logger.debug("[Main] Form closed")

    def _controller_kwargs(self) -> Dict[str, Any]:
        return {'notifier': self.notifier, 'on_close': self._close_form}

    def _emit(self, payload: Dict[str, Any]):
        if self.as_json:
            print(json.dumps(payload, ensure_ascii=False, indent=2))
        else:
            for key, value in payload.items():
                print(f"{key}: {value}")

    async def _run_mutation(self, controller: MutationController, data: Any) -> bool:
        """提交一次变更并输出结果，返回是否成功"""
        result = await controller.submit_and_wait(data)

        if controller.field_errors:
            self._emit({'error': True, 'field_errors': controller.field_errors})
            return False

        message, kind, _ = self.notifier.history[-1]
        payload = {'notification': message, 'kind': kind.value}
        if result is not None:
            payload['quote'] = result.model_dump()
        self._emit(payload)
        return controller.last_error is None

    async def create(self, fields: Dict[str, Any]) -> bool:
        controller = create_quote_controller(self.client, **self._controller_kwargs())
        return await self._run_mutation(controller, fields)

    async def update(self, quote_id: int, fields: Dict[str, Any]) -> bool:
        controller = update_quote_controller(self.client, quote_id, **self._controller_kwargs())
        return await self._run_mutation(controller, fields)

    async def delete(self, quote_id: int) -> bool:
        controller = delete_quote_controller(self.client, **self._controller_kwargs())
        return await self._run_mutation(controller, quote_id)

    async def random(self) -> bool:
        """读取一条随机名言（走读缓存）"""
        quote = await query_cache.fetch(QUOTES_QUERY_KEY, self.client.retrieve)
        self._emit({'quote': quote.model_dump()})
        return True

    async def health(self) -> bool:
        response = await self.client.health_check()
        self._emit({'status': response.status, 'message': response.message})
        return response.is_success

    async def shutdown(self):
        # 在途的变更完成后再关闭会话
        await drain()
        await self.client.close()


def _collect_fields(args) -> Dict[str, Any]:
    """从命令行参数收集已提供的名言字段"""
    fields = {}
    for name in ('quote', 'category', 'anime', 'character'):
        value = getattr(args, name, None)
        if value is not None:
            fields[name] = value
    return fields


def _add_field_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('--quote', help='名言内容')
    parser.add_argument('--category', help='分类')
    parser.add_argument('--anime', help='动画名称')
    parser.add_argument('--character', help='角色')


def create_parser():
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        description="Quote Client - 动漫名言服务客户端",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例:
  python main.py create --quote "Believe it!" --category motivation --anime Naruto --character "Naruto Uzumaki"
  python main.py random                              # 获取随机名言
  python main.py update 5 --category new-category    # 部分更新
  python main.py delete 5                            # 删除名言
  python main.py health                              # 检查服务状态
        """
    )
    parser.add_argument('--base-url', help='服务端地址 (默认读取 config/api.json)')
    parser.add_argument('--json', action='store_true', help='以JSON格式输出')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    create_cmd = subparsers.add_parser('create', help='创建名言')
    _add_field_arguments(create_cmd)

    subparsers.add_parser('random', help='获取随机名言')

    update_parser = subparsers.add_parser('update', help='部分更新名言')
    update_parser.add_argument('quote_id', type=int, help='名言ID')
    _add_field_arguments(update_parser)

    delete_parser = subparsers.add_parser('delete', help='删除名言')
    delete_parser.add_argument('quote_id', type=int, help='名言ID')

    subparsers.add_parser('health', help='检查服务状态')

    return parser


async def main():
    """主函数"""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    app = QuoteClientApp(base_url=args.base_url, as_json=args.json)
    ok = False
    try:
        if args.command == 'create':
            ok = await app.create(_collect_fields(args))
        elif args.command == 'random':
            ok = await app.random()
        elif args.command == 'update':
            ok = await app.update(args.quote_id, _collect_fields(args))
        elif args.command == 'delete':
            ok = await app.delete(args.quote_id)
        elif args.command == 'health':
            ok = await app.health()

    except KeyboardInterrupt:
        logger.info("[Main] Received keyboard interrupt")
    except QuoteClientError as e:
        logger.error(f"[Main] Request failed: {e}")
        app._emit(create_error_response(e))
    finally:
        await app.shutdown()

    if not ok:
        sys.exit(1)


def run():
    """控制台脚本入口"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
