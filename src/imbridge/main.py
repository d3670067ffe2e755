"""
imbridge CLI 入口

使用 Typer 和 Rich 提供命令行界面:
- send: 发送消息
- departments / users: 查看通讯录
- channels: 查看平台配置状态
- serve: 启动 HTTP API 与 webhook 中转服务
"""

import json
import logging

import typer
from rich.console import Console
from rich.table import Table

from .channels.errors import IMError
from .channels.registry import ClientRegistry
from .channels.types import Message, MessageType
from .config import settings
from .logging import setup_logging

setup_logging(
    log_dir=settings.log_dir_path,
    log_level=settings.log_level,
    log_format=settings.log_format,
    log_file_prefix=settings.log_file_prefix,
    log_max_size_mb=settings.log_max_size_mb,
    log_backup_count=settings.log_backup_count,
    log_to_console=settings.log_to_console,
    log_to_file=settings.log_to_file,
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="imbridge",
    help="imbridge - 企业微信 / 钉钉 / 飞书 统一消息与通讯录工具",
    add_completion=False,
)

console = Console()

_registry: ClientRegistry | None = None


def get_registry() -> ClientRegistry:
    global _registry
    if _registry is None:
        _registry = ClientRegistry(settings)
    return _registry


def _get_client(provider: str):
    try:
        return get_registry().get(provider)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _parse_content(msg_type: MessageType, content: str):
    """text 直接使用字符串，其他类型解析 JSON"""
    if msg_type == MessageType.TEXT:
        return content
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        # image/voice/file 允许直接传 media_id
        return {"media_id": content}


@app.command()
def send(
    provider: str = typer.Argument(..., help="平台: wecom / dingtalk / feishu"),
    content: str = typer.Argument(..., help="消息内容（text 为文本，其他类型为 JSON 或 media_id）"),
    to_user: list[str] = typer.Option([], "--to-user", "-u", help="接收人 ID（可多次指定）"),
    to_dept: list[str] = typer.Option([], "--to-dept", "-d", help="接收部门 ID（可多次指定）"),
    msg_type: MessageType = typer.Option(MessageType.TEXT, "--type", "-t", help="消息类型"),
):
    """发送消息"""
    client = _get_client(provider)
    try:
        msg = Message.from_dict(
            {"type": msg_type.value, "content": _parse_content(msg_type, content)}
        )
        client.send_message(to_user, to_dept, msg)
    except IMError as e:
        console.print(f"[red]发送失败: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] {msg.type.value} 消息已发送")


@app.command()
def departments(
    provider: str = typer.Argument(..., help="平台: wecom / dingtalk / feishu"),
):
    """查看部门列表"""
    client = _get_client(provider)
    try:
        items = client.get_departments()
    except IMError as e:
        console.print(f"[red]获取部门失败: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{provider} 部门")
    table.add_column("ID", style="cyan")
    table.add_column("名称", style="green")
    for dept in items:
        table.add_row(str(dept.id), dept.name)
    console.print(table)


@app.command()
def users(
    provider: str = typer.Argument(..., help="平台: wecom / dingtalk / feishu"),
):
    """查看根部门用户（仅第一页）"""
    client = _get_client(provider)
    try:
        items = client.get_users()
    except IMError as e:
        console.print(f"[red]获取用户失败: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{provider} 用户")
    table.add_column("ID", style="cyan")
    table.add_column("姓名", style="green")
    table.add_column("手机", style="yellow")
    table.add_column("部门", style="magenta")
    for user in items:
        table.add_row(user.id, user.name, user.phone, ", ".join(user.dept_ids))
    console.print(table)


@app.command()
def channels():
    """显示平台配置状态"""
    table = Table(title="IM 平台")
    table.add_column("平台", style="cyan")
    table.add_column("配置", style="green")
    table.add_column("支持的消息类型", style="yellow")

    rows = [
        ("wecom", "企业微信", settings.wecom_configured, "全部 8 种"),
        ("dingtalk", "钉钉", settings.dingtalk_configured, "text, image"),
        ("feishu", "飞书", settings.feishu_configured, "text, image"),
    ]
    for key, name, configured, types in rows:
        table.add_row(f"{name} ({key})", "✓" if configured else "✗", types)

    console.print(table)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="绑定地址（默认读取 API_HOST）"),
    port: int | None = typer.Option(None, "--port", "-p", help="端口（默认读取 API_PORT）"),
):
    """启动 HTTP API 与 webhook 中转服务"""
    from .api.server import run_api_server

    console.print(
        f"[bold]imbridge[/bold] listening on "
        f"http://{host or settings.api_host}:{port or settings.api_port}"
    )
    run_api_server(settings, host=host, port=port)


if __name__ == "__main__":
    app()
