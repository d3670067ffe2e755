"""
imbridge 配置模块
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用配置"""

    # === 企业微信 ===
    wecom_corp_id: str = Field(default="", description="企业微信 Corp ID")
    wecom_corp_secret: str = Field(default="", description="企业微信应用 Secret")
    wecom_agent_id: str = Field(default="", description="企业微信应用 AgentId")
    wecom_api_base: str = Field(
        default="https://qyapi.weixin.qq.com/cgi-bin", description="企业微信 API 地址"
    )

    # === 钉钉 ===
    dingtalk_app_key: str = Field(default="", description="钉钉 AppKey（Client ID）")
    dingtalk_app_secret: str = Field(default="", description="钉钉 AppSecret（Client Secret）")
    dingtalk_agent_id: str = Field(default="", description="钉钉应用 AgentId（发送工作通知需要）")
    dingtalk_api_base: str = Field(
        default="https://oapi.dingtalk.com", description="钉钉 API 地址"
    )

    # === 飞书 ===
    feishu_app_id: str = Field(default="", description="飞书 App ID")
    feishu_app_secret: str = Field(default="", description="飞书 App Secret")
    feishu_api_base: str = Field(
        default="https://open.feishu.cn/open-apis", description="飞书 API 地址"
    )

    # === 请求与 token ===
    http_timeout: float = Field(default=10.0, description="HTTP 请求超时（秒）")
    token_refresh_margin: int = Field(
        default=60, description="token 提前过期的秒数（防止时钟偏差和请求耗时）"
    )
    strict_department_ids: bool = Field(
        default=False,
        description="部门 ID 无法解析为整数时抛错（默认置 0 并记录警告）",
    )

    # === HTTP API / Webhook 中转 ===
    api_host: str = Field(default="127.0.0.1", description="HTTP API 绑定地址")
    api_port: int = Field(default=8080, description="HTTP API 端口")
    relay_max_logs: int = Field(default=10, description="每个 webhook 保留的转发日志条数")

    # 路径配置
    project_root: Path = Field(
        default_factory=lambda: Path.cwd(), description="项目根目录 (默认为当前工作目录)"
    )

    # === 日志配置 ===
    log_level: str = Field(default="INFO", description="日志级别")
    log_dir: str = Field(default="logs", description="日志目录")
    log_file_prefix: str = Field(default="imbridge", description="日志文件前缀")
    log_max_size_mb: int = Field(default=10, description="单个日志文件最大大小（MB）")
    log_backup_count: int = Field(default=30, description="保留的日志文件数量")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="日志格式"
    )
    log_to_console: bool = Field(default=True, description="是否输出到控制台")
    log_to_file: bool = Field(default=False, description="是否输出到文件")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        # 忽略空字符串环境变量，避免 "" 被解析成 int/bool 导致启动失败
        "env_ignore_empty": True,
    }

    @property
    def wecom_configured(self) -> bool:
        return bool(self.wecom_corp_id and self.wecom_corp_secret)

    @property
    def dingtalk_configured(self) -> bool:
        return bool(self.dingtalk_app_key and self.dingtalk_app_secret)

    @property
    def feishu_configured(self) -> bool:
        return bool(self.feishu_app_id and self.feishu_app_secret)

    @property
    def log_dir_path(self) -> Path:
        """日志目录完整路径"""
        return self.project_root / self.log_dir


# 全局配置实例
settings = Settings()
