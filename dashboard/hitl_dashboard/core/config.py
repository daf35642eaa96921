# hitl_dashboard/core/config.py
# 配置管理模块
#
# 功能说明：
# 1. 使用 Pydantic Settings 从环境变量加载配置
# 2. 支持 .env 文件读取
# 3. 提供类型安全的配置访问
#
# 使用方法：
#   from hitl_dashboard.core.config import settings
#   print(settings.API_BASE_URL)

from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    """
    应用配置类

    所有配置项都可以通过环境变量覆盖，环境变量名与属性名相同（大写）
    例如：设置 API_BASE_URL=http://localhost:5000/api 会覆盖后端地址
    """

    # ==================== 应用基础配置 ====================
    APP_NAME: str = "Human Looping Dashboard"   # 应用名称，显示在日志和API文档中
    DEBUG: bool = False                          # 调试模式：True 时输出详细日志

    # ==================== 日志配置 ====================
    # 日志级别：DEBUG < INFO < WARNING < ERROR < CRITICAL
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # 日志格式：console（彩色控制台输出）或 json（结构化JSON，适合生产环境）
    LOG_FORMAT: Literal["console", "json"] = "console"

    # ==================== 后端 API 配置 ====================
    # 审批后端地址，路由统一带 /api 前缀
    API_BASE_URL: str = "https://human-looping-backend.onrender.com/api"

    # 请求超时（秒）
    # 后端部署在 Render 免费实例上，冷启动可能需要 30-50 秒
    API_TIMEOUT_SECONDS: float = 60.0

    # 请求超过这个时间（秒）仍未返回时，提示用户"服务可能正在唤醒"
    SLOW_WARNING_SECONDS: float = 5.0

    # ==================== 仪表盘配置 ====================
    # 最近动态显示条数
    RECENT_ACTIVITY_LIMIT: int = 5

    class Config:
        """Pydantic 配置类"""
        env_file = ".env"              # 从 .env 文件读取环境变量
        env_file_encoding = "utf-8"    # 文件编码
        case_sensitive = True          # 环境变量名区分大小写
        extra = "ignore"               # 忽略 .env 中与本应用无关的变量


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置实例（单例模式）

    使用 @lru_cache 装饰器确保整个应用只创建一个 Settings 实例

    Returns:
        Settings: 配置实例
    """
    return Settings()


# 导出配置实例，方便其他模块使用
# 使用方式：from hitl_dashboard.core.config import settings
settings = get_settings()
