# hitl_dashboard/main.py
# FastAPI 应用入口
#
# 功能说明：
# 1. 创建 FastAPI 应用实例
# 2. 配置中间件（CORS、日志）
# 3. 注册路由
# 4. 管理后端客户端生命周期（启动时创建，关闭时释放）
#
# 启动命令（在 dashboard 目录下）：
#   uvicorn hitl_dashboard.main:app --reload --host 0.0.0.0 --port 8000
#
# API 文档：
#   - Swagger UI: http://localhost:8000/docs

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hitl_dashboard import __version__
from hitl_dashboard.client.api import backend_client
from hitl_dashboard.core.config import settings
from hitl_dashboard.core.errors import ClassifiedError
from hitl_dashboard.core.logging import setup_logging, get_logger, RequestLoggingMiddleware

from hitl_dashboard.api import health
from hitl_dashboard.api import dashboard as dashboard_router
from hitl_dashboard.api import workflows as workflows_router
from hitl_dashboard.api import approvals as approvals_router


# 初始化日志系统（在应用启动前）
setup_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理

    - 启动时：创建后端 HTTP 客户端
    - 关闭时：释放连接池
    """
    logger.info(f"正在启动 {settings.APP_NAME}...")

    await backend_client.connect()
    logger.info(f"审批后端: {settings.API_BASE_URL}")

    yield

    logger.info("正在关闭...")
    try:
        await backend_client.close()
    except Exception as e:
        logger.warning(f"关闭后端客户端时出错: {e}")
    logger.info("清理完成，应用已关闭")


# ==================== 创建 FastAPI 应用 ====================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Human Looping Dashboard - 人工审批工作流仪表盘

    ## 功能模块

    - **仪表盘**: 工作流统计、最近动态
    - **工作流**: 创建、查询、更新状态、删除
    - **审批**: 待审批列表、审批通过/拒绝

    后端部署在免费实例上，冷启动可能需要 30-50 秒；
    超过 5 秒的请求会在响应头中带上 `X-Slow-Warning: true`。
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# ==================== 中间件配置 ====================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],        # 生产环境应该配置具体的域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Slow-Warning"],
)

app.add_middleware(RequestLoggingMiddleware)


# ==================== 全局异常处理 ====================

@app.exception_handler(ClassifiedError)
async def classified_error_handler(request: Request, exc: ClassifiedError):
    """后端调用失败：message 已经是用户可读的文案，直接返回"""
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    处理请求验证错误

    自定义 validator 抛出的 ValueError 会出现在 ctx 中，需要先转换成可序列化的结构
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """处理未捕获的异常"""
    logger.exception(f"未处理的异常: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {str(exc)}"},
    )


# ==================== 注册路由 ====================

# - GET /health            - 基础健康检查
# - GET /health/backend    - 后端连通性检查
app.include_router(health.router)

# - GET /api/dashboard     - 统计 + 最近动态
app.include_router(dashboard_router.router)

# - GET/POST /api/workflows
# - GET/DELETE /api/workflows/{id}
# - PATCH /api/workflows/{id}/status
app.include_router(workflows_router.router)

# - GET /api/approvals, /api/approvals/pending, /api/approvals/{id}
# - POST /api/approvals/{id}/approve, /api/approvals/{id}/reject
app.include_router(approvals_router.router)


@app.get("/", tags=["Root"])
async def root():
    """返回应用基本信息和文档链接"""
    return {
        "app": settings.APP_NAME,
        "version": __version__,
        "backend": settings.API_BASE_URL,
        "docs": "/docs",
        "health": "/health",
    }
