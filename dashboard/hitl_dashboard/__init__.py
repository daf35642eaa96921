# hitl_dashboard/__init__.py
# 人工审批工作流仪表盘
#
# 包结构：
# - core/      配置、日志、错误分类、请求生命周期控制器
# - client/    审批后端 API 客户端
# - schemas/   Pydantic 数据模式
# - services/  仪表盘统计逻辑
# - api/       仪表盘自身的 HTTP 路由

__version__ = "0.1.0"
