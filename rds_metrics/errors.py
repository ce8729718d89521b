"""
异常定义

采集过程中只有两类错误：配置错误（查询前失败）和后端查询错误（中止整次运行）。
指标无数据不属于错误。
"""

from typing import Optional


class CollectorError(Exception):
    """采集器异常基类"""


class ConfigurationError(CollectorError):
    """配置无效（未知的统计类型、负数 fetch_age、缺少实例 ID 等）"""


class BackendQueryError(CollectorError):
    """单个指标查询失败（认证、网络、限流、响应格式错误）"""

    def __init__(self, metric_name: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.metric_name = metric_name
        self.cause = cause
        detail = message or (str(cause) if cause is not None else "unknown error")
        super().__init__(f"query for {metric_name} failed: {detail}")
