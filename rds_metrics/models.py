"""
数据模型定义

使用 Pydantic 定义查询请求、数据点、输出行和运行结果
"""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .catalog import (
    AggregationKind,
    CLOUDWATCH_NAMESPACE,
    DIMENSION_NAME,
    PERIOD_SECONDS,
    TimeWindow,
)


class QueryRequest(BaseModel):
    """单个指标的 GetMetricStatistics 请求"""
    namespace: str = Field(default=CLOUDWATCH_NAMESPACE, description="CloudWatch 命名空间")
    metric_name: str = Field(..., description="指标名")
    dimension_name: str = Field(default=DIMENSION_NAME, description="维度名")
    dimension_value: str = Field(..., description="RDS 实例 ID")
    window: TimeWindow = Field(..., description="查询时间窗口")
    period_seconds: int = Field(default=PERIOD_SECONDS, description="统计周期（秒）")
    aggregation: AggregationKind = Field(..., description="统计类型")

    def to_api_params(self) -> Dict[str, Any]:
        """转换为 boto3 get_metric_statistics 的参数"""
        return {
            "Namespace": self.namespace,
            "MetricName": self.metric_name,
            "Dimensions": [
                {"Name": self.dimension_name, "Value": self.dimension_value}
            ],
            "StartTime": self.window.start,
            "EndTime": self.window.end,
            "Period": self.period_seconds,
            "Statistics": [self.aggregation.value],
        }


class Datapoint(BaseModel):
    """后端返回的单个聚合数据点"""
    value: float = Field(..., description="聚合值")
    timestamp: datetime = Field(..., description="采样时间")


class RenderedMetricLine(BaseModel):
    """一行 Graphite 格式输出"""
    path: str = Field(..., description="指标路径，如 db-1.cpuutilization")
    value: float = Field(..., description="指标值")
    timestamp: int = Field(..., description="Unix 时间戳（秒）")

    def to_line(self) -> str:
        return f"{self.path} {self.value} {self.timestamp}"


class RunStatus(str, Enum):
    """单次运行的结果类型"""
    OK = "ok"
    CONFIG_ERROR = "config_error"
    QUERY_ERROR = "query_error"


class ExitStatus(IntEnum):
    """Sensu 插件退出码"""
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


class CollectResult(BaseModel):
    """采集结果"""
    status: RunStatus = Field(..., description="运行结果")
    lines: List[RenderedMetricLine] = Field(default_factory=list, description="已输出的指标行")
    error: Optional[str] = Field(None, description="错误信息")
    queries_issued: int = Field(default=0, description="已发出的查询数")

    @property
    def exit_status(self) -> ExitStatus:
        # WARNING 目前不会产生
        if self.status == RunStatus.OK:
            return ExitStatus.OK
        return ExitStatus.CRITICAL
