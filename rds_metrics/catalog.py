"""
指标目录与时间窗口

固定的 RDS 指标列表、统计类型映射，以及查询时间窗口的计算。
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError


CLOUDWATCH_NAMESPACE = "AWS/RDS"
DIMENSION_NAME = "DBInstanceIdentifier"

# 窗口固定 2 分钟，每个 period 60 秒
WINDOW_SECONDS = 120
PERIOD_SECONDS = 60


class MetricCatalogEntry(BaseModel):
    """指标目录条目（unit 仅作说明，不参与输出）"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="CloudWatch 指标名")
    unit: str = Field(..., description="指标单位")


class AggregationKind(str, Enum):
    """CloudWatch 统计类型"""
    AVERAGE = "Average"
    MINIMUM = "Minimum"
    MAXIMUM = "Maximum"
    SAMPLE_COUNT = "SampleCount"
    SUM = "Sum"


class TimeWindow(BaseModel):
    """查询时间窗口 [start, end]"""
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def span_seconds(self) -> float:
        return (self.end - self.start).total_seconds()


METRIC_CATALOG: Tuple[MetricCatalogEntry, ...] = (
    MetricCatalogEntry(name="BinLogDiskUsage", unit="Bytes"),
    MetricCatalogEntry(name="CPUUtilization", unit="Percent"),
    MetricCatalogEntry(name="DatabaseConnections", unit="Count"),
    MetricCatalogEntry(name="DiskQueueDepth", unit="Count"),
    MetricCatalogEntry(name="FreeStorageSpace", unit="Bytes"),
    MetricCatalogEntry(name="FreeableMemory", unit="Bytes"),
    MetricCatalogEntry(name="NetworkReceiveThroughput", unit="Bytes"),
    MetricCatalogEntry(name="NetworkTransmitThroughput", unit="Bytes"),
    MetricCatalogEntry(name="ReadIOPS", unit="Count/Second"),
    MetricCatalogEntry(name="ReadLatency", unit="Seconds"),
    MetricCatalogEntry(name="ReadThroughput", unit="Bytes/Second"),
    MetricCatalogEntry(name="ReplicaLag", unit="Seconds"),
    MetricCatalogEntry(name="SwapUsage", unit="Bytes"),
    MetricCatalogEntry(name="WriteIOPS", unit="Count/Second"),
    MetricCatalogEntry(name="WriteLatency", unit="Seconds"),
    MetricCatalogEntry(name="WriteThroughput", unit="Bytes/Second"),
)

# 配置关键字 -> 统计类型
AGGREGATION_KEYWORDS: Dict[str, AggregationKind] = {
    "average": AggregationKind.AVERAGE,
    "minimum": AggregationKind.MINIMUM,
    "maximum": AggregationKind.MAXIMUM,
    "samplecount": AggregationKind.SAMPLE_COUNT,
    "sum": AggregationKind.SUM,
}


def resolve_aggregation(keyword: str) -> AggregationKind:
    """
    解析统计类型关键字（大小写不敏感）

    Args:
        keyword: 配置中的统计类型，如 "average"、"Maximum"

    Returns:
        对应的 AggregationKind

    Raises:
        ConfigurationError: 关键字不在已知列表中
    """
    kind = AGGREGATION_KEYWORDS.get((keyword or "").lower())
    if kind is None:
        choices = ", ".join(AGGREGATION_KEYWORDS)
        raise ConfigurationError(
            f"Unknown statistics type '{keyword}' (expected one of: {choices})"
        )
    return kind


def resolve_window(fetch_age_seconds: int, now: Optional[datetime] = None) -> TimeWindow:
    """
    计算查询窗口

    end = now - fetch_age，start = end - 120s。
    CloudWatch 上报存在延迟，所以窗口向过去偏移 fetch_age 秒。

    Args:
        fetch_age_seconds: 向过去偏移的秒数（>= 0）
        now: 当前时间，默认取 UTC 当前时间

    Returns:
        TimeWindow 实例
    """
    if fetch_age_seconds < 0:
        raise ConfigurationError(f"fetch_age must be non-negative, got {fetch_age_seconds}")

    if now is None:
        now = datetime.now(timezone.utc)

    end = now - timedelta(seconds=fetch_age_seconds)
    start = end - timedelta(seconds=WINDOW_SECONDS)
    return TimeWindow(start=start, end=end)
