"""
采集流程

解析统计类型和时间窗口，按目录顺序逐个查询指标，
有数据的指标立即以 Graphite 格式写出。
"""

import logging
import sys
from datetime import datetime
from typing import List, Optional, TextIO

from .catalog import (
    METRIC_CATALOG,
    AggregationKind,
    MetricCatalogEntry,
    TimeWindow,
    resolve_aggregation,
    resolve_window,
)
from .cloudwatch import CloudWatchClient
from .config import CollectorConfig
from .errors import BackendQueryError, ConfigurationError
from .models import CollectResult, Datapoint, QueryRequest, RenderedMetricLine, RunStatus

logger = logging.getLogger(__name__)


def build_request(
    entry: MetricCatalogEntry,
    instance_id: str,
    window: TimeWindow,
    aggregation: AggregationKind,
) -> QueryRequest:
    """构造单个指标的查询请求"""
    return QueryRequest(
        metric_name=entry.name,
        dimension_value=instance_id,
        window=window,
        aggregation=aggregation,
    )


def render_line(prefix: str, metric_name: str, datapoint: Datapoint) -> RenderedMetricLine:
    """
    生成输出行

    时间戳使用数据点自身的采样时间（截断到秒），而不是查询时间。
    """
    return RenderedMetricLine(
        path=f"{prefix}.{metric_name.lower()}",
        value=datapoint.value,
        timestamp=int(datapoint.timestamp.timestamp()),
    )


def collect(
    config: CollectorConfig,
    client: CloudWatchClient,
    out: Optional[TextIO] = None,
    now: Optional[datetime] = None,
) -> CollectResult:
    """
    执行一次采集

    Args:
        config: 采集器配置
        client: 指标查询客户端
        out: 输出流，默认 stdout
        now: 当前时间（测试用）

    Returns:
        CollectResult，任一查询失败即终止，已写出的行保留
    """
    if out is None:
        out = sys.stdout

    # 配置错误必须在任何查询之前报告
    try:
        aggregation = resolve_aggregation(config.statistics_type)
        window = resolve_window(config.fetch_age, now=now)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return CollectResult(status=RunStatus.CONFIG_ERROR, error=str(e))

    prefix = config.namespace_prefix
    logger.info(
        f"Fetching {len(METRIC_CATALOG)} metrics for {config.instance_id} "
        f"({aggregation.value}, {window.start.isoformat()} - {window.end.isoformat()})"
    )

    lines: List[RenderedMetricLine] = []
    queries_issued = 0

    for entry in METRIC_CATALOG:
        request = build_request(entry, config.instance_id, window, aggregation)
        queries_issued += 1
        try:
            datapoints = client.get_datapoints(request)
        except BackendQueryError as e:
            logger.error(f"Aborting after {queries_issued} queries: {e}")
            return CollectResult(
                status=RunStatus.QUERY_ERROR,
                lines=lines,
                error=str(e),
                queries_issued=queries_issued,
            )

        if not datapoints:
            # 例如非只读副本没有 ReplicaLag
            logger.debug(f"No datapoint for {entry.name}, skipped")
            continue

        line = render_line(prefix, entry.name, datapoints[0])
        out.write(line.to_line() + "\n")
        out.flush()
        lines.append(line)

    logger.info(f"Done: {len(lines)}/{len(METRIC_CATALOG)} metrics written")
    return CollectResult(status=RunStatus.OK, lines=lines, queries_issued=queries_issued)
