"""
单元测试：指标目录、统计类型与时间窗口

测试覆盖：
- 目录包含 16 个指标且名称不重复
- 统计类型关键字大小写不敏感，未知关键字报配置错误
- 时间窗口固定 120 秒，结束时间 = now - fetch_age
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# 添加项目路径到 sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rds_metrics.catalog import (
    METRIC_CATALOG,
    AggregationKind,
    WINDOW_SECONDS,
    resolve_aggregation,
    resolve_window,
)
from rds_metrics.errors import ConfigurationError


NOW = datetime(2026, 1, 20, 10, 0, 0, tzinfo=timezone.utc)


class TestMetricCatalog:
    """指标目录测试"""

    def test_catalog_has_sixteen_metrics(self):
        assert len(METRIC_CATALOG) == 16
        names = [entry.name for entry in METRIC_CATALOG]
        assert len(set(names)) == 16

    def test_catalog_contains_expected_metrics(self):
        names = {entry.name for entry in METRIC_CATALOG}
        for expected in ("CPUUtilization", "FreeableMemory", "ReplicaLag", "BinLogDiskUsage", "SwapUsage"):
            assert expected in names

    def test_catalog_entries_are_immutable(self):
        """测试：目录条目不可修改"""
        entry = METRIC_CATALOG[0]
        with pytest.raises(Exception):
            entry.name = "Other"


class TestResolveAggregation:
    """统计类型解析测试"""

    @pytest.mark.parametrize("keyword,expected", [
        ("average", AggregationKind.AVERAGE),
        ("minimum", AggregationKind.MINIMUM),
        ("maximum", AggregationKind.MAXIMUM),
        ("samplecount", AggregationKind.SAMPLE_COUNT),
        ("sum", AggregationKind.SUM),
    ])
    def test_known_keywords(self, keyword, expected):
        assert resolve_aggregation(keyword) == expected

    def test_case_insensitive(self):
        """测试：大小写不敏感"""
        assert resolve_aggregation("MAXIMUM") == AggregationKind.MAXIMUM
        assert resolve_aggregation("SampleCount") == AggregationKind.SAMPLE_COUNT

    def test_enum_value_is_cloudwatch_statistic(self):
        assert AggregationKind.SAMPLE_COUNT.value == "SampleCount"
        assert AggregationKind.AVERAGE.value == "Average"

    def test_unknown_keyword(self):
        """测试：未知关键字，错误信息包含该值"""
        with pytest.raises(ConfigurationError, match="bogus"):
            resolve_aggregation("bogus")

    def test_empty_keyword(self):
        with pytest.raises(ConfigurationError):
            resolve_aggregation("")


class TestResolveWindow:
    """时间窗口测试"""

    @pytest.mark.parametrize("fetch_age", [0, 1, 60, 300, 3600])
    def test_window_invariants(self, fetch_age):
        window = resolve_window(fetch_age, now=NOW)

        assert (window.end - window.start).total_seconds() == WINDOW_SECONDS
        assert (NOW - window.end).total_seconds() == fetch_age
        assert window.start < window.end

    def test_default_fetch_age_window(self):
        window = resolve_window(60, now=NOW)

        assert window.end == datetime(2026, 1, 20, 9, 59, 0, tzinfo=timezone.utc)
        assert window.start == datetime(2026, 1, 20, 9, 57, 0, tzinfo=timezone.utc)
        assert window.span_seconds == 120

    def test_default_now_is_utc(self):
        """测试：未传入 now 时使用当前 UTC 时间"""
        before = datetime.now(timezone.utc)
        window = resolve_window(60)
        after = datetime.now(timezone.utc)

        assert before - timedelta(seconds=60) <= window.end <= after - timedelta(seconds=60)

    def test_negative_fetch_age(self):
        with pytest.raises(ConfigurationError):
            resolve_window(-1, now=NOW)
