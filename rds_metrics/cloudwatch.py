"""
CloudWatch 查询客户端

封装 boto3 cloudwatch 客户端的 get_metric_statistics 调用，
把 botocore 异常统一转换为 BackendQueryError。
"""

import logging
from typing import Any, Dict, List

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from .config import CollectorConfig
from .errors import BackendQueryError
from .models import Datapoint, QueryRequest

logger = logging.getLogger(__name__)


class CloudWatchClient:
    """CloudWatch 指标查询"""

    def __init__(self, client: Any):
        """
        Args:
            client: boto3 cloudwatch 客户端
        """
        self._client = client

    @classmethod
    def from_config(cls, config: CollectorConfig) -> "CloudWatchClient":
        """
        根据配置创建客户端

        每次运行只尝试一次，不做重试。
        """
        botocore_config = Config(
            connect_timeout=config.timeout,
            read_timeout=config.timeout,
            retries={"mode": "standard", "total_max_attempts": 1},
        )

        kwargs: Dict[str, Any] = {"region_name": config.aws_region, "config": botocore_config}
        if config.aws_access_key and config.aws_secret_access_key:
            kwargs["aws_access_key_id"] = config.aws_access_key
            kwargs["aws_secret_access_key"] = config.aws_secret_access_key

        logger.debug(f"Creating CloudWatch client (region={config.aws_region})")
        return cls(boto3.client("cloudwatch", **kwargs))

    def get_datapoints(self, request: QueryRequest) -> List[Datapoint]:
        """
        查询单个指标

        Args:
            request: 查询请求

        Returns:
            数据点列表（保持后端返回顺序），窗口内无数据时为空列表

        Raises:
            BackendQueryError: 认证、网络、限流失败或响应格式错误
        """
        metric_name = request.metric_name
        try:
            response = self._client.get_metric_statistics(**request.to_api_params())
        except (ClientError, BotoCoreError) as e:
            raise BackendQueryError(metric_name, e) from e

        statistic = request.aggregation.value
        result = []
        try:
            for raw in response.get("Datapoints") or []:
                result.append(Datapoint(value=raw[statistic], timestamp=raw["Timestamp"]))
        except KeyError as e:
            raise BackendQueryError(
                metric_name, e, message=f"datapoint missing field {e}"
            ) from e
        except (TypeError, ValidationError) as e:
            raise BackendQueryError(
                metric_name, e, message=f"malformed datapoint: {e}"
            ) from e

        logger.debug(f"{metric_name}: {len(result)} datapoint(s)")
        return result
