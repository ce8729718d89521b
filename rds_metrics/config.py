"""
配置管理模块

配置来源（优先级从高到低）：
1. 命令行参数
2. YAML 配置文件（--config 或环境变量 RDS_METRICS_CONFIG）
3. 环境变量 RDS_METRICS_*
4. 默认值
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "WARNING"
    file: Optional[str] = None


class CollectorConfig(BaseSettings):
    """采集器配置"""
    model_config = SettingsConfigDict(
        env_prefix="RDS_METRICS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # 未设置时交给 boto3 默认凭证链（AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY、profile、实例角色）
    aws_access_key: Optional[str] = Field(default=None, description="AWS Access Key")
    aws_secret_access_key: Optional[str] = Field(default=None, description="AWS Secret Access Key")
    aws_region: str = Field(default="us-east-1", description="AWS 区域")
    instance_id: str = Field(..., min_length=1, description="RDS 实例 ID (DBInstanceIdentifier)")
    scheme: str = Field(default="", description="指标路径前缀，为空时使用实例 ID")
    fetch_age: int = Field(default=60, ge=0, description="窗口结束时间距当前的秒数")
    statistics_type: str = Field(default="average", description="统计类型: average|minimum|maximum|samplecount|sum")
    timeout: float = Field(default=10.0, gt=0, description="CloudWatch 请求超时（秒）")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def _check_credentials(self) -> "CollectorConfig":
        # 凭证必须成对提供，否则交给默认凭证链
        if bool(self.aws_access_key) != bool(self.aws_secret_access_key):
            raise ValueError(
                "aws_access_key and aws_secret_access_key must be given together"
            )
        return self

    @property
    def namespace_prefix(self) -> str:
        """获取指标路径前缀"""
        return self.scheme or self.instance_id


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read config file {config_file}: {e}") from e

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"Config file {config_file} must contain a mapping")
    return raw_config


def load_config(config_path: Optional[str] = None, **overrides: Any) -> CollectorConfig:
    """
    加载配置

    Args:
        config_path: YAML 配置文件路径，默认取环境变量 RDS_METRICS_CONFIG
        **overrides: 命令行参数覆盖，值为 None 的项会被忽略

    Returns:
        CollectorConfig 实例

    Raises:
        ConfigurationError: 配置文件不存在、格式错误或校验失败
    """
    data: Dict[str, Any] = {}

    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        data = _read_yaml(config_file)
    else:
        env_path = os.environ.get("RDS_METRICS_CONFIG")
        # 环境变量指定的文件不存在时忽略
        if env_path and Path(env_path).exists():
            data = _read_yaml(Path(env_path))

    log_level = overrides.pop("log_level", None)
    if log_level is not None:
        logging_data = dict(data.get("logging") or {})
        logging_data["level"] = log_level
        data["logging"] = logging_data

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return CollectorConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
