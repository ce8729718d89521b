"""
RDS Metrics 主程序入口

使用方式:
    python -m rds_metrics -i <DB_INSTANCE_IDENTIFIER>
    或
    rds-metrics -i <DB_INSTANCE_IDENTIFIER> -t maximum -s prod.rds.db1

stdout 只输出指标行，日志写到 stderr。
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .cloudwatch import CloudWatchClient
from .collector import collect
from .config import CollectorConfig, load_config
from .errors import ConfigurationError
from .models import ExitStatus


def build_parser() -> argparse.ArgumentParser:
    """构造命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog="rds-metrics",
        description="Fetch Amazon RDS metrics from CloudWatch in Graphite format",
    )
    parser.add_argument("-c", "--config", help="YAML config file")
    parser.add_argument(
        "-a", "--aws-access-key", dest="aws_access_key",
        help="AWS Access Key. Either set ENV['AWS_ACCESS_KEY_ID'] or provide it as an option",
    )
    parser.add_argument(
        "-k", "--aws-secret-access-key", dest="aws_secret_access_key",
        help="AWS Secret Access Key. Either set ENV['AWS_SECRET_ACCESS_KEY'] or provide it as an option",
    )
    parser.add_argument("-r", "--aws-region", dest="aws_region", help="AWS Region (default: us-east-1)")
    parser.add_argument(
        "-i", "--instance-id", "--instance_id", dest="instance_id",
        help="RDS Instance Identifier",
    )
    parser.add_argument(
        "-s", "--scheme", dest="scheme",
        help="Metric naming scheme, text to prepend to metric (default: instance id)",
    )
    parser.add_argument(
        "-f", "--fetch-age", "--fetch_age", dest="fetch_age", type=int,
        help="How long ago to fetch metrics for, in seconds (default: 60)",
    )
    parser.add_argument(
        "-t", "--statistics-type", "--statistics_type", dest="statistics_type",
        help="Statistics type: average, minimum, maximum, samplecount or sum (default: average)",
    )
    parser.add_argument("--timeout", type=float, help="CloudWatch request timeout in seconds")
    parser.add_argument("--log-level", dest="log_level", help="Log level (default: WARNING)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(config: CollectorConfig):
    """配置日志"""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    level = getattr(logging, config.logging.level.upper(), logging.WARNING)

    # stdout 留给指标输出
    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(log_format))
        logging.getLogger().addHandler(file_handler)

    # 降低第三方库日志级别
    for name in ("boto3", "botocore", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None):
    """主程序入口"""
    args = vars(build_parser().parse_args(argv))
    config_path = args.pop("config")

    try:
        config = load_config(config_path, **args)
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(ExitStatus.CRITICAL)

    setup_logging(config)
    logger = logging.getLogger(__name__)

    try:
        client = CloudWatchClient.from_config(config)
    except Exception as e:
        logger.error(f"Failed to create CloudWatch client: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(ExitStatus.CRITICAL)

    try:
        result = collect(config, client)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(ExitStatus.CRITICAL)

    if result.error:
        print(f"Error: {result.error}")
    sys.exit(result.exit_status)


if __name__ == "__main__":
    main()
