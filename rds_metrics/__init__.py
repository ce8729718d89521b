"""
RDS Metrics - CloudWatch RDS 指标采集器

负责：
- 按固定窗口从 CloudWatch 拉取 RDS 实例的 16 项性能指标
- 过滤无数据的指标
- 以 Graphite 文本格式 (<path> <value> <timestamp>) 输出到 stdout
- 以 Sensu 约定的退出码 (0/1/2/3) 报告结果
"""

__version__ = "1.0.0"
