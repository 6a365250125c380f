from .event_processor import EventProcessor
from .metrics_processor import MetricsProcessor, WeekMetrics, TIME_BLOCKS

__all__ = ["EventProcessor", "MetricsProcessor", "WeekMetrics", "TIME_BLOCKS"]
