"""Timeline metrics, logging and plotting."""

from analysis.metrics import calculate_timeline_metrics, calculate_running_cost, compare_timelines
from analysis.data_logger import TimelineLogger

__all__ = ['calculate_timeline_metrics', 'calculate_running_cost', 'compare_timelines', 'TimelineLogger']
