"""Metric models and the gauge registry"""
from .models import MetricType, MetricValue, Observation
from .registry import GaugeFamily, GaugeRegistry, StagedWrites

__all__ = [
    'MetricType',
    'MetricValue',
    'Observation',
    'GaugeFamily',
    'GaugeRegistry',
    'StagedWrites'
]
