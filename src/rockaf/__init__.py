"""
Rockaf - Live Rock Performance Simulator
Tick-driven engine: drums, riffs, crowd energy, feedback ring, mixer routing
"""

__version__ = "0.1.0"

# Make key components available at package level
from .config import PerformanceConfig, VenueDescriptor
from .engine import PerformanceEngine, EngineState, PerformanceMetrics
from .errors import PerformanceError
from .event_log import EventLog, LogEntry

__all__ = [
    'PerformanceEngine', 'EngineState', 'PerformanceMetrics',
    'PerformanceConfig', 'VenueDescriptor',
    'PerformanceError', 'EventLog', 'LogEntry',
]
