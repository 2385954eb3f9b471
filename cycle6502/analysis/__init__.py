"""
Analysis tools for recorded CPU traces.
"""
from .cycle_analyzer import CycleAnalyzer
from .state_recorder import StateRecorder
