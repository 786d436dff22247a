"""Transcode planner - plan the staged encoding jobs of a video."""

__version__ = "0.1.0"
