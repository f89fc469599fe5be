"""Simulator for an LED trophy driven by WLED realtime UDP packets."""

__version__ = "0.1.0"