"""Grow box controller parts: sensors, rule sets, actions, remote sockets, clocks and logging."""

__version__ = "1.0.0"