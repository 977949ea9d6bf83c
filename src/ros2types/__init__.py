"""Index of ROS 2 interface types answering wildcard lookups."""

from __future__ import annotations

__version__ = "0.1.0"
