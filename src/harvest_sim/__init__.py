"""Combine harvester simulation: grain-loss and tank model, field lanes, lane following."""

__version__ = "0.1.0"
