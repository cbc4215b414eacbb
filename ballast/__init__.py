"""Snapshot load testing for local HTTP APIs: configuration, load runs, result processing, snapshots and reporting."""

__version__ = "0.1.2"