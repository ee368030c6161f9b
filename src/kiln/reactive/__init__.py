"""Reactive layer — change propagation pipeline.

Connects file changes to browser reloads through the change detector,
dependency graph, rebuild orchestrator and live reload channel.
"""

from kiln.reactive.broadcaster import LiveReloadChannel, ReloadClient
from kiln.reactive.digest import ChangeDetector
from kiln.reactive.graph import DependencyGraph
from kiln.reactive.pipeline import RebuildOrchestrator, RebuildResult

__all__ = [
    "ChangeDetector",
    "DependencyGraph",
    "LiveReloadChannel",
    "RebuildOrchestrator",
    "RebuildResult",
    "ReloadClient",
]
