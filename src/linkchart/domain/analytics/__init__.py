"""Graph analytics over resolved nodes and edges.

Every function here reads its input and builds new records; nothing mutates the
graph. Iteration follows node insertion order so results are reproducible.
"""

from .adjacency import Adjacency
from .centrality import CentralNode, degree_ranking, extended_centrality, to_networkx
from .communities import Community, CommunityResult, detect_communities
from .components import Cluster, connected_components, find_clusters
from .engine import AnalyzeOptions, analyze
from .metrics import GraphMetrics, compute_metrics
from .paths import find_all_paths, find_path
from .patterns import (
    Hierarchy,
    Hub,
    Patterns,
    discover_patterns,
    find_cycles,
    find_hierarchies,
    find_hubs,
)
from .report import AnalysisReport

__all__ = [
    "Adjacency",
    "AnalysisReport",
    "AnalyzeOptions",
    "CentralNode",
    "Cluster",
    "Community",
    "CommunityResult",
    "GraphMetrics",
    "Hierarchy",
    "Hub",
    "Patterns",
    "analyze",
    "compute_metrics",
    "connected_components",
    "degree_ranking",
    "detect_communities",
    "discover_patterns",
    "extended_centrality",
    "find_all_paths",
    "find_clusters",
    "find_cycles",
    "find_hierarchies",
    "find_hubs",
    "find_path",
    "to_networkx",
]
