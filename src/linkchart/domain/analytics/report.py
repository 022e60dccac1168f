from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from linkchart.domain.model import PipelineWarning

    from .centrality import CentralNode
    from .communities import CommunityResult
    from .components import Cluster
    from .metrics import GraphMetrics
    from .patterns import Patterns


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalysisReport:
    """Everything computed for one resolved graph.

    ``components`` maps every node to its connected component; ``clusters``
    lists only the components with more than one node.
    """

    metrics: GraphMetrics
    central_nodes: tuple[CentralNode, ...]
    clusters: tuple[Cluster, ...]
    patterns: Patterns
    communities: CommunityResult
    components: Mapping[str, int] = field(default_factory=dict[str, int])
    path: tuple[str, ...] | None = None
    extended_centrality: Mapping[str, Mapping[str, float]] = field(
        default_factory=dict[str, dict[str, float]]
    )
    warnings: tuple[PipelineWarning, ...] = ()
