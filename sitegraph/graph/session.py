"""Interaction state between the graph core and a force-directed renderer.

The renderer owns layout and animation.  It must be re-seeded with a fresh
node/edge array only when the underlying crawl data changes; a click that
merely changes the focused node swaps edges and colours in place.
:attr:`SessionView.reseed_layout` carries that decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sitegraph.config import Settings
from sitegraph.errors import NodeNotFoundError
from sitegraph.graph.memo import GraphMemo
from sitegraph.graph.models import AnalysisResult, GraphNode, GraphPayload


@dataclass
class SessionView:
    payload: GraphPayload
    reseed_layout: bool
    selected_id: Optional[str]
    hovered: Optional[GraphNode]


class GraphSession:
    def __init__(
        self,
        result: Optional[AnalysisResult] = None,
        config: Optional[Settings] = None,
        memo: Optional[GraphMemo] = None,
    ) -> None:
        self.memo = memo or GraphMemo(config)
        self.result = result or AnalysisResult()
        self.selected_id: Optional[str] = None
        self.hovered_id: Optional[str] = None
        self._seeded_fingerprint: Optional[str] = None

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------
    def load(self, result: AnalysisResult) -> None:
        """Swap in new crawl data.  A selection that no longer exists is cleared."""
        self.result = result
        base = self.memo.build(result).base
        if self.selected_id and base.node(self.selected_id) is None:
            self.selected_id = None
        if self.hovered_id and base.node(self.hovered_id) is None:
            self.hovered_id = None

    @property
    def base(self) -> GraphPayload:
        return self.memo.build(self.result).base

    def _require(self, node_id: str) -> GraphNode:
        node = self.base.node(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    # ------------------------------------------------------------------
    # Renderer callbacks
    # ------------------------------------------------------------------
    def select(self, node_id: str) -> GraphNode:
        node = self._require(node_id)
        self.selected_id = node.id
        return node

    def clear_selection(self) -> None:
        self.selected_id = None

    def click(self, node_id: str) -> str:
        """Select *node_id* and return its url for the page-detail navigation."""
        return self.select(node_id).url

    def hover(self, node_id: str) -> GraphNode:
        node = self._require(node_id)
        self.hovered_id = node.id
        return node

    def unhover(self) -> None:
        self.hovered_id = None

    def page_index(self, node_id: str) -> Optional[int]:
        """Position of the node's page in the loaded result, or ``None``."""
        for i, page in enumerate(self.result.pages):
            if page.url == node_id:
                return i
        return None

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def view(self) -> SessionView:
        graph = self.memo.build(self.result, self.selected_id)
        reseed = graph.fingerprint != self._seeded_fingerprint
        self._seeded_fingerprint = graph.fingerprint

        hovered = None
        # The tooltip only shows while nothing is selected.
        if self.hovered_id and not self.selected_id:
            hovered = graph.base.node(self.hovered_id)

        return SessionView(
            payload=graph.payload,
            reseed_layout=reseed,
            selected_id=self.selected_id,
            hovered=hovered,
        )
