"""
Graph — typed dependency graphs on nodnod.

    from reconciler import graph as G

    @G.node
    class PayloadNode:
        @classmethod
        def __compose__(cls, payload: PlacementPayload) -> "PayloadNode":
            return cls(payload.raw)

    node = await G.run(PayloadNode).inject(PlacementPayload(raw))
"""

from nodnod import scalar_node as node

from reconciler.graph._run import GraphRun, run

__all__ = ("node", "GraphRun", "run")
