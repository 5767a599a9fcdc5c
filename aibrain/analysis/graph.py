"""Project-level dependency graph.

Collapses internal file->module edges into project->project edges so the
architecture map can show coupling between declared projects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from aibrain.analysis.imports import ImportGraph
from aibrain.analysis.structure import enclosing_project


@dataclass
class NodeMetrics:
    name: str
    fan_in: int
    fan_out: int


class ProjectGraph:
    """Dependency graph over project paths."""

    def __init__(self, nodes: List[str], edges: Dict[str, Dict[str, int]]):
        self.nodes: Set[str] = set(nodes)
        # src -> dst -> number of file-level edges behind it
        self.edges: Dict[str, Dict[str, int]] = {n: {} for n in self.nodes}
        for src, dsts in edges.items():
            self.nodes.add(src)
            bucket = self.edges.setdefault(src, {})
            for dst, weight in dsts.items():
                self.nodes.add(dst)
                bucket[dst] = bucket.get(dst, 0) + weight
        for node in list(self.nodes):
            self.edges.setdefault(node, {})

    @classmethod
    def from_import_graph(cls, graph: ImportGraph, project_paths: List[str]) -> "ProjectGraph":
        edges: Dict[str, Dict[str, int]] = {}
        for node in graph.nodes():
            src = enclosing_project(node.source_path, project_paths)
            if src is None:
                continue
            for edge in node.internal_edges:
                dst = enclosing_project(edge.target.path, project_paths)
                if dst is None or dst == src:
                    continue
                bucket = edges.setdefault(src, {})
                bucket[dst] = bucket.get(dst, 0) + 1
        return cls(list(project_paths), edges)

    def fan_in_out(self) -> Dict[str, Tuple[int, int]]:
        fan_out = {node: len(self.edges.get(node, {})) for node in self.nodes}
        fan_in = {node: 0 for node in self.nodes}
        for _src, dsts in self.edges.items():
            for dst in dsts:
                fan_in[dst] = fan_in.get(dst, 0) + 1
        return {node: (fan_in.get(node, 0), fan_out.get(node, 0)) for node in self.nodes}

    def _dfs_cycles(
        self,
        node: str,
        visited: Set[str],
        stack: List[str],
        on_stack: Set[str],
        cycles: List[List[str]],
    ) -> None:
        visited.add(node)
        stack.append(node)
        on_stack.add(node)
        for nxt in sorted(self.edges.get(node, {})):
            if nxt not in visited:
                self._dfs_cycles(nxt, visited, stack, on_stack, cycles)
                continue
            if nxt in on_stack:
                idx = stack.index(nxt)
                cycle = stack[idx:].copy()
                if cycle and cycle not in cycles:
                    cycles.append(cycle)
        stack.pop()
        on_stack.remove(node)

    def find_cycles(self) -> List[List[str]]:
        visited: Set[str] = set()
        on_stack: Set[str] = set()
        stack: List[str] = []
        cycles: List[List[str]] = []
        for node in sorted(self.nodes):
            if node not in visited:
                self._dfs_cycles(node, visited, stack, on_stack, cycles)
        return cycles

    def metrics(self) -> Dict[str, NodeMetrics]:
        fan = self.fan_in_out()
        return {node: NodeMetrics(name=node, fan_in=fan[node][0], fan_out=fan[node][1]) for node in sorted(self.nodes)}

    def edge_list(self) -> List[Tuple[str, str, int]]:
        return [(src, dst, w) for src in sorted(self.edges) for dst, w in sorted(self.edges[src].items())]


__all__ = ["ProjectGraph", "NodeMetrics"]
