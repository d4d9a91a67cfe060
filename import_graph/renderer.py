"""
Graph renderer - turns the resolved packages into a DOT digraph
"""

import logging
from typing import List

import networkx as nx

from .config import Config
from .context import AnalysisContext
from .graph_builder import direct_imports
from .models import PackageDescriptor

logger = logging.getLogger(__name__)


def node_color(package: PackageDescriptor) -> str:
    """Fill color by package kind, standard library first"""
    if package.is_stdlib:
        return Config.STDLIB_COLOR
    elif package.has_native_interop:
        return Config.NATIVE_COLOR
    return Config.DEFAULT_COLOR


def build_graph(context: AnalysisContext) -> nx.DiGraph:
    """Build the graph of every stored package that passes the filter.

    The filter is applied again here even though the resolver already
    pruned excluded subtrees: it is the gate over what appears in output.
    """
    store = context.store
    package_filter = context.filter
    allocator = context.allocator
    graph = nx.DiGraph()
    edges = []

    for package in store:
        node_id = allocator.id_for(package.import_path)
        if package_filter.is_excluded(package):
            continue

        graph.add_node(package.import_path,
                       id=node_id,
                       label=package.import_path,
                       color=node_color(package),
                       is_stdlib=package.is_stdlib,
                       has_native_interop=package.has_native_interop)

        # Don't render imports of standard library packages
        if package.is_stdlib and not context.options.delve_stdlib:
            continue

        for imp in direct_imports(package, context.options.include_tests):
            target = store.get(context.canonical(imp))
            if target is None or package_filter.is_excluded(target):
                continue
            if target.import_path == package.import_path:
                continue
            allocator.id_for(target.import_path)
            edges.append((package.import_path, target.import_path))

    # Nodes first so edge targets keep their attributes
    graph.add_edges_from(edges)
    logger.info(f"Graph has {graph.number_of_nodes()} nodes and {graph.number_of_edges()} edges")
    return graph


def escape_label(label: str) -> str:
    return label.replace("\\", "\\\\").replace('"', '\\"')


class DotRenderer:
    """Serializes a package graph in Graphviz DOT notation"""

    def __init__(self, horizontal: bool = False, graph_name: str = None):
        self.horizontal = horizontal
        self.graph_name = graph_name or Config.graph_name()

    def render(self, graph: nx.DiGraph) -> str:
        return "\n".join(self.render_lines(graph)) + "\n"

    def render_lines(self, graph: nx.DiGraph) -> List[str]:
        lines = [f"digraph {self.graph_name} {{"]
        if self.horizontal:
            lines.append('rankdir="LR"')

        for node, data in graph.nodes(data=True):
            lines.append(
                f'{data["id"]} [label="{escape_label(data["label"])}" '
                f'style="filled" color="{data["color"]}"];'
            )
            for _, target in graph.out_edges(node):
                lines.append(f'{data["id"]} -> {graph.nodes[target]["id"]};')

        lines.append("}")
        return lines


def render(context: AnalysisContext) -> str:
    """Render the context's store as DOT text"""
    graph = build_graph(context)
    return DotRenderer(horizontal=context.options.horizontal).render(graph)
