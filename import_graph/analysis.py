"""
One-shot analysis pipeline: resolve a root package, then render it
"""

import logging
import os
from dataclasses import dataclass

import networkx as nx

from .context import AnalysisContext
from .graph_builder import ImportResolver, ResolveOutcome
from .loader import PackageLoader
from .models import AnalysisOptions
from .renderer import DotRenderer, build_graph

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Data model for a finished analysis run"""
    context: AnalysisContext
    outcome: ResolveOutcome
    graph: nx.DiGraph
    dot: str


def analyze(import_path: str, options: AnalysisOptions = None,
            search_root: str = None, loader=None) -> AnalysisResult:
    """Resolve import_path from search_root and render its dependency graph.

    Every call works on a fresh context, so nothing leaks between runs.
    Raises ResolutionError when any reachable package cannot be loaded.
    """
    options = options or AnalysisOptions()
    search_root = search_root or os.getcwd()
    if loader is None:
        loader = PackageLoader(tags=options.tags, include_tests=options.include_tests)

    context = AnalysisContext(options=options)
    outcome = ImportResolver(context, loader).resolve(search_root, import_path)
    graph = build_graph(context)
    dot = DotRenderer(horizontal=options.horizontal).render(graph)
    return AnalysisResult(context=context, outcome=outcome, graph=graph, dot=dot)


def get_graph_stats(graph: nx.DiGraph) -> dict:
    """Get statistics about the dependency graph"""
    nodes = graph.number_of_nodes()
    return {
        'total_packages': nodes,
        'total_dependencies': graph.number_of_edges(),
        'is_connected': nx.is_weakly_connected(graph) if nodes else False,
        'density': nx.density(graph) if nodes else 0.0,
        'average_degree': sum(dict(graph.degree()).values()) / nodes if nodes else 0
    }
