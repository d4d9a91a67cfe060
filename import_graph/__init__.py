"""
import-graph: dependency graphs of Python packages and their transitive imports
"""

from .analysis import AnalysisResult, analyze, get_graph_stats
from .context import AnalysisContext
from .exceptions import ImportGraphError, ResolutionError, UsageError
from .filters import PackageFilter
from .graph_builder import ImportResolver, ResolveOutcome, direct_imports
from .identity import IdentityAllocator
from .loader import PackageLoader
from .models import AnalysisOptions, PackageDescriptor
from .renderer import DotRenderer, build_graph, render
from .store import PackageStore

__all__ = [
    'AnalysisContext', 'AnalysisOptions', 'AnalysisResult', 'DotRenderer',
    'IdentityAllocator', 'ImportGraphError', 'ImportResolver', 'PackageDescriptor',
    'PackageFilter', 'PackageLoader', 'PackageStore', 'ResolutionError',
    'ResolveOutcome', 'UsageError', 'analyze', 'build_graph', 'direct_imports',
    'get_graph_stats', 'render',
]
