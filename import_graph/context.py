"""
Run-scoped state shared by the resolver and the renderer
"""

from dataclasses import dataclass, field
from typing import Dict, Set

from .filters import PackageFilter
from .identity import IdentityAllocator
from .models import AnalysisOptions
from .store import PackageStore


@dataclass
class AnalysisContext:
    """Everything one invocation owns: options, filter, store and node ids"""
    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    store: PackageStore = field(default_factory=PackageStore)
    allocator: IdentityAllocator = field(default_factory=IdentityAllocator)
    # Canonical paths that were loaded but excluded by the filter
    pruned: Set[str] = field(default_factory=set)
    # Requested path -> canonical path, e.g. a module mapped to its package
    aliases: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.filter = PackageFilter(self.options)

    def canonical(self, import_path: str) -> str:
        return self.aliases.get(import_path, import_path)

    def is_known(self, import_path: str) -> bool:
        """True if the path was already loaded during this run"""
        path = self.canonical(import_path)
        return path in self.store or path in self.pruned
