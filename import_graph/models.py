"""
Data models for import-graph
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

# Pseudo-packages that never correspond to importable code
# Compiler directives and the running script, never importable packages
IGNORED_PSEUDO_PACKAGES = frozenset({"__future__", "__main__"})


@dataclass(frozen=True)
class PackageDescriptor:
    """One resolved package and its direct imports"""
    import_path: str
    is_stdlib: bool = False
    native_files: Tuple[str, ...] = ()
    imports: Tuple[str, ...] = ()
    test_imports: Tuple[str, ...] = ()
    xtest_imports: Tuple[str, ...] = ()
    directory: Optional[str] = None

    @property
    def has_native_interop(self) -> bool:
        return bool(self.native_files)


@dataclass
class AnalysisOptions:
    """Configuration for a single analysis run"""
    ignore_stdlib: bool = False
    delve_stdlib: bool = False
    ignored: FrozenSet[str] = IGNORED_PSEUDO_PACKAGES
    ignored_prefixes: Tuple[str, ...] = ()
    only_prefixes: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    horizontal: bool = False
    include_tests: bool = False

    def __post_init__(self):
        # The pseudo-package entries are always part of the exact denylist
        self.ignored = frozenset(self.ignored) | IGNORED_PSEUDO_PACKAGES
        self.ignored_prefixes = tuple(self.ignored_prefixes)
        self.only_prefixes = tuple(self.only_prefixes)
        self.tags = tuple(self.tags)
