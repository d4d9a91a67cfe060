"""
Package filter - decides which packages are kept in the graph
"""

from typing import Iterable

from .models import AnalysisOptions, PackageDescriptor


def has_prefix(import_path: str, prefixes: Iterable[str]) -> bool:
    return any(import_path.startswith(prefix) for prefix in prefixes)


class PackageFilter:
    """Combines the allowlist, denylists and stdlib exclusion of a run"""

    def __init__(self, options: AnalysisOptions):
        self.ignored = frozenset(options.ignored)
        self.ignored_prefixes = tuple(options.ignored_prefixes)
        self.only_prefixes = tuple(options.only_prefixes)
        self.ignore_stdlib = options.ignore_stdlib

    def is_ignored_path(self, import_path: str) -> bool:
        """True if the path is on the exact-match denylist"""
        return import_path in self.ignored

    def is_excluded(self, package: PackageDescriptor) -> bool:
        """True if the package must not be explored or rendered"""
        path = package.import_path
        # The allowlist overrides everything else
        if self.only_prefixes and not has_prefix(path, self.only_prefixes):
            return True
        return (
            path in self.ignored
            or (package.is_stdlib and self.ignore_stdlib)
            or has_prefix(path, self.ignored_prefixes)
        )
