"""
Import resolver - walks a root package and every package it transitively imports
"""

import enum
import logging
from typing import List, Optional, Tuple

from .context import AnalysisContext
from .models import PackageDescriptor

logger = logging.getLogger(__name__)


class ResolveOutcome(enum.Enum):
    """Result of a single resolution step"""
    RESOLVED = "resolved"
    IGNORED = "ignored"
    ALREADY_RESOLVED = "already_resolved"
    FILTERED = "filtered"


def direct_imports(package: PackageDescriptor, include_tests: bool = False) -> List[str]:
    """Direct imports of a package without self-references and duplicates"""
    all_imports = list(package.imports)
    if include_tests:
        all_imports.extend(package.test_imports)
        all_imports.extend(package.xtest_imports)

    imports = []
    found = set()
    for imp in all_imports:
        # A test module importing its own package is not an edge
        if imp == package.import_path:
            continue
        if imp in found:
            continue
        found.add(imp)
        imports.append(imp)
    return imports


class ImportResolver:
    """Loads every package reachable from a root into the context's store"""

    def __init__(self, context: AnalysisContext, loader):
        self.context = context
        self.loader = loader

    def resolve(self, root: str, import_path: str) -> ResolveOutcome:
        """Resolve import_path and its transitive imports relative to root.

        Traversal is depth-first in import order and uses an explicit stack of
        iterators, so arbitrarily long import chains do not hit the recursion
        limit. Raises ResolutionError if any reachable package cannot be loaded.
        """
        outcome, package = self.resolve_one(root, import_path)
        if package is None:
            return outcome

        stack = [iter(self.children(package))]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                continue
            if self.context.is_known(child):
                continue
            _, child_package = self.resolve_one(root, child)
            if child_package is not None:
                stack.append(iter(self.children(child_package)))

        logger.info(f"Resolved {len(self.context.store)} packages from {import_path}")
        return outcome

    def children(self, package: PackageDescriptor) -> List[str]:
        """Imports to explore below a freshly stored package"""
        # Standard library packages are leaves unless asked to delve into them
        if package.is_stdlib and not self.context.options.delve_stdlib:
            return []
        return direct_imports(package, self.context.options.include_tests)

    def resolve_one(self, root: str, import_path: str) -> Tuple[ResolveOutcome, Optional[PackageDescriptor]]:
        """Load and store a single package.

        Returns the outcome and, only when the package was newly stored, its
        descriptor so the caller can continue into its imports.
        """
        context = self.context
        if context.filter.is_ignored_path(import_path):
            logger.debug(f"Skipping ignored package {import_path}")
            return ResolveOutcome.IGNORED, None
        if context.is_known(import_path):
            return ResolveOutcome.ALREADY_RESOLVED, None

        package = self.loader.load(import_path, root)
        if package.import_path != import_path:
            context.aliases[import_path] = package.import_path

        if context.filter.is_excluded(package):
            logger.debug(f"Pruning filtered package {package.import_path}")
            context.pruned.add(package.import_path)
            return ResolveOutcome.FILTERED, None

        if not context.store.add(package):
            # Another request path already mapped onto this package
            return ResolveOutcome.ALREADY_RESOLVED, None

        logger.debug(f"Resolved {package.import_path}")
        return ResolveOutcome.RESOLVED, package
