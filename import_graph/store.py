"""
Package store - memoization table of resolved packages
"""

import logging
from typing import Dict, Iterator, Optional

from .models import PackageDescriptor

logger = logging.getLogger(__name__)


class PackageStore:
    """Maps import path to descriptor; the first resolution of a path wins"""

    def __init__(self):
        self._packages: Dict[str, PackageDescriptor] = {}

    def add(self, package: PackageDescriptor) -> bool:
        """Store a descriptor, returning False if the path was already known"""
        if package.import_path in self._packages:
            logger.debug(f"Ignoring duplicate descriptor for {package.import_path}")
            return False
        self._packages[package.import_path] = package
        return True

    def get(self, import_path: str) -> Optional[PackageDescriptor]:
        return self._packages.get(import_path)

    def __contains__(self, import_path: str) -> bool:
        return import_path in self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[PackageDescriptor]:
        # Insertion order is resolution order
        return iter(list(self._packages.values()))

    def import_paths(self):
        return list(self._packages)
