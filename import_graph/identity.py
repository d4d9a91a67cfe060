"""
Stable integer identities for graph nodes
"""

from typing import Dict, ItemsView


class IdentityAllocator:
    """Hands out 0, 1, 2, ... to import paths in first-seen order"""

    def __init__(self):
        self._ids: Dict[str, int] = {}
        self._next_id = 0

    def id_for(self, import_path: str) -> int:
        node_id = self._ids.get(import_path)
        if node_id is None:
            node_id = self._next_id
            self._next_id += 1
            self._ids[import_path] = node_id
        return node_id

    def items(self) -> ItemsView[str, int]:
        return self._ids.items()

    def __contains__(self, import_path: str) -> bool:
        return import_path in self._ids

    def __len__(self) -> int:
        return len(self._ids)
