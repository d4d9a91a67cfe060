import collections

import pytest

from import_graph import AnalysisContext, AnalysisOptions, PackageDescriptor, ResolutionError


class FakeLoader:
    """Metadata provider serving fabricated descriptors and counting lookups"""

    def __init__(self, packages):
        self.packages = {p.import_path: p for p in packages}
        self.calls = collections.Counter()

    def load(self, import_path, search_root):
        self.calls[import_path] += 1
        if import_path not in self.packages:
            raise ResolutionError(import_path, f"cannot find module {import_path!r}")
        return self.packages[import_path]


def pkg(import_path, *imports, **kwargs):
    return PackageDescriptor(import_path=import_path, imports=tuple(imports), **kwargs)


@pytest.fixture
def app_packages():
    """app imports lib/a and lib/b; lib/a imports lib/b"""
    return [
        pkg("app", "lib.a", "lib.b"),
        pkg("lib.a", "lib.b"),
        pkg("lib.b"),
    ]


@pytest.fixture
def make_context():
    def factory(**options):
        return AnalysisContext(options=AnalysisOptions(**options))
    return factory
