"""
Tests for the import resolver and the package store.
"""

import pytest

from import_graph import (
    ImportResolver,
    PackageStore,
    ResolutionError,
    ResolveOutcome,
    direct_imports,
)

from conftest import FakeLoader, pkg


class TestDirectImports:

    def test_removes_duplicates_keeping_order(self):
        package = pkg("app", "lib.b", "lib.a", "lib.b")
        assert direct_imports(package) == ["lib.b", "lib.a"]

    def test_removes_self_reference(self):
        package = pkg("app", "app", "lib.a")
        assert direct_imports(package) == ["lib.a"]

    def test_test_imports_only_when_requested(self):
        package = pkg("app", "lib.a", test_imports=("pytest", "app"), xtest_imports=("app", "lib.a", "mock"))
        assert direct_imports(package) == ["lib.a"]
        assert direct_imports(package, include_tests=True) == ["lib.a", "pytest", "mock"]


class TestPackageStore:

    def test_first_descriptor_wins(self):
        store = PackageStore()
        first = pkg("app", "lib.a")
        assert store.add(first)
        assert not store.add(pkg("app", "lib.b"))
        assert store.get("app") is first
        assert len(store) == 1

    def test_iterates_in_insertion_order(self):
        store = PackageStore()
        for name in ("c", "a", "b"):
            store.add(pkg(name))
        assert [p.import_path for p in store] == ["c", "a", "b"]
        assert store.import_paths() == ["c", "a", "b"]
        assert "a" in store and "z" not in store


class TestImportResolver:

    def test_resolves_transitive_imports_depth_first(self, app_packages, make_context):
        context = make_context()
        loader = FakeLoader(app_packages)
        outcome = ImportResolver(context, loader).resolve("/src", "app")

        assert outcome is ResolveOutcome.RESOLVED
        assert context.store.import_paths() == ["app", "lib.a", "lib.b"]
        assert all(count == 1 for count in loader.calls.values())

    def test_diamond_resolves_shared_package_once(self, make_context):
        loader = FakeLoader([
            pkg("app", "left", "right"),
            pkg("left", "shared"),
            pkg("right", "shared"),
            pkg("shared"),
        ])
        context = make_context()
        ImportResolver(context, loader).resolve("/src", "app")
        assert loader.calls["shared"] == 1
        assert len(context.store) == 4

    def test_resolving_twice_is_idempotent(self, app_packages, make_context):
        context = make_context()
        loader = FakeLoader(app_packages)
        resolver = ImportResolver(context, loader)
        resolver.resolve("/src", "app")
        before = context.store.import_paths()
        calls = dict(loader.calls)

        assert resolver.resolve("/src", "app") is ResolveOutcome.ALREADY_RESOLVED
        assert resolver.resolve("/src", "lib.b") is ResolveOutcome.ALREADY_RESOLVED
        assert context.store.import_paths() == before
        assert dict(loader.calls) == calls

    def test_ignored_pseudo_package_is_never_loaded(self, make_context):
        loader = FakeLoader([pkg("app", "__future__", "lib")])
        loader.packages["lib"] = pkg("lib")
        context = make_context()
        resolver = ImportResolver(context, loader)
        resolver.resolve("/src", "app")
        assert loader.calls["__future__"] == 0
        assert resolver.resolve("/src", "__future__") is ResolveOutcome.IGNORED

    def test_filtered_package_prunes_its_subtree(self, make_context):
        loader = FakeLoader([
            pkg("app", "vendor.six", "lib"),
            pkg("vendor.six", "vendor.deep"),
            pkg("vendor.deep"),
            pkg("lib", "vendor.six"),
        ])
        context = make_context(ignored_prefixes=["vendor"])
        ImportResolver(context, loader).resolve("/src", "app")

        assert context.store.import_paths() == ["app", "lib"]
        assert loader.calls["vendor.deep"] == 0
        # Filtered packages are not looked up again
        assert loader.calls["vendor.six"] == 1
        assert "vendor.six" in context.pruned

    def test_filtered_root(self, make_context):
        loader = FakeLoader([pkg("bar.baz", "foo.x"), pkg("foo.x")])
        context = make_context(only_prefixes=["foo."])
        outcome = ImportResolver(context, loader).resolve("/src", "bar.baz")
        assert outcome is ResolveOutcome.FILTERED
        assert len(context.store) == 0
        assert loader.calls["foo.x"] == 0

    def test_stdlib_is_a_leaf_by_default(self, make_context):
        loader = FakeLoader([
            pkg("app", "json"),
            pkg("json", "re", is_stdlib=True),
            pkg("re", is_stdlib=True),
        ])
        context = make_context()
        ImportResolver(context, loader).resolve("/src", "app")
        assert context.store.import_paths() == ["app", "json"]
        assert loader.calls["re"] == 0
        assert context.store.get("json").imports == ("re",)

    def test_delve_stdlib_explores_stdlib_imports(self, make_context):
        loader = FakeLoader([
            pkg("app", "json"),
            pkg("json", "re", is_stdlib=True),
            pkg("re", is_stdlib=True),
        ])
        context = make_context(delve_stdlib=True)
        ImportResolver(context, loader).resolve("/src", "app")
        assert context.store.import_paths() == ["app", "json", "re"]

    def test_test_imports_followed_only_when_included(self, make_context):
        packages = [pkg("app", "lib", test_imports=("pytest",)), pkg("lib"), pkg("pytest")]

        context = make_context()
        ImportResolver(context, FakeLoader(packages)).resolve("/src", "app")
        assert "pytest" not in context.store

        context = make_context(include_tests=True)
        ImportResolver(context, FakeLoader(packages)).resolve("/src", "app")
        assert "pytest" in context.store

    def test_missing_package_aborts_the_run(self, make_context):
        loader = FakeLoader([pkg("app", "lib.a"), pkg("lib.a", "missing")])
        context = make_context()
        with pytest.raises(ResolutionError) as excinfo:
            ImportResolver(context, loader).resolve("/src", "app")
        assert excinfo.value.import_path == "missing"
        assert "failed to import missing" in str(excinfo.value)

    def test_alias_maps_onto_canonical_package(self, make_context):
        loader = FakeLoader([pkg("app", "lib")])
        loader.packages["lib"] = pkg("lib")
        loader.packages["app.main"] = loader.packages["app"]
        context = make_context()
        resolver = ImportResolver(context, loader)

        assert resolver.resolve("/src", "app.main") is ResolveOutcome.RESOLVED
        assert context.canonical("app.main") == "app"
        assert resolver.resolve("/src", "app.main") is ResolveOutcome.ALREADY_RESOLVED
        assert loader.calls["app.main"] == 1

    def test_deep_chain_does_not_recurse(self, make_context):
        depth = 5000
        packages = [pkg(f"m{i}", f"m{i + 1}") for i in range(depth)] + [pkg(f"m{depth}")]
        context = make_context()
        ImportResolver(context, FakeLoader(packages)).resolve("/src", "m0")
        assert len(context.store) == depth + 1
