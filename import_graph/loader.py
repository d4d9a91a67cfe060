"""
Package loader - locates Python packages and reads their imports without executing them

A package is the unit of the graph: a package directory together with the
modules directly inside it, or a top-level single-file module. Imports are
collected from the source with ast and mapped onto the package that provides
them, so `from app.lib.a import f` becomes an import of `app.lib`.
"""

import ast
import logging
import operator
import os
import sys
import tokenize
from importlib.machinery import (
    EXTENSION_SUFFIXES,
    BuiltinImporter,
    FrozenImporter,
    PathFinder,
)
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .exceptions import ResolutionError
from .models import PackageDescriptor

logger = logging.getLogger(__name__)

NATIVE_SOURCE_SUFFIXES = (".c", ".cc", ".cpp", ".h", ".pyx", ".pxd", ".so", ".pyd")
TEST_DIRECTORIES = ("tests", "test")
IMPORT_ERRORS = {"ImportError", "ModuleNotFoundError", "Exception", "BaseException"}


def is_test_file(path: Path) -> bool:
    name = path.name
    return name.startswith("test_") or name.endswith("_test.py") or name == "conftest.py"


def is_native_file(path: Path) -> bool:
    name = path.name
    return name.endswith(NATIVE_SOURCE_SUFFIXES) or any(name.endswith(s) for s in EXTENSION_SUFFIXES)


def is_stdlib_name(import_path: str) -> bool:
    return import_path.split(".")[0] in sys.stdlib_module_names


class ImportCollector(ast.NodeVisitor):
    """Collects the import statements of one module.

    Conditional blocks are followed according to the satisfied tags:
    `if TYPE_CHECKING:` needs the TYPE_CHECKING tag, simple tests on
    sys.platform or os.name are evaluated against the tag set, and
    sys.version_info comparisons against the running interpreter. Both
    branches of any other condition are followed, but their imports are
    optional, as are imports inside functions and under
    `try/except ImportError`: they are kept only if they can be found.
    """

    def __init__(self, tags: Iterable[str]):
        self.tags = frozenset(tags)
        # (module, names, level, optional)
        self.imports: List[Tuple[Optional[str], List[str], int, bool]] = []
        self._optional_depth = 0

    @property
    def optional(self) -> bool:
        return self._optional_depth > 0

    def visit_Import(self, node: ast.Import):
        for alias in node.names:
            self.imports.append((alias.name, [], 0, self.optional))

    def visit_ImportFrom(self, node: ast.ImportFrom):
        names = [alias.name for alias in node.names]
        self.imports.append((node.module, names, node.level, self.optional))

    def visit_If(self, node: ast.If):
        verdict = self.evaluate(node.test)
        if verdict is None:
            self._visit_optional(node.body)
            self._visit_optional(node.orelse)
        elif verdict:
            self._visit_all(node.body)
        else:
            self._visit_all(node.orelse)

    def visit_FunctionDef(self, node):
        # Imports deferred to call time
        self._visit_all(node.decorator_list)
        self._visit_optional(node.body)

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_Try(self, node):
        guarded = any(self._catches_import_error(handler) for handler in node.handlers)
        if guarded:
            self._visit_optional(node.body)
        else:
            self._visit_all(node.body)
        for part in (node.handlers, node.orelse, node.finalbody):
            self._visit_all(part)

    visit_TryStar = visit_Try

    def _visit_all(self, nodes):
        for child in nodes:
            self.visit(child)

    def _visit_optional(self, nodes):
        self._optional_depth += 1
        self._visit_all(nodes)
        self._optional_depth -= 1

    def _catches_import_error(self, handler: ast.ExceptHandler) -> bool:
        if handler.type is None:
            return True
        types = handler.type.elts if isinstance(handler.type, ast.Tuple) else [handler.type]
        return any(_dotted_name(t).split(".")[-1] in IMPORT_ERRORS for t in types)

    def evaluate(self, test) -> Optional[bool]:
        """True or False when the condition is decidable, else None"""
        if isinstance(test, ast.UnaryOp) and isinstance(test.op, ast.Not):
            verdict = self.evaluate(test.operand)
            return None if verdict is None else not verdict

        name = _dotted_name(test)
        if name in ("TYPE_CHECKING", "typing.TYPE_CHECKING"):
            return "TYPE_CHECKING" in self.tags

        if isinstance(test, ast.Compare) and len(test.ops) == 1:
            version = _compare_version(test)
            if version is not None:
                return version
            subject = _dotted_name(test.left)
            if subject not in ("sys.platform", "os.name"):
                return None
            values = _string_constants(test.comparators[0])
            if values is None:
                return None
            op = test.ops[0]
            if isinstance(op, (ast.Eq, ast.In)):
                return any(v in self.tags for v in values)
            if isinstance(op, (ast.NotEq, ast.NotIn)):
                return not any(v in self.tags for v in values)
            return None

        if (isinstance(test, ast.Call) and isinstance(test.func, ast.Attribute)
                and test.func.attr == "startswith"
                and _dotted_name(test.func.value) == "sys.platform"
                and len(test.args) == 1):
            prefixes = _string_constants(test.args[0])
            if prefixes is None:
                return None
            return any(tag.startswith(p) for tag in self.tags for p in prefixes)

        return None


VERSION_OPERATORS = {
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
}


def _version_value(node):
    """The running interpreter's value for sys.version_info, [:n] or [n]"""
    if _dotted_name(node) == "sys.version_info":
        return tuple(sys.version_info)
    if not isinstance(node, ast.Subscript) or _dotted_name(node.value) != "sys.version_info":
        return None
    index = node.slice
    if (isinstance(index, ast.Slice) and index.lower is None and index.step is None
            and isinstance(index.upper, ast.Constant) and type(index.upper.value) is int):
        return tuple(sys.version_info[:index.upper.value])
    if isinstance(index, ast.Constant) and type(index.value) is int:
        return sys.version_info[index.value]
    return None


def _literal_version(node):
    if isinstance(node, ast.Constant) and type(node.value) is int:
        return node.value
    if isinstance(node, ast.Tuple) and all(
            isinstance(elt, ast.Constant) and type(elt.value) is int for elt in node.elts):
        return tuple(elt.value for elt in node.elts)
    return None


def _compare_version(test: ast.Compare) -> Optional[bool]:
    compare = VERSION_OPERATORS.get(type(test.ops[0]))
    current = _version_value(test.left)
    literal = _literal_version(test.comparators[0])
    if compare is None or current is None or literal is None:
        return None
    if isinstance(current, tuple) != isinstance(literal, tuple):
        return None
    return compare(current, literal)


def _dotted_name(node) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted_name(node.value)
        return f"{base}.{node.attr}" if base else ""
    return ""


def _string_constants(node) -> Optional[List[str]]:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return [node.value]
    if isinstance(node, (ast.Tuple, ast.List, ast.Set)):
        values = [_string_constants(elt) for elt in node.elts]
        if any(v is None for v in values):
            return None
        return [v[0] for v in values]
    return None


class PackageLoader:
    """Metadata provider backed by importlib's path finders"""

    def __init__(self, tags: Iterable[str] = (), include_tests: bool = False):
        self.tags = frozenset(tags) | {sys.platform, os.name}
        self.include_tests = include_tests
        self._specs: Dict[Tuple[str, str], object] = {}

    def load(self, import_path: str, search_root: str) -> PackageDescriptor:
        """Build the descriptor of the package providing import_path"""
        search_root = str(search_root)
        located = self.locate(import_path, search_root, exact=True)
        if located is None:
            raise ResolutionError(import_path, f"cannot find module {import_path!r} from {search_root}")
        unit, spec = located

        is_stdlib = is_stdlib_name(unit) and not (spec.has_location and _is_within(spec.origin, search_root))
        directory = None
        sources: List[Tuple[Path, str]] = []
        test_sources: List[Tuple[Path, str]] = []
        xtest_sources: List[Tuple[Path, str]] = []
        native_files: List[str] = []

        if spec.submodule_search_locations is not None:
            for location in spec.submodule_search_locations:
                location = Path(location)
                directory = directory or str(location)
                self._scan_directory(location, unit, sources, test_sources, xtest_sources, native_files)
        elif spec.origin and spec.has_location:
            origin = Path(spec.origin)
            if is_native_file(origin):
                native_files.append(str(origin))
            elif origin.suffix == ".py":
                sources.append((origin, unit.rpartition(".")[0]))

        imports = self._collect(import_path, sources, search_root)
        test_imports = self._collect(import_path, test_sources, search_root)
        xtest_imports = self._collect(import_path, xtest_sources, search_root)

        logger.debug(f"Loaded {unit}: {len(imports)} imports, {len(native_files)} native files")
        return PackageDescriptor(
            import_path=unit,
            is_stdlib=is_stdlib,
            native_files=tuple(native_files),
            imports=tuple(imports),
            test_imports=tuple(test_imports),
            xtest_imports=tuple(xtest_imports),
            directory=directory,
        )

    def _scan_directory(self, location: Path, unit: str, sources, test_sources, xtest_sources, native_files):
        try:
            entries = sorted(location.iterdir())
        except OSError as e:
            raise ResolutionError(unit, e) from e

        for entry in entries:
            if entry.is_file() and is_native_file(entry):
                native_files.append(str(entry))
            elif entry.is_file() and entry.suffix == ".py":
                if not is_test_file(entry):
                    sources.append((entry, unit))
                elif self.include_tests:
                    test_sources.append((entry, unit))

        if not self.include_tests:
            return
        for name in TEST_DIRECTORIES:
            test_dir = location / name
            if not test_dir.is_dir():
                continue
            for path in sorted(test_dir.rglob("*.py")):
                parts = path.relative_to(location).parent.parts
                xtest_sources.append((path, ".".join((unit,) + parts)))

    def _collect(self, import_path: str, sources, search_root: str) -> List[str]:
        """Canonical import paths of every import in the given files"""
        imports = []
        seen = set()
        for path, package in sources:
            for name in self._file_imports(import_path, path, package, search_root):
                if name not in seen:
                    seen.add(name)
                    imports.append(name)
        return imports

    def _file_imports(self, import_path: str, path: Path, package: str, search_root: str) -> List[str]:
        try:
            with tokenize.open(path) as f:
                tree = ast.parse(f.read(), filename=str(path))
        except (OSError, SyntaxError, UnicodeDecodeError, ValueError) as e:
            raise ResolutionError(import_path, f"{path}: {e}") from e

        collector = ImportCollector(self.tags)
        collector.visit(tree)

        names = []
        for module, aliases, level, optional in collector.imports:
            module = self._absolute(module, level, package, path)
            if module is None:
                continue
            for candidate in self._candidates(module, aliases):
                located = self.locate(candidate, search_root)
                if located is not None:
                    names.append(located[0])
                elif optional:
                    logger.debug(f"Dropping optional import {candidate} in {path}")
                elif is_stdlib_name(candidate):
                    # e.g. nt, winreg or _winapi outside Windows
                    logger.debug(f"Dropping {candidate} in {path}, not available on this platform")
                else:
                    # Left for the resolver to fail on
                    names.append(module)
        return names

    def _absolute(self, module: Optional[str], level: int, package: str, path: Path) -> Optional[str]:
        if not level:
            return module
        parts = package.split(".") if package else []
        if level - 1 >= len(parts):
            logger.warning(f"Relative import beyond top-level package in {path}")
            return None
        base = ".".join(parts[:len(parts) - (level - 1)])
        return f"{base}.{module}" if module else base

    def _candidates(self, module: str, aliases: List[str]) -> List[str]:
        names = [alias for alias in aliases if alias != "*"]
        if not names:
            return [module]
        return [f"{module}.{alias}" for alias in names]

    def locate(self, name: str, search_root: str, exact: bool = False):
        """Return (package unit, spec) for name or its longest importable prefix"""
        parts = name.split(".")
        stop = len(parts) - 1 if exact else 0
        for end in range(len(parts), stop, -1):
            spec = self.find_spec(".".join(parts[:end]), search_root)
            if spec is not None:
                return self._unit(spec, search_root)
        return None

    def _unit(self, spec, search_root: str):
        # Modules inside a package belong to that package
        if spec.submodule_search_locations is None and "." in spec.name:
            parent = self.find_spec(spec.name.rpartition(".")[0], search_root)
            if parent is not None:
                return parent.name, parent
        return spec.name, spec

    def find_spec(self, name: str, search_root: str):
        key = (name, search_root)
        if key not in self._specs:
            self._specs[key] = self._find_spec(name, search_root)
        return self._specs[key]

    def _find_spec(self, name: str, search_root: str):
        if not name or any(not part.isidentifier() for part in name.split(".")):
            return None
        if name in sys.builtin_module_names:
            return BuiltinImporter.find_spec(name)

        path = [search_root] + [p for p in sys.path if p]
        spec = None
        parts = name.split(".")
        for i in range(len(parts)):
            if spec is not None:
                if spec.submodule_search_locations is None:
                    return None
                path = list(spec.submodule_search_locations)
            spec = PathFinder.find_spec(".".join(parts[:i + 1]), path)
            if spec is None:
                # Source is preferred, frozen modules only when nothing is on disk
                return FrozenImporter.find_spec(name) if i == 0 else None
        return spec


def _is_within(origin: Optional[str], root: str) -> bool:
    if not origin or not root:
        return False
    try:
        Path(origin).resolve().relative_to(Path(root).resolve())
    except (OSError, ValueError):
        return False
    return True
