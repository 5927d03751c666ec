"""Tests for constructor and query-parameter records."""

import tempfile
import unittest
from pathlib import Path

from core.diagnostics import DiagnosticChannel
from declarations.models import (
    Annotation,
    ConstructorDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
    TypeDeclaration,
)
from processors.base import ProcessingEnvironment
from processors.markers import MarkerDetector
from processors.parameters import (
    ConstructorProcessor,
    MarkedConstructor,
    MarkedMethod,
    QueryParameterProcessor,
    join_parameter_names,
    method_resource_path,
    owner_resource_path,
)
from processors.writer import OutputLocation, ResourceWriter

DATA_BOUND = (Annotation("DataBoundConstructor"),)
QUERY = (Annotation("QueryParameter"),)


def _params(*names, annotated=()):
    return tuple(
        ParameterDeclaration(n, annotations=QUERY if n in annotated else ())
        for n in names
    )


def _env(root: str, types=()) -> ProcessingEnvironment:
    diagnostics = DiagnosticChannel()
    return ProcessingEnvironment(
        types=tuple(types),
        writer=ResourceWriter(OutputLocation(root), diagnostics),
        detector=MarkerDetector(),
        diagnostics=diagnostics,
    )


def _read(root: str, relative: str) -> str:
    return Path(root, relative).read_text(encoding="utf-8")


class TestResourcePaths(unittest.TestCase):
    def test_owner_path(self) -> None:
        self.assertEqual(
            owner_resource_path("org.example.Foo", ".stapler"), "org/example/Foo.stapler"
        )

    def test_nested_owner_path(self) -> None:
        self.assertEqual(
            owner_resource_path("org.example.Bar.Inner", ".javadoc"),
            "org/example/Bar/Inner.javadoc",
        )

    def test_method_path(self) -> None:
        self.assertEqual(
            method_resource_path("org.example.web.Search", "doSearch", ".stapler"),
            "org/example/web/Search/doSearch.stapler",
        )

    def test_join(self) -> None:
        self.assertEqual(join_parameter_names(["a", "b"]), "a,b")
        self.assertEqual(join_parameter_names([]), "")


class TestMarkedRecords(unittest.TestCase):
    def test_constructor_record_content(self) -> None:
        ctor = ConstructorDeclaration("org.example.Foo", _params("a", "b"), DATA_BOUND)
        artifact = MarkedConstructor.from_declaration(ctor).to_artifact()
        self.assertEqual(artifact.path, "org/example/Foo.stapler")
        self.assertEqual(artifact.render(), "constructor=a,b\n")

    def test_method_record_has_no_key(self) -> None:
        method = MethodDeclaration("org.example.Search", "doIt", _params("x", "y", annotated=("x",)))
        artifact = MarkedMethod.from_declaration(method).to_artifact()
        self.assertEqual(artifact.path, "org/example/Search/doIt.stapler")
        self.assertEqual(artifact.render(), "x,y")


class TestConstructorProcessor(unittest.TestCase):
    def test_annotated_constructor(self) -> None:
        foo = TypeDeclaration(
            "org.example.Foo",
            constructors=(
                ConstructorDeclaration("org.example.Foo", _params("a", "b"), DATA_BOUND),
                ConstructorDeclaration("org.example.Foo"),
            ),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            env = _env(tmpdir, [foo])
            ConstructorProcessor().process_type(env, foo)

            self.assertEqual(_read(tmpdir, "org/example/Foo.stapler"), "constructor=a,b\n")
            self.assertEqual(env.stats.constructor_records, 1)
            self.assertFalse(env.diagnostics.has_errors)

    def test_zero_parameters(self) -> None:
        empty = TypeDeclaration(
            "org.example.Empty",
            constructors=(ConstructorDeclaration("org.example.Empty", (), DATA_BOUND),),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            ConstructorProcessor().process_type(_env(tmpdir), empty)
            self.assertEqual(_read(tmpdir, "org/example/Empty.stapler"), "constructor=\n")

    def test_doc_tag_matches_annotation_output(self) -> None:
        annotated = TypeDeclaration(
            "p.Same",
            constructors=(ConstructorDeclaration("p.Same", _params("x", "y"), DATA_BOUND),),
        )
        tagged = TypeDeclaration(
            "p.Same",
            constructors=(
                ConstructorDeclaration(
                    "p.Same", _params("x", "y"), doc_comment="Docs.\n@stapler-constructor"
                ),
            ),
        )
        with tempfile.TemporaryDirectory() as first, tempfile.TemporaryDirectory() as second:
            ConstructorProcessor().process_type(_env(first), annotated)
            ConstructorProcessor().process_type(_env(second), tagged)
            self.assertEqual(
                Path(first, "p/Same.stapler").read_bytes(),
                Path(second, "p/Same.stapler").read_bytes(),
            )

    def test_annotation_and_doc_tag_yield_one_record(self) -> None:
        both = TypeDeclaration(
            "p.Both",
            constructors=(
                ConstructorDeclaration(
                    "p.Both", _params("a"), DATA_BOUND, doc_comment="@stapler-constructor"
                ),
            ),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            env = _env(tmpdir)
            ConstructorProcessor().process_type(env, both)
            self.assertEqual(_read(tmpdir, "p/Both.stapler"), "constructor=a\n")
            self.assertEqual(env.stats.constructor_records, 1)
            self.assertFalse(env.diagnostics.has_errors)

    def test_interfaces_are_ignored(self) -> None:
        api = TypeDeclaration(
            "p.Api",
            kind="interface",
            constructors=(ConstructorDeclaration("p.Api", _params("a"), DATA_BOUND),),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            env = _env(tmpdir)
            ConstructorProcessor().process_type(env, api)
            self.assertFalse(Path(tmpdir, "p/Api.stapler").exists())
            self.assertEqual(env.stats.constructor_records, 0)

    def test_doc_tag_on_method_warns(self) -> None:
        legacy = TypeDeclaration(
            "org.example.Legacy",
            methods=(
                MethodDeclaration(
                    "org.example.Legacy", "configure", _params("value"),
                    doc_comment="@stapler-constructor",
                ),
            ),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            env = _env(tmpdir)
            ConstructorProcessor().process_type(env, legacy)

            warnings = [r.message for r in env.diagnostics.records if r.severity == "warning"]
            self.assertEqual(warnings, ["org.example.Legacy#configure is not a constructor"])
            self.assertFalse(Path(tmpdir, "org/example/Legacy.stapler").exists())

    def test_two_marked_constructors_write_once(self) -> None:
        twice = TypeDeclaration(
            "p.Twice",
            constructors=(
                ConstructorDeclaration("p.Twice", _params("a"), DATA_BOUND),
                ConstructorDeclaration("p.Twice", _params("b"), DATA_BOUND),
            ),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            env = _env(tmpdir)
            ConstructorProcessor().process_type(env, twice)

            self.assertEqual(_read(tmpdir, "p/Twice.stapler"), "constructor=a\n")
            self.assertEqual(env.stats.write_failures, 1)
            self.assertTrue(env.diagnostics.has_errors)


class TestQueryParameterProcessor(unittest.TestCase):
    def _search(self, *methods) -> TypeDeclaration:
        return TypeDeclaration("org.example.web.Search", methods=tuple(methods))

    def test_marked_method_lists_all_parameters(self) -> None:
        search = self._search(
            MethodDeclaration(
                "org.example.web.Search", "doSearch",
                _params("q", "page", "limit", annotated=("q", "limit")),
            ),
            MethodDeclaration("org.example.web.Search", "doIndex", _params("a")),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            env = _env(tmpdir)
            QueryParameterProcessor().process_type(env, search)

            self.assertEqual(
                _read(tmpdir, "org/example/web/Search/doSearch.stapler"), "q,page,limit"
            )
            self.assertFalse(Path(tmpdir, "org/example/web/Search/doIndex.stapler").exists())
            self.assertEqual(env.stats.method_records, 1)

    def test_overloads_keep_first(self) -> None:
        search = self._search(
            MethodDeclaration("org.example.web.Search", "doFind", _params("q", annotated=("q",))),
            MethodDeclaration(
                "org.example.web.Search", "doFind", _params("q", "n", annotated=("q",))
            ),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            env = _env(tmpdir)
            QueryParameterProcessor().process_type(env, search)

            self.assertEqual(_read(tmpdir, "org/example/web/Search/doFind.stapler"), "q")
            self.assertEqual(env.stats.method_records, 1)
            self.assertEqual(env.stats.write_failures, 1)


if __name__ == "__main__":
    unittest.main()
