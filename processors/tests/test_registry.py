"""Tests for the exposed-bean registry merge."""

import os
import tempfile
import unittest
from pathlib import Path

from core.errors import RegistryCorruption
from processors.config import REGISTRY_PATH
from processors.registry import BeanRegistry, RegistryMerger, parse_registry, render_registry
from processors.writer import OutputLocation, ResourceWriter


def _merge_pass(root: str, discovered) -> BeanRegistry:
    """Run the registry step of one pass with a fresh writer."""
    return RegistryMerger(ResourceWriter(OutputLocation(root))).merge(discovered)


def _registry_bytes(root: str) -> bytes:
    return Path(root, REGISTRY_PATH).read_bytes()


class TestRegistryText(unittest.TestCase):
    def test_parse_trims_and_drops_blank_lines(self) -> None:
        self.assertEqual(
            parse_registry("  org.A \r\n\norg.B\n org.A\n"),
            frozenset({"org.A", "org.B"}),
        )

    def test_render_sorted_deduplicated(self) -> None:
        self.assertEqual(render_registry(["org.B", "org.A", "org.B"]), "org.A\norg.B\n")

    def test_render_empty(self) -> None:
        self.assertEqual(render_registry([]), "")

    def test_merge_is_union(self) -> None:
        registry = BeanRegistry(frozenset({"org.A"})).merge({"org.B"})
        self.assertIn("org.A", registry)
        self.assertIn("org.B", registry)
        self.assertEqual(len(registry), 2)


class TestRegistryMerger(unittest.TestCase):
    def test_merge_into_existing(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            os.makedirs(os.path.join(tmpdir, "META-INF"))
            Path(tmpdir, REGISTRY_PATH).write_text("org.A\n", encoding="utf-8")

            _merge_pass(tmpdir, {"org.B"})

            self.assertEqual(_registry_bytes(tmpdir), b"org.A\norg.B\n")

    def test_created_when_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            _merge_pass(tmpdir, {"org.Z", "org.Y"})
            self.assertEqual(_registry_bytes(tmpdir), b"org.Y\norg.Z\n")

    def test_written_even_without_new_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            os.makedirs(os.path.join(tmpdir, "META-INF"))
            Path(tmpdir, REGISTRY_PATH).write_text("org.B\norg.A\norg.A\n", encoding="utf-8")

            _merge_pass(tmpdir, set())

            self.assertEqual(_registry_bytes(tmpdir), b"org.A\norg.B\n")

    def test_idempotent(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            _merge_pass(tmpdir, {"org.B", "org.A"})
            first = _registry_bytes(tmpdir)
            _merge_pass(tmpdir, {"org.B", "org.A"})
            self.assertEqual(_registry_bytes(tmpdir), first)

    def test_monotonic_in_either_order(self) -> None:
        initial = {"org.R"}
        a = {"org.A1", "org.Shared"}
        b = {"org.B1", "org.Shared"}
        for first, second in ((a, b), (b, a)):
            with self.subTest(first=sorted(first)):
                with tempfile.TemporaryDirectory() as tmpdir:
                    _merge_pass(tmpdir, initial)
                    _merge_pass(tmpdir, first)
                    result = _merge_pass(tmpdir, second)
                    self.assertTrue(result.names >= initial | a | b)
                    on_disk = parse_registry(_registry_bytes(tmpdir).decode("utf-8"))
                    self.assertEqual(on_disk, initial | a | b)

    def test_partial_pass_keeps_earlier_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            _merge_pass(tmpdir, {"org.A", "org.B", "org.C"})
            _merge_pass(tmpdir, {"org.B"})
            self.assertEqual(_registry_bytes(tmpdir), b"org.A\norg.B\norg.C\n")

    def test_undecodable_registry_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            os.makedirs(os.path.join(tmpdir, "META-INF"))
            Path(tmpdir, REGISTRY_PATH).write_bytes(b"org.A\n\xff\xfe\n")
            with self.assertRaises(RegistryCorruption) as ctx:
                _merge_pass(tmpdir, {"org.B"})
            self.assertEqual(ctx.exception.path, REGISTRY_PATH)
            self.assertTrue(ctx.exception.fatal)
            # Left untouched
            self.assertEqual(_registry_bytes(tmpdir), b"org.A\n\xff\xfe\n")

    def test_unreadable_registry_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            # A directory in place of the registry file
            os.makedirs(os.path.join(tmpdir, REGISTRY_PATH))
            merger = RegistryMerger(ResourceWriter(OutputLocation(tmpdir)))
            with self.assertRaises(RegistryCorruption):
                merger.load()

    def test_write_failure_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            Path(tmpdir, "META-INF").write_text("not a directory")
            merger = RegistryMerger(ResourceWriter(OutputLocation(tmpdir)))
            registry = BeanRegistry()
            with self.assertRaises(RegistryCorruption):
                merger.merge_and_write(registry, {"org.A"})


if __name__ == "__main__":
    unittest.main()
