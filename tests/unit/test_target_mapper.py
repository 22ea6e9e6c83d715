"""Tests for source to artifact mapping."""

import os
import time
from unittest.mock import patch

from kawabuild.errors import InspectionError
from kawabuild.inspector import inspect_source as real_inspect
from kawabuild.target_mapper import map_targets

KAWA_TEST = "(module-name com.example.)\n(define-simple-class Test ()\n  (i init: 1))\n"


class TestMapTargets:
    def test_nested_when_single_declaration_and_matching_type(self, tmp_path, write_source):
        source = write_source("src/Test.scm", KAWA_TEST)
        target = tmp_path / "target"

        mapping = map_targets([tmp_path / "src"], target)

        assert mapping[source] == target / "com" / "example" / "Test.class"
        assert mapping.is_nested(source)

    def test_java_nested_target(self, tmp_path, write_source):
        source = write_source("src/Bar.java", "package com.example;\nclass Bar {}\n")
        target = tmp_path / "target"

        mapping = map_targets([source], target)

        assert mapping[source] == target / "com" / "example" / "Bar.class"

    def test_flat_without_declaration(self, tmp_path, write_source):
        source = write_source("src/Test.scm", "(define-simple-class Test ())\n")
        target = tmp_path / "target"

        assert map_targets([source], target)[source] == target

    def test_flat_with_multiple_declarations_even_with_type(self, tmp_path, write_source):
        source = write_source(
            "src/Test.scm",
            "(module-name com.example.)\n(module-name com.example.)\n(define-simple-class Test ())\n",
        )
        target = tmp_path / "target"

        mapping = map_targets([source], target)

        assert mapping[source] == target
        assert not mapping.is_nested(source)

    def test_flat_without_type_evidence(self, tmp_path, write_source):
        source = write_source("src/Test.scm", "(module-name com.example.)\n(define (f) 1)\n")
        target = tmp_path / "target"

        assert map_targets([source], target)[source] == target

    def test_custom_target_extension(self, tmp_path, write_source):
        source = write_source("src/Test.scm", KAWA_TEST)

        mapping = map_targets([source], tmp_path / "out", target_ext="jvm")

        assert mapping[source].name == "Test.jvm"

    def test_relative_target_is_made_absolute(self, tmp_path, write_source, monkeypatch):
        write_source("src/Test.scm", KAWA_TEST)
        monkeypatch.chdir(tmp_path)

        mapping = map_targets(["src"], "target")

        assert mapping.target_root == tmp_path / "target"
        assert mapping.to_dict() == {
            str(tmp_path / "src" / "Test.scm"): str(tmp_path / "target" / "com" / "example" / "Test.class")
        }

    def test_unreadable_file_maps_flat_and_others_continue(self, tmp_path, write_source):
        good = write_source("src/Test.scm", KAWA_TEST)
        bad = write_source("src/Bad.scm", "(module-name x.)\n")
        target = tmp_path / "target"

        def flaky_inspect(path, language):
            if path == bad:
                raise InspectionError(path, "Permission denied")
            return real_inspect(path, language)

        with patch("kawabuild.target_mapper.inspect_source", side_effect=flaky_inspect):
            mapping = map_targets([tmp_path / "src"], target)

        assert mapping[bad] == target
        assert mapping.errors == {bad: "Permission denied"}
        assert mapping[good] == target / "com" / "example" / "Test.class"

    def test_missing_file_entry_is_reported_not_skipped(self, tmp_path):
        missing = tmp_path / "src" / "Gone.scm"
        target = tmp_path / "target"

        mapping = map_targets([missing], target)

        assert mapping[missing] == target
        assert missing in mapping.errors

    def test_nested_and_flat_views(self, tmp_path, write_source):
        nested = write_source("src/Test.scm", KAWA_TEST)
        flat = write_source("src/Loose.scm", "(display 1)\n")

        mapping = map_targets([tmp_path / "src"], tmp_path / "target")

        assert list(mapping.nested()) == [nested]
        assert mapping.flat() == [flat]
        assert len(mapping) == 2


class TestStaleSources:
    def _age(self, path, seconds):
        stamp = time.time() - seconds
        os.utime(path, (stamp, stamp))

    def test_nested_missing_artifact_is_stale(self, tmp_path, write_source):
        source = write_source("src/Test.scm", KAWA_TEST)

        mapping = map_targets([source], tmp_path / "target")

        assert mapping.stale_sources() == [source]

    def test_nested_newer_artifact_is_fresh(self, tmp_path, write_source):
        source = write_source("src/Test.scm", KAWA_TEST)
        artifact = write_source("target/com/example/Test.class", "")
        self._age(source, 100)

        mapping = map_targets([source], tmp_path / "target")

        assert mapping[source] == artifact
        assert mapping.stale_sources() == []

    def test_nested_older_artifact_is_stale(self, tmp_path, write_source):
        source = write_source("src/Test.scm", KAWA_TEST)
        artifact = write_source("target/com/example/Test.class", "")
        self._age(artifact, 100)

        assert map_targets([source], tmp_path / "target").stale_sources() == [source]

    def test_flat_source_with_empty_target_is_stale(self, tmp_path, write_source):
        source = write_source("src/Loose.scm", "(display 1)\n")
        (tmp_path / "target").mkdir()

        assert map_targets([source], tmp_path / "target").stale_sources() == [source]

    def test_flat_source_older_than_newest_output_is_fresh(self, tmp_path, write_source):
        source = write_source("src/Loose.scm", "(display 1)\n")
        write_source("target/Loose.class", "")
        self._age(source, 100)

        assert map_targets([source], tmp_path / "target").stale_sources() == []
