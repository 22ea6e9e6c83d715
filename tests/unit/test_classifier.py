"""Tests for source classification."""

from pathlib import Path

from kawabuild.classifier import applies_to, classify, classify_sources, collect
from kawabuild.languages import JAVA, KAWA


class TestClassify:
    """Partitioning entries into per-language source sets."""

    def test_directory_expands_to_matching_files(self, tmp_path, write_source):
        a = write_source("src/a/Foo.scm", "")
        b = write_source("src/b/c/Bar.scm", "")
        j = write_source("src/b/Baz.java", "")
        write_source("src/README.txt", "")

        primary, secondary = classify_sources([tmp_path / "src"])

        assert set(primary.paths) == {a, b}
        assert secondary.paths == (j,)

    def test_non_matching_file_entries_are_dropped(self, write_source):
        txt = write_source("notes.txt", "")
        scm = write_source("Foo.scm", "")

        primary, secondary = classify_sources([txt, scm])

        assert primary.paths == (scm,)
        assert len(secondary) == 0

    def test_extension_must_match_exactly(self, tmp_path, write_source):
        write_source("src/Foo.scmx", "")
        write_source("src/Foo.SCM", "")
        write_source("src/Bar.java.bak", "")

        primary, secondary = classify_sources([tmp_path / "src"])

        assert not primary
        assert not secondary

    def test_deduplicates_preserving_first_seen_order(self, tmp_path, write_source):
        b = write_source("src/B.scm", "")
        a = write_source("src/A.scm", "")

        sources = collect([b, tmp_path / "src", a, b], KAWA)

        assert sources.paths == (b, a)

    def test_paths_are_absolute_and_normalized(self, tmp_path, write_source, monkeypatch):
        write_source("src/Foo.scm", "")
        monkeypatch.chdir(tmp_path)

        sources = collect(["./src/../src/Foo.scm"], KAWA)

        assert sources.paths == (tmp_path / "src" / "Foo.scm",)
        assert sources.paths[0].is_absolute()

    def test_empty_and_missing_entries_are_valid(self, tmp_path):
        (tmp_path / "empty").mkdir()

        result = classify([tmp_path / "empty", tmp_path / "missing"])

        assert len(result[KAWA]) == 0
        assert len(result[JAVA]) == 0

    def test_directory_named_like_source_is_not_a_source(self, tmp_path, write_source):
        (tmp_path / "src" / "weird.scm").mkdir(parents=True)
        real = write_source("src/weird.scm/Real.scm", "")

        sources = collect([tmp_path / "src"], KAWA)

        assert sources.paths == (real,)

    def test_reclassifying_output_is_a_no_op(self, tmp_path, write_source):
        write_source("src/x/One.scm", "")
        write_source("src/y/Two.scm", "")
        write_source("lib/Three.scm", "")

        first = collect([tmp_path / "src", tmp_path / "lib"], KAWA)
        second = collect(first.paths, KAWA)

        assert second == first

    def test_accepts_strings(self, tmp_path, write_source):
        foo = write_source("Foo.java", "")

        sources = collect([str(foo)], JAVA)

        assert sources.paths == (foo,)
        assert sources.as_strings() == [str(foo)]


class TestAppliesTo:
    """Compiler applicability."""

    def test_true_when_tree_contains_scm(self, tmp_path, write_source):
        write_source("src/main/kawa/deep/Foo.scm", "")
        assert applies_to([tmp_path / "src"])

    def test_false_for_java_only_tree(self, tmp_path, write_source):
        write_source("src/main/java/Foo.java", "")
        assert not applies_to([tmp_path / "src"])

    def test_true_for_scm_file_candidate(self, write_source):
        assert applies_to([write_source("Foo.scm", "")])

    def test_false_for_missing_paths(self, tmp_path):
        assert not applies_to([tmp_path / "nope", Path("/definitely/not/here")])

    def test_false_for_missing_scm_file(self, tmp_path):
        assert not applies_to([tmp_path / "gone" / "Foo.scm"])
