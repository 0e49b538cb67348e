"""Tests for semantic versioning: grammar, precedence, bumping."""

import itertools

import pytest

from verdiff.errors import (
    InvalidBumpTypeError,
    InvalidComponentsError,
    InvalidMetadataError,
    InvalidVersionFormatError,
    MissingStrategyInfoError,
)
from verdiff.versioning import (
    ComparisonOutcome,
    SemanticInfo,
    SemanticVersioning,
    VersionMetadata,
)
from verdiff.versioning.semantic import compare_prerelease, increment_prerelease

sv = SemanticVersioning()


def _meta(major, minor, patch, prerelease=None, build=None) -> VersionMetadata:
    return VersionMetadata(
        version_string="",
        created_at="2024-01-01T00:00:00+00:00",
        strategy_specific=SemanticInfo(major, minor, patch, prerelease, build),
    )


class TestGrammar:
    @pytest.mark.parametrize("version", [
        "0.0.0",
        "1.2.3",
        "10.20.30",
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-0.3.7",
        "1.0.0-x.7.z.92",
        "1.0.0-alpha+001",
        "1.0.0+20130313144700",
        "1.0.0-beta+exp.sha.5114f85",
        "1.0.0-x-y-z.--",
    ])
    def test_valid(self, version):
        assert sv.is_valid_version(version) is True

    @pytest.mark.parametrize("version", [
        "",
        "1",
        "1.2",
        "01.2.3",
        "1.02.3",
        "1.2.03",
        "1.2.3-",
        "1.2.3-01",
        "1.2.3-alpha..1",
        "1.2.3+",
        "v1.2.3",
        "1.2.3.4",
        "-1.2.3",
        "1.2.٣",
    ])
    def test_invalid(self, version):
        assert sv.is_valid_version(version) is False

    def test_non_string_is_invalid(self):
        assert sv.is_valid_version(None) is False  # type: ignore[arg-type]

    def test_parse_components(self):
        meta = sv.parse_version("1.2.3-rc.1+build.5")
        assert meta.version_string == "1.2.3-rc.1+build.5"
        assert meta.strategy_specific == SemanticInfo(1, 2, 3, "rc.1", "build.5")

    def test_parse_invalid_raises(self):
        with pytest.raises(InvalidVersionFormatError):
            sv.parse_version("not-a-version")

    def test_strategy_name(self):
        assert sv.get_strategy_name() == "semantic"


class TestGenerate:
    def test_round_trip(self):
        for version in ("1.2.3", "0.1.0-alpha.2", "4.5.6+sha.1", "7.0.0-rc.1+b.2"):
            assert sv.generate_version(sv.parse_version(version)) == version

    def test_negative_component(self):
        with pytest.raises(InvalidComponentsError):
            sv.generate_version(_meta(-1, 0, 0))

    def test_non_integer_component(self):
        with pytest.raises(InvalidComponentsError):
            sv.generate_version(_meta("1", 0, 0))

    def test_missing_strategy_info(self):
        meta = VersionMetadata(version_string="1.0.0", created_at="")
        with pytest.raises(MissingStrategyInfoError):
            sv.generate_version(meta)

    def test_not_metadata(self):
        with pytest.raises(InvalidMetadataError):
            sv.generate_version({"major": 1})  # type: ignore[arg-type]


class TestPrecedence:
    def test_prerelease_chain(self):
        chain = ["1.0.0", "1.0.0-rc.1", "1.0.0-alpha.2", "1.0.0-alpha.1", "1.0.0-alpha"]
        for higher, lower in zip(chain, chain[1:]):
            assert sv.compare_versions(higher, lower).result is ComparisonOutcome.GREATER
            assert sv.compare_versions(lower, higher).result is ComparisonOutcome.LESS

    def test_semver_spec_order(self):
        ordered = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]
        for lower, higher in zip(ordered, ordered[1:]):
            assert sv.compare_versions(lower, higher).result is ComparisonOutcome.LESS

    def test_total_order_and_transitivity(self):
        versions = ["0.9.9", "1.0.0-alpha", "1.0.0-alpha.1", "1.0.0", "1.0.1", "1.1.0", "2.0.0"]
        for x, y in itertools.product(versions, repeat=2):
            forward = sv.compare_versions(x, y).result
            backward = sv.compare_versions(y, x).result
            if x == y:
                assert forward is ComparisonOutcome.EQUAL
            else:
                assert {forward, backward} == {ComparisonOutcome.GREATER, ComparisonOutcome.LESS}
        for x, y, z in itertools.combinations(versions, 3):
            assert sv.compare_versions(x, y).result is ComparisonOutcome.LESS
            assert sv.compare_versions(y, z).result is ComparisonOutcome.LESS
            assert sv.compare_versions(x, z).result is ComparisonOutcome.LESS

    def test_build_metadata_ignored(self):
        assert sv.compare_versions("1.0.0+a", "1.0.0+b").result is ComparisonOutcome.EQUAL

    def test_numeric_prerelease_compared_numerically(self):
        assert compare_prerelease("beta.11", "beta.2") == 1

    def test_numeric_below_alphanumeric(self):
        assert compare_prerelease("1", "alpha") == -1
        assert compare_prerelease("alpha", "1") == 1

    def test_release_outranks_prerelease(self):
        assert compare_prerelease(None, "rc.1") == 1
        assert compare_prerelease(None, None) == 0

    def test_flags_for_major_bump(self):
        result = sv.compare_versions("2.0.0", "1.9.9")
        assert result.result is ComparisonOutcome.GREATER
        assert result.breaking_changes is True
        assert result.compatible is False
        assert result.new_features is True
        assert result.difference == 1

    def test_flags_for_patch(self):
        result = sv.compare_versions("1.2.4", "1.2.3")
        assert result.compatible is True
        assert result.breaking_changes is False
        assert result.new_features is False
        assert result.bug_fixes is True

    def test_compare_invalid_raises(self):
        with pytest.raises(InvalidVersionFormatError):
            sv.compare_versions("1.0", "1.0.0")


class TestBump:
    def test_minor(self):
        bumped = sv.bump_version(sv.parse_version("2.3.1"), "minor")
        assert bumped.version_string == "2.4.0"

    def test_major_resets(self):
        bumped = sv.bump_version(sv.parse_version("2.3.1-rc.1"), "major")
        assert bumped.version_string == "3.0.0"

    def test_patch_clears_prerelease(self):
        bumped = sv.bump_version(sv.parse_version("2.3.1-rc.1"), "patch")
        assert bumped.version_string == "2.3.2"

    def test_prerelease_increments_numeric_tail(self):
        bumped = sv.bump_version(sv.parse_version("2.4.0-alpha.1"), "prerelease")
        assert bumped.version_string == "2.4.1-alpha.2"

    def test_prerelease_appends_counter(self):
        bumped = sv.bump_version(sv.parse_version("1.0.0-beta"), "prerelease")
        assert bumped.version_string == "1.0.1-beta.1"

    def test_prerelease_starts_at_alpha(self):
        bumped = sv.bump_version(sv.parse_version("1.0.0"), "prerelease")
        assert bumped.version_string == "1.0.1-alpha"

    def test_prerelease_explicit_identifier(self):
        bumped = sv.bump_version(sv.parse_version("1.0.0"), "prerelease", "rc.1")
        assert bumped.version_string == "1.0.1-rc.1"

    def test_build_preserved(self):
        bumped = sv.bump_version(sv.parse_version("1.0.0+sha.abc"), "minor")
        assert bumped.version_string == "1.1.0+sha.abc"

    def test_original_unchanged(self):
        original = sv.parse_version("1.0.0")
        sv.bump_version(original, "major")
        assert original.version_string == "1.0.0"

    def test_invalid_kind(self):
        with pytest.raises(InvalidBumpTypeError):
            sv.bump_version(sv.parse_version("1.0.0"), "huge")

    def test_invalid_prerelease_id_rejected(self):
        from verdiff.errors import InvalidGeneratedVersionError

        with pytest.raises(InvalidGeneratedVersionError):
            sv.bump_version(sv.parse_version("1.0.0"), "prerelease", "bad..id")

    def test_increment_helper(self):
        assert increment_prerelease("rc.9") == "rc.10"
        assert increment_prerelease("beta") == "beta.1"
