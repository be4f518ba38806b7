"""Tests for the version value objects and plan models."""

from versioning.models import (
    InstalledVersion,
    ReconciliationPlan,
    ResolvedVersions,
    SupportTier,
    Version,
)


def v(text):
    return Version.parse(text)


class TestVersionParse:
    """Parsing and rendering of version strings."""

    def test_parse_with_prefix(self):
        version = v("v20.17.1")
        assert (version.major, version.minor, version.patch) == (20, 17, 1)
        assert str(version) == "v20.17.1"

    def test_prefix_does_not_affect_equality(self):
        assert v("v20.17.1") == v("20.17.1")
        assert hash(v("v20.17.1")) == hash(v("20.17.1"))

    def test_prerelease(self):
        version = v("10.0.100-preview.6")
        assert version.is_prerelease
        assert str(version) == "10.0.100-preview.6"

    def test_invalid_returns_none(self):
        assert v("not-a-version") is None
        assert v("") is None
        assert Version.parse(None) is None


class TestVersionOrdering:
    """Ordering is numeric per component."""

    def test_patch_compared_as_integer(self):
        assert v("8.0.99") < v("8.0.412")

    def test_prerelease_sorts_before_release(self):
        assert v("10.0.100-preview.6") < v("10.0.100")

    def test_max_of_mixed_prefixes(self):
        assert max([v("v18.20.0"), v("22.1.0"), v("v20.17.1")]) == v("22.1.0")

    def test_release_line_and_even_major(self):
        assert v("8.0.412").release_line == (8, 0)
        assert v("v22.1.0").is_even_major
        assert not v("v23.0.0").is_even_major
        assert v("8.0.1").same_line(v("8.0.412"))


class TestResolvedAndPlan:
    """Helpers on resolution results and plans."""

    def test_labels_keep_first_tier(self):
        current = v("v22.17.1")
        resolved = ResolvedVersions(
            supported=(current,),
            primary=current,
            tiers=((current, SupportTier.CURRENT), (current, SupportTier.ACTIVE_LTS)),
        )
        assert resolved.labels() == {current: "Current"}
        assert resolved.tier_of(current) == SupportTier.CURRENT
        assert resolved.tier_of(v("v1.0.0")) is None

    def test_target_for_defaults_to_itself(self):
        plan = ReconciliationPlan(install=(), remove=(), targets=((v("v22.1.0"), v("v22.5.0")),))
        assert plan.target_for(v("v22.1.0")) == v("v22.5.0")
        assert plan.target_for(v("v20.1.0")) == v("v20.1.0")
        assert plan.is_empty

    def test_installed_version_paths(self):
        item = InstalledVersion(version=v("8.0.412"), paths=("/a/sdk/8.0.412",))
        assert item.paths == ("/a/sdk/8.0.412",)
