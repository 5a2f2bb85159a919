"""Unit tests for buildconf presence validation."""

import pytest

from buildconf.entity import BuildFeature
from buildconf.exceptions import EntityValidationError
from buildconf.fields import IntField, StringField
from buildconf.validation import PropertyError, ValidationReport, collect_errors
from buildconf.variants import Variant, VariantSlot, active_selections


class Target(Variant):
    """Deploy target family."""


class HostTarget(Target):
    discriminator = "host"

    host = StringField(required=True)
    port = IntField(default=22, required=True)


class ClusterTarget(Target):
    discriminator = "cluster"

    cluster_name = StringField(required=True, path="cluster", message="cluster name is needed at {path}")


class Release(BuildFeature):
    type = "release"

    channel = StringField(required=True, message="set {path} to one of {stable, beta}")
    destination = VariantSlot("destinationType", Target, required=True, path="dest")


class Deploy(BuildFeature):
    type = "deploy"

    artifact = StringField(required=True)
    target = VariantSlot("targetType", Target, required=True)
    fallback = VariantSlot("fallbackType", Target)


class TestCollectErrors:
    """Tests for error collection across entities and variants."""

    def test_missing_root_properties(self) -> None:
        """Test every unset required property is reported in order."""
        errors = Deploy().validate()
        assert [e.path for e in errors] == ["artifact", "target"]
        assert errors[0].message == "mandatory 'artifact' property is not specified"

    def test_empty_string_satisfies_requirement(self) -> None:
        """Test an empty value counts as provided."""
        deploy = Deploy()
        deploy.artifact = ""
        assert [e.path for e in deploy.validate()] == ["target"]

    def test_nested_path(self) -> None:
        """Test variant rules are reported under the slot path."""
        deploy = Deploy(lambda d: d.select(Deploy.target, HostTarget))
        deploy.artifact = "app.zip"
        assert deploy.validate() == [
            PropertyError("target.host", "mandatory 'target.host' property is not specified"),
        ]

    def test_default_satisfies_requirement(self) -> None:
        """Test a required field with a default never fails."""
        deploy = Deploy(lambda d: d.select(Deploy.target, HostTarget, lambda h: setattr(h, "host", "h")))
        deploy.artifact = "a"
        assert deploy.validate() == []

    def test_custom_path_and_message(self) -> None:
        """Test a rule may override its path segment and message."""
        deploy = Deploy(lambda d: d.select(Deploy.target, ClusterTarget))
        deploy.artifact = "a"
        assert [str(e) for e in deploy.validate()] == ["target.cluster: cluster name is needed at target.cluster"]

    def test_braces_in_message(self) -> None:
        """Test literal braces in a custom message are kept verbatim."""
        release = Release(lambda r: r.select(Release.destination, HostTarget, lambda h: setattr(h, "host", "h")))
        errors = release.validate()
        assert [e.message for e in errors] == ["set channel to one of {stable, beta}"]

    def test_slot_path_used_for_children(self) -> None:
        """Test a slot's custom segment prefixes its variant's errors."""
        release = Release()
        release.channel = "beta"
        assert [e.path for e in release.validate()] == ["dest"]

        release.select(Release.destination, HostTarget)
        assert [e.path for e in release.validate()] == ["dest.host"]
        assert [path for path, _ in active_selections(release)] == ["dest"]

    def test_own_rules_before_slots(self) -> None:
        """Test a node's rules come before its variants' rules."""
        deploy = Deploy()
        deploy.select(Deploy.target, HostTarget)
        deploy.select(Deploy.fallback, ClusterTarget)
        assert [e.path for e in deploy.validate()] == ["artifact", "target.host", "fallback.cluster"]

    def test_inactive_variant_ignored(self) -> None:
        """Test only the active variant is validated."""
        deploy = Deploy()
        deploy.artifact = "a"
        deploy.select(Deploy.target, ClusterTarget)
        deploy.select(Deploy.target, HostTarget, lambda h: setattr(h, "host", "h"))
        assert deploy.validate() == []

    def test_unknown_variant_skipped(self) -> None:
        """Test an unknown discriminator adds no errors."""
        deploy = Deploy.from_params({"artifact": "a", "targetType": "k8s"})
        assert collect_errors(deploy) == []

    def test_validation_is_repeatable(self) -> None:
        """Test validating twice gives the same result and no mutation."""
        deploy = Deploy()
        before = deploy.to_property_bag()
        assert deploy.validate() == deploy.validate()
        assert deploy.to_property_bag() == before


class TestValidationReport:
    """Tests for per-entity reports."""

    def test_valid_report(self) -> None:
        """Test a complete entity reports valid."""
        deploy = Deploy(lambda d: d.select(Deploy.target, HostTarget, lambda h: setattr(h, "host", "h")), id="D1")
        deploy.artifact = "a"
        report = ValidationReport.for_entity(deploy)
        assert report.is_valid
        assert report.entity_type == "deploy"
        assert report.entity_id == "D1"
        report.raise_for_errors()

    def test_raise_for_errors(self) -> None:
        """Test an invalid report raises with every error attached."""
        report = ValidationReport.for_entity(Deploy())
        assert report.paths() == ["artifact", "target"]
        with pytest.raises(EntityValidationError) as exc_info:
            report.raise_for_errors()
        assert len(exc_info.value.errors) == 2
        assert "artifact: mandatory" in str(exc_info.value)
