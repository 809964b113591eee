"""Tests for service provisioning against a recording connection."""

from __future__ import annotations

import pytest

from cf_treeline._exceptions import PlatformCommandError
from cf_treeline._types import ServiceDescriptor
from cf_treeline.rules.provision import ProvisionRequest, provision_services
from cf_treeline.subsystem import TreelineSubsystem

REQUEST = ProvisionRequest(
    app_name="hackday-nc",
    services=TreelineSubsystem().backing_services,
)


class TestProvisionServices:
    """Test provision_services()."""

    def test_fresh_space(self, connection):
        result = provision_services(REQUEST, connection)

        assert connection.calls == [
            ("services",),
            ("cs", "rediscloud", "30mb", "hackday-rediscloud"),
            ("bs", "hackday-nc", "hackday-rediscloud"),
            ("cs", "elephantsql", "turtle", "hackday-elephantsql"),
            ("bs", "hackday-nc", "hackday-elephantsql"),
        ]
        assert len(result.steps) == 4

    def test_already_provisioned_issues_no_mutations(self, make_connection, provisioned_services):
        connection = make_connection(services=provisioned_services)
        result = provision_services(REQUEST, connection)

        assert connection.calls == [("services",)]
        assert result.steps == ()
        assert all(s.found and s.bound for s in result.statuses)

    def test_existing_but_unbound(self, make_connection):
        connection = make_connection(services=[
            ServiceDescriptor("hackday-rediscloud", "30mb", ()),
            ServiceDescriptor("hackday-elephantsql", "turtle", ("hackday-nc",)),
        ])
        provision_services(REQUEST, connection)

        assert connection.calls == [
            ("services",),
            ("bs", "hackday-nc", "hackday-rediscloud"),
        ]

    def test_listing_failure_stops_everything(self, make_connection):
        connection = make_connection(fail_on=("services",))
        with pytest.raises(PlatformCommandError):
            provision_services(REQUEST, connection)
        assert connection.calls == [("services",)]

    def test_create_failure_aborts(self, make_connection):
        connection = make_connection(fail_on=("cs",))
        with pytest.raises(PlatformCommandError, match="FAILED cs"):
            provision_services(REQUEST, connection)
        assert connection.calls == [
            ("services",),
            ("cs", "rediscloud", "30mb", "hackday-rediscloud"),
        ]

    def test_bind_failure_leaves_created_service(self, make_connection):
        connection = make_connection(fail_on=("bs",))
        with pytest.raises(PlatformCommandError):
            provision_services(REQUEST, connection)
        assert connection.commands() == ["services", "cs", "bs"]
