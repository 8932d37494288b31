"""Unit tests for ObservationContext and probe context binding."""

from unittest.mock import MagicMock

from access.application.observability import DefaultTenantContextProbe
from shared_kernel.observability_context import ObservationContext


class TestObservationContext:
    def test_as_dict_omits_unset_fields(self):
        context = ObservationContext(impersonator_id="a1")

        assert context.as_dict() == {"impersonator_id": "a1"}

    def test_as_dict_includes_extra(self):
        context = ObservationContext(request_id="req-1", extra={"route": "/me"})

        assert context.as_dict() == {"request_id": "req-1", "route": "/me"}


class TestProbeContextBinding:
    def test_bound_context_is_added_to_events(self):
        logger = MagicMock()
        probe = DefaultTenantContextProbe(logger=logger).with_context(
            ObservationContext(impersonator_id="a1")
        )

        probe.context_resolved("u2", "01HTENANTAAAAAAAAAAAAAAAAA")

        logger.debug.assert_called_once_with(
            "tenant_context_resolved",
            principal_id="u2",
            tenant_id="01HTENANTAAAAAAAAAAAAAAAAA",
            impersonator_id="a1",
        )

    def test_unbound_probe_logs_only_event_fields(self):
        logger = MagicMock()

        DefaultTenantContextProbe(logger=logger).no_grants("u1")

        logger.info.assert_called_once_with("tenant_context_no_grants", principal_id="u1")
