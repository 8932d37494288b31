"""Unit tests for site check domain objects."""

from site_health.domain import ProbeResult, SiteCheck, SiteTarget
from site_health.domain.site_check import MAX_STATUS_LENGTH, CheckStatus

TARGET = SiteTarget(tenant_id="01HTENANTAAAAAAAAAAAAAAAAA", website_url="acme.example")


class TestSiteCheck:
    def test_succeeded_records_probe_result(self):
        check = SiteCheck.succeeded(
            TARGET, ProbeResult(http_status=301, response_time_ms=120)
        )

        assert check.status == CheckStatus.OK
        assert check.is_ok
        assert check.http_status == 301
        assert check.response_time_ms == 120
        assert check.url == "acme.example"

    def test_invalid_url_has_no_measurements(self):
        check = SiteCheck.invalid_url(TARGET)

        assert check.status == "invalid_url"
        assert not check.is_ok
        assert check.http_status is None

    def test_failed_uses_error_message_as_status(self):
        check = SiteCheck.failed(TARGET, "  connection refused ")

        assert check.status == "connection refused"
        assert not check.is_ok

    def test_failed_with_blank_message(self):
        assert SiteCheck.failed(TARGET, "").status == "unknown error"

    def test_failed_status_is_truncated_to_column_width(self):
        check = SiteCheck.failed(TARGET, "x" * (MAX_STATUS_LENGTH + 50))

        assert len(check.status) == MAX_STATUS_LENGTH

    def test_each_check_gets_its_own_id(self):
        assert SiteCheck.invalid_url(TARGET).id != SiteCheck.invalid_url(TARGET).id
