"""Tests for the periodic short domain DNS check."""

import asyncio

import pytest

from shortlinks.domain_check import (
    STATE_MISMATCH,
    STATE_OK,
    STATE_UNKNOWN,
    STATE_UNRESOLVED,
    DomainChecker,
    domain_from_url,
)


def fake_resolver(addresses=None, error=None):
    calls = []

    async def resolve(domain):
        calls.append(domain)
        if error is not None:
            raise error
        return list(addresses or [])

    resolve.calls = calls
    return resolve


class TestDomainChecker:

    async def test_initial_status_unknown(self):
        checker = DomainChecker("https://sho.rt", resolver=fake_resolver(["1.2.3.4"]))
        assert checker.domain == "sho.rt"
        assert checker.status.state == STATE_UNKNOWN

    async def test_ok_without_expected_ip(self):
        checker = DomainChecker("sho.rt", resolver=fake_resolver(["1.2.3.4"]))

        status = await checker.check_once()

        assert status.state == STATE_OK
        assert status.addresses == ["1.2.3.4"]
        assert status.checked_at is not None

    async def test_ok_with_matching_ip(self):
        checker = DomainChecker("sho.rt", expected_ip="5.6.7.8", resolver=fake_resolver(["1.2.3.4", "5.6.7.8"]))
        assert (await checker.check_once()).state == STATE_OK

    async def test_mismatch(self):
        checker = DomainChecker("sho.rt", expected_ip="5.6.7.8", resolver=fake_resolver(["1.2.3.4"]))
        assert (await checker.check_once()).state == STATE_MISMATCH

    async def test_no_addresses(self):
        checker = DomainChecker("sho.rt", resolver=fake_resolver([]))
        assert (await checker.check_once()).state == STATE_UNRESOLVED

    async def test_lookup_error(self):
        checker = DomainChecker("sho.rt", resolver=fake_resolver(error=OSError("Name or service not known")))

        status = await checker.check_once()

        assert status.state == STATE_UNRESOLVED
        assert "not known" in status.error

    async def test_start_runs_periodically(self):
        resolve = fake_resolver(["1.2.3.4"])
        checker = DomainChecker("sho.rt", interval_seconds=0.01, resolver=resolve)

        checker.start()
        assert checker.running
        await asyncio.sleep(0.05)
        await checker.stop()

        assert not checker.running
        assert len(resolve.calls) >= 2
        assert checker.status.state == STATE_OK

    async def test_unexpected_error_does_not_stop_loop(self):
        calls = []

        async def resolve(domain):
            calls.append(domain)
            if len(calls) == 1:
                raise RuntimeError("resolver crashed")
            return ["1.2.3.4"]

        checker = DomainChecker("sho.rt", interval_seconds=0.01, resolver=resolve)

        checker.start()
        await asyncio.sleep(0.05)
        assert checker.running
        await checker.stop()

        assert len(calls) >= 2
        assert checker.status.state == STATE_OK

    async def test_unexpected_error_recorded(self):
        async def resolve(domain):
            raise RuntimeError("resolver crashed")

        checker = DomainChecker("sho.rt", interval_seconds=60, resolver=resolve)

        checker.start()
        await asyncio.sleep(0.01)
        assert checker.running
        await checker.stop()

        assert checker.status.state == STATE_UNRESOLVED
        assert checker.status.error == "resolver crashed"

    async def test_stop_without_start(self):
        checker = DomainChecker("sho.rt", resolver=fake_resolver(["1.2.3.4"]))
        await checker.stop()
        assert not checker.running

    async def test_status_endpoint_reports_check(self, app, client):
        checker = DomainChecker("https://sho.rt", expected_ip="1.2.3.4", resolver=fake_resolver(["1.2.3.4"]))
        await checker.check_once()
        app.state.domain_checker = checker

        response = await client.get("/api/domain/status")

        data = response.json()
        assert data["enabled"] is True
        assert data["domain"] == "sho.rt"
        assert data["state"] == STATE_OK
        assert data["addresses"] == ["1.2.3.4"]


@pytest.mark.parametrize("value,expected", [
    ("https://sho.rt", "sho.rt"),
    ("https://sho.rt:8443/s", "sho.rt"),
    ("sho.rt", "sho.rt"),
    ("sho.rt/s", "sho.rt"),
    (" sho.rt:80 ", "sho.rt"),
])
def test_domain_from_url(value, expected):
    assert domain_from_url(value) == expected
