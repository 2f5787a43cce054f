"""Periodic DNS check for the public short-link domain.

Runs out-of-band from request handling: a background task resolves the
domain's IPv4 addresses every interval and keeps the latest DomainStatus.
A failed check is simply retried on the next tick.
"""

import asyncio
import logging
import socket
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional
from urllib.parse import urlsplit

STATE_UNKNOWN = "unknown"
STATE_OK = "ok"
STATE_MISMATCH = "mismatch"
STATE_UNRESOLVED = "unresolved"

Resolve = Callable[[str], Awaitable[List[str]]]


@dataclass
class DomainStatus:
    domain: str
    state: str = STATE_UNKNOWN
    addresses: List[str] = field(default_factory=list)
    expected_ip: Optional[str] = None
    checked_at: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "state": self.state,
            "addresses": list(self.addresses),
            "expected_ip": self.expected_ip,
            "checked_at": self.checked_at.isoformat() if self.checked_at else None,
            "error": self.error,
        }


def domain_from_url(value: str) -> str:
    """Accept either a bare host or a URL and return the host name."""
    value = value.strip()
    if "://" in value:
        return urlsplit(value).hostname or ""
    return value.split("/", 1)[0].split(":", 1)[0]


async def resolve_ipv4(domain: str) -> List[str]:
    """Resolve A records through the event loop's resolver."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(domain, None, family=socket.AF_INET, type=socket.SOCK_STREAM)
    return sorted({info[4][0] for info in infos})


class DomainChecker:
    """Keeps the DNS status of the configured short domain up to date."""

    def __init__(
        self,
        domain: str,
        expected_ip: Optional[str] = None,
        interval_seconds: float = 3600,
        resolver: Resolve = resolve_ipv4,
        logger: Optional[logging.Logger] = None,
    ):
        self.domain = domain_from_url(domain)
        self.expected_ip = expected_ip
        self.interval_seconds = interval_seconds
        self._resolve = resolver
        self.logger = logger or logging.getLogger(__name__)
        self.status = DomainStatus(domain=self.domain, expected_ip=expected_ip)
        self._task: Optional[asyncio.Task] = None

    async def check_once(self) -> DomainStatus:
        """Resolve the domain now and record the result."""
        checked_at = datetime.now(timezone.utc)
        try:
            addresses = await self._resolve(self.domain)
        except (OSError, UnicodeError) as e:
            self.status = DomainStatus(
                domain=self.domain,
                state=STATE_UNRESOLVED,
                expected_ip=self.expected_ip,
                checked_at=checked_at,
                error=str(e),
            )
            self.logger.warning(f"DNS lookup for {self.domain} failed: {e}")
            return self.status

        if not addresses:
            state = STATE_UNRESOLVED
        elif self.expected_ip and self.expected_ip not in addresses:
            state = STATE_MISMATCH
        else:
            state = STATE_OK

        self.status = DomainStatus(
            domain=self.domain,
            state=state,
            addresses=addresses,
            expected_ip=self.expected_ip,
            checked_at=checked_at,
        )
        if state == STATE_OK:
            self.logger.debug(f"DNS for {self.domain} resolves to {addresses}")
        else:
            self.logger.warning(f"DNS for {self.domain}: {state} (addresses={addresses}, expected={self.expected_ip})")
        return self.status

    async def _run(self) -> None:
        while True:
            try:
                await self.check_once()
            except Exception as e:
                # check_once only records lookup errors; anything else must not end the loop
                self.logger.exception(f"DNS check for {self.domain} failed: {e}")
                self.status = DomainStatus(
                    domain=self.domain,
                    state=STATE_UNRESOLVED,
                    expected_ip=self.expected_ip,
                    checked_at=datetime.now(timezone.utc),
                    error=str(e) or type(e).__name__,
                )
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        """Start the periodic check in the background."""
        if self._task is None or self._task.done():
            self.logger.info(f"Starting DNS check for {self.domain} every {self.interval_seconds}s")
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the background check."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
