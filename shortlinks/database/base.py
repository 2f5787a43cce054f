"""Abstract base class for link store implementations."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple

from ..common.validators import (
    DEFAULT_RESERVED_PATTERN,
    compile_reserved_pattern,
    is_valid_short_code,
    is_valid_title,
    is_valid_url,
    normalize_url,
)
from ..errors import CodeGenerationExhausted, DuplicateCode, InvalidInput
from ..shortcode import ShortCodeGenerator
from .models import Link

# Sortable columns exposed to callers; keys are the only accepted order_by values.
SORTABLE_COLUMNS = ("title", "short_code", "target_url", "clicks", "created_at")
DEFAULT_ORDER = ("created_at", "DESC")


def resolve_ordering(order_by: Optional[str], direction: Optional[str]) -> Tuple[str, str]:
    """Map caller-supplied sort options onto the allow-list.

    An unknown column falls back to ``created_at DESC`` entirely; an unknown
    direction on a known column falls back to ``DESC``.
    """
    column = (order_by or "").strip().lower()
    if column not in SORTABLE_COLUMNS:
        return DEFAULT_ORDER
    dir_ = (direction or "").strip().upper()
    if dir_ not in ("ASC", "DESC"):
        dir_ = "DESC"
    return column, dir_


class LinkStoreBase(ABC):
    """Abstract base class for link store operations.

    Validation and short code generation live here; subclasses implement
    the storage primitives.
    """

    def __init__(
        self,
        db_config: str,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        max_collision_retries: int = 5,
        reserved_pattern: Optional[str] = DEFAULT_RESERVED_PATTERN,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize store.

        Args:
            db_config: Database connection string
            short_code_generator: Generator used when no short code is given
            max_collision_retries: Generation attempts before giving up
            reserved_pattern: Regex of paths that may not be used as codes
            logger: Optional logger instance
        """
        self.db_config = db_config
        self.generator = short_code_generator or ShortCodeGenerator()
        self.max_collision_retries = max_collision_retries
        self.reserved_pattern = compile_reserved_pattern(reserved_pattern)
        self.logger = logger or logging.getLogger(__name__)

    async def create(
        self,
        title: str,
        target_url: str,
        short_code: Optional[str] = None,
    ) -> Link:
        """Create a new link.

        Args:
            title: Display label
            target_url: Absolute http(s) URL to redirect to
            short_code: Optional explicit short code; generated if omitted

        Returns:
            The stored Link

        Raises:
            InvalidInput: If title, URL or short code are malformed
            DuplicateCode: If the explicit short code is taken
            CodeGenerationExhausted: If no free code was found
            StorageFailure: If the backend fails
        """
        valid, error = is_valid_title(title)
        if not valid:
            raise InvalidInput(error)
        valid, error = is_valid_url(target_url)
        if not valid:
            raise InvalidInput(f"Invalid URL: {error}")

        title = title.strip()
        target_url = normalize_url(target_url)
        created_at = datetime.now(timezone.utc)

        if short_code:
            valid, error = is_valid_short_code(short_code, reserved_pattern=self.reserved_pattern)
            if not valid:
                raise InvalidInput(f"Invalid short code: {error}")
            return await self._insert(title, target_url, short_code, created_at)

        for attempt in range(self.max_collision_retries):
            code = self.generator.generate_random()
            if self.reserved_pattern is not None and self.reserved_pattern.match(code):
                continue
            try:
                link = await self._insert(title, target_url, code, created_at)
            except DuplicateCode:
                self.logger.debug(f"Generated code collided (attempt {attempt + 1}): {code}")
                continue
            return link

        self.logger.error(
            f"Short code generation exhausted after {self.max_collision_retries} attempts"
        )
        raise CodeGenerationExhausted(self.max_collision_retries)

    @abstractmethod
    async def _insert(
        self,
        title: str,
        target_url: str,
        short_code: str,
        created_at: datetime,
    ) -> Link:
        """Insert a validated row.

        Raises:
            DuplicateCode: If short_code already exists
        """
        pass

    @abstractmethod
    async def get_by_code(self, short_code: str) -> Optional[Link]:
        """Get a link by exact short code, or None if not found."""
        pass

    @abstractmethod
    async def get_by_id(self, link_id: int) -> Optional[Link]:
        """Get a link by id, or None if not found."""
        pass

    @abstractmethod
    async def increment_clicks(self, link_id: int) -> None:
        """Atomically add one to the click counter of a link."""
        pass

    @abstractmethod
    async def list(self, order_by: Optional[str] = None, direction: Optional[str] = None) -> List[Link]:
        """List all links ordered by an allow-listed column."""
        pass

    @abstractmethod
    async def delete(self, link_id: int) -> bool:
        """Delete a link.

        Returns:
            True if a row was removed, False if the id did not exist
        """
        pass

    async def initialize(self) -> None:
        """Prepare the backend (create tables when enabled)."""
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics (total_links, total_clicks, database)."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy."""
        pass

    async def close(self) -> None:
        """Close connections."""
        pass
