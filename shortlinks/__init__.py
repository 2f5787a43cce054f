"""Short link resolution and administration."""

from .shortcode import ShortCodeGenerator
from .resolver import Resolver
from .admin import LinkAdminService
from .errors import (
    ShortLinkError,
    InvalidInput,
    DuplicateCode,
    CodeGenerationExhausted,
    NotFound,
    StorageFailure,
)

__all__ = [
    "ShortCodeGenerator",
    "Resolver",
    "LinkAdminService",
    "ShortLinkError",
    "InvalidInput",
    "DuplicateCode",
    "CodeGenerationExhausted",
    "NotFound",
    "StorageFailure",
]
