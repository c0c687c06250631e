"""Resolver configuration.

ResolverConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Resolver configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ResolverConfig(base_url="/my-app", allow_url_param_normalization=True)
    """

    # Base URL prefix stripped from incoming paths (e.g. "/my-app")
    base_url: str = ""

    # Development mode serves from the root, so base URL stripping is skipped
    development: bool = False

    # Query params override path params of the same name instead of being dropped
    allow_url_param_normalization: bool = False
