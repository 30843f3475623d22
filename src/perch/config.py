"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=9200, rest_compatibility=False)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 9200
    debug: bool = False
    workers: int = 0  # 0 = auto-detect from CPU count
    log_level: str = "info"

    # Major version of the REST API this service speaks natively
    major_version: int = 8

    # Register the previous major version's typed routes alongside the current ones
    rest_compatibility: bool = True

    # Deprecation keys remembered for log deduplication (LRU)
    deprecation_cache_size: int = 128

    # Limits
    max_content_length: int = 100 * 1024 * 1024  # 100 MB
