"""
=============================================================================
LIBRARY CONFIGURATION
=============================================================================

Centralized configuration for the few knobs this library has.

=============================================================================
WHAT IS CONFIGURABLE?
=============================================================================

The value objects themselves have no settings: a header is valid or it
is not. What can be tuned is the plumbing around them:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION GROUPS                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   STREAMS                                                           │
    │      spool_max_size  - bytes kept in memory before a temporary     │
    │                        body stream rolls over to disk              │
    │                                                                      │
    │   UPLOADS                                                           │
    │      chunk_size      - block size when copying an upload stream    │
    │                                                                      │
    │   LOGGING                                                           │
    │      log_level, log_format                                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Priority (highest to lowest):

    1. Explicit MessageConfig(...) passed by the caller
    2. Environment variables via MessageConfig.from_env()
    3. Default values (in this dataclass)

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


@dataclass
class MessageConfig:
    """
    Configuration for stream creation, upload moves and logging.

    Usage:
        config = MessageConfig(spool_max_size=64 * 1024)
        body = create_stream(b"payload", config=config)

        config = MessageConfig.from_env()
        setup_logging(config)
    """

    # ─────────────────────────────────────────────────────────────────────
    # STREAMS
    # ─────────────────────────────────────────────────────────────────────

    spool_max_size: int = 2 * 1024 * 1024  # 2 MB
    """
    Maximum size of an in-memory temporary stream.
    Larger bodies spill to a temporary file on disk.
    """

    # ─────────────────────────────────────────────────────────────────────
    # UPLOADS
    # ─────────────────────────────────────────────────────────────────────

    chunk_size: int = 4096
    """
    Block size used when copying a stream-backed upload to its target.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "WARNING"
    """
    Logging level for the httpmessage logger (DEBUG, INFO, WARNING, ...).
    A library should be quiet unless asked.
    """

    log_format: str = "text"
    """
    Log format: 'json' or 'text'.
    """

    @classmethod
    def from_env(cls) -> "MessageConfig":
        """
        Create configuration from environment variables.

        HTTPMESSAGE_SPOOL_MAX_SIZE  Spool threshold in bytes (default: 2 MB)
        HTTPMESSAGE_CHUNK_SIZE      Upload copy block size (default: 4096)
        HTTPMESSAGE_LOG_LEVEL       Logging level (default: WARNING)
        HTTPMESSAGE_LOG_FORMAT      'text' or 'json' (default: text)
        """
        return cls(
            spool_max_size=int(os.getenv("HTTPMESSAGE_SPOOL_MAX_SIZE", str(2 * 1024 * 1024))),
            chunk_size=int(os.getenv("HTTPMESSAGE_CHUNK_SIZE", "4096")),
            log_level=os.getenv("HTTPMESSAGE_LOG_LEVEL", "WARNING"),
            log_format=os.getenv("HTTPMESSAGE_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast: a bad value is reported when the config is loaded, not
        the first time an upload is moved.
        """
        if self.spool_max_size < 1:
            raise ValueError("spool_max_size must be >= 1")

        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")
