"""
Logging helper utilities for the grypeme action.

Provides the debug dump of action inputs and GitHub variables.
"""

import logging
from typing import Iterable, Mapping, Optional

# Values of these variables never reach the log
SECRET_VARIABLES = frozenset({"INPUT_GIST-TOKEN", "GITHUB_TOKEN"})


def log_environment(
    environ: Mapping[str, str],
    prefixes: Iterable[str] = ("INPUT_", "GITHUB_"),
    logger: Optional[logging.Logger] = None,
    width: int = 38,
) -> None:
    """
    Log matching environment variables, sorted, at DEBUG level.

    Secrets listed in SECRET_VARIABLES are masked.

    Examples:
        >>> log_environment({"INPUT_SCAN": "head", "HOME": "/root"})
        === Environment Variables (sorted) ===
        INPUT_SCAN=head
        ======================================
    """
    if logger is None:
        logger = logging.getLogger()

    prefixes = tuple(prefixes)
    logger.debug("=== Environment Variables (sorted) ===")
    for name in sorted(k for k in environ if k.startswith(prefixes)):
        value = environ[name]
        if name in SECRET_VARIABLES and value:
            value = "***"
        logger.debug(f"{name}={value}")
    logger.debug("=" * width)
