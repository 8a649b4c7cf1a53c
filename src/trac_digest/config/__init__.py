"""
Configuration loading for trac_digest.

Provides a loader for the optional configuration file in the user's
home directory. See :mod:`trac_digest.config.loader` for details.
"""

from .loader import ConfigError, load_config  # noqa: F401
