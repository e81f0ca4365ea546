"""opensdk - command-line front-end for the OpenSDK client.

Configuration is resolved from flags, OPENSDK_* environment variables,
a per-profile config file and defaults, in that order of priority.
"""

from opensdk.config import package_version

__version__ = package_version()

__all__ = ["__version__"]
