"""Library vertical configuration.

Loads LibraryConfig from the environment once at import, demonstrating how
verticals use the domain config pattern.
"""

from patterns.domain_config import LibraryConfig

# Process-wide configuration instance
config = LibraryConfig.from_env()
