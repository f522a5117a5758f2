"""Capabilities package.

Exports the provider profile model and its loaders.
"""

from .loader import (
    ProfileNotFoundError,
    ProfileSchemaError,
    available_profiles,
    load_builtin_profile,
    load_profile,
    load_profile_file,
)
from .profile import SUPPORTED_SCHEMA_VERSION, ProfilePricing, ProviderProfile

__all__ = [
    "ProviderProfile",
    "ProfilePricing",
    "SUPPORTED_SCHEMA_VERSION",
    "ProfileNotFoundError",
    "ProfileSchemaError",
    "available_profiles",
    "load_builtin_profile",
    "load_profile",
    "load_profile_file",
]
