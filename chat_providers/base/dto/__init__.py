"""DTO package for adapter construction parameters."""

from .adapter_params import AdapterParams

__all__ = ["AdapterParams"]
