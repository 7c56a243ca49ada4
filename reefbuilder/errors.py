"""Exceptions raised by the growth and mesh modules."""


class ConfigurationError(ValueError):
    """Growth parameters that cannot be corrected into a valid build."""


class MeshIntegrityError(RuntimeError):
    """Index buffers or vertex attributes that do not line up."""
