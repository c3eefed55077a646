class ConfigurationError(ValueError):
    """Raised when a render is requested with inconsistent or incomplete inputs."""


class DocumentExistsError(ValueError):
    """Raised when a filename is registered twice without ``overwrite``."""
