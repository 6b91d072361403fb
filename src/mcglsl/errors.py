class McglslError(Exception):
    """Base class for errors surfaced to the user as notifications."""


class ConfigurationError(McglslError):
    """The shaderpacks path is unset or does not contain the file being linted."""


class ValidatorLaunchError(McglslError):
    """The external validator could not be started or did not finish in time."""


class UnsupportedStageError(McglslError, ValueError):
    """The file extension does not map to a shader stage."""
