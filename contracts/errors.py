"""Error taxonomy for a bootstrap run.

Library code raises these; only the CLI turns them into exit codes. Bad or unknown
command-line input is reported by click itself as a usage error.
"""


class BootstrapError(Exception):
    """Base class for every fatal bootstrap failure."""

    exit_code = 1


class ValidationError(BootstrapError):
    """Role flags are not mutually exclusive, or a required-if-present value is empty."""


class DependencyMissingError(BootstrapError):
    """A required external executable is not on PATH."""


class MetadataResolutionError(BootstrapError):
    """The metadata service could not be reached or returned an unusable value."""


class FatalConfigError(BootstrapError):
    """A run-as user or its home directory cannot be resolved safely."""


class ArtifactWriteError(BootstrapError):
    """A generated file could not be written or handed to the run-as user."""


class SupervisorControlError(BootstrapError):
    """supervisorctl could not reread or apply the configuration."""
