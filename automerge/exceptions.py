class ConfigurationError(ValueError):
    """The run is missing something it cannot work without (token, repository, event payload)."""


class MissingContextError(LookupError):
    """A pull request event arrived without the pull request it is about."""
