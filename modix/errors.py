class ModixError(Exception):
    """Base class for errors surfaced to the command-line user."""


class NotFoundError(ModixError):
    """A vendor, model, agent or file does not exist."""


class AlreadyExistsError(ModixError):
    """A vendor, model, agent or project already exists."""


class InvalidConfigError(ModixError):
    """A config or settings file cannot be parsed or violates an invariant."""


class ConfigIOError(ModixError):
    """Reading or writing a file failed."""
