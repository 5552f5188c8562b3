# errors.py
"""Exception types shared by the store, the reconciler and the boundaries."""


class HabitPulseError(Exception):
    """Base class for every error the application raises on purpose."""


class ValidationError(HabitPulseError):
    """Malformed input: a bad date, a bad import payload, a bad habit."""


class PersistenceError(HabitPulseError):
    """The storage file could not be read or written."""


class NotFoundError(HabitPulseError):
    """A habit or log id that does not exist was required to exist."""
