"""
Error types for acts_as_label.

Every operation either succeeds or raises exactly one of these errors at
the call site that triggered it.
"""


class ActsAsLabelError(Exception):
    """Base class for all acts_as_label errors."""


class ConfigurationError(ActsAsLabelError):
    """
    A label family (or the library configuration) is misconfigured.

    Raised at configuration time. Fatal to the family's setup, not to
    the process.
    """


class ValidationError(ActsAsLabelError, ValueError):
    """
    A system label or label fails its presence, length or format rule.

    Attributes:
        field: Name of the offending attribute, if known
        value: The rejected value
    """

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class NotFoundError(ActsAsLabelError, LookupError):
    """
    No row matches the requested system label, or no default exists.

    This is an expected condition and callers are expected to handle it.

    Attributes:
        family: Name of the label family that was searched
        code: The normalized code that was requested, or None for defaults
    """

    def __init__(self, message: str, family: str | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.family = family
        self.code = code
