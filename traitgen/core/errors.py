"""Typed failures raised by traitgen.

Every error carries its inputs as attributes so callers (and the CLI's JSON
mode) can report them without parsing messages.
"""


class TraitgenError(Exception):
    """Base class for all traitgen errors."""

    pass


class DirectoryUnreadableError(TraitgenError):
    """Raised when a directory cannot be listed. Fatal for the whole run."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Failed to retrieve entries by path folder: {path}")


class TraitMismatchError(TraitgenError):
    """Raised when configured layers and layer folders on disk disagree."""

    def __init__(self, message: str):
        self.detail = message
        super().__init__(f"Invalid trait config: {message}")


class QuotaOverflowError(TraitgenError):
    """Raised when forced-combination percentages add up to more than 100."""

    def __init__(self, total_percentage: int):
        self.total_percentage = total_percentage
        super().__init__(
            "The sum of the percentages in the forced combinations exceeds 100% "
            f"(got {total_percentage}%)."
        )


class InfeasibleTotalSupplyError(TraitgenError):
    """Raised when more unique combinations are requested than can exist."""

    def __init__(self, requested: int, available: int, scope: str = "collection"):
        self.requested = requested
        self.available = available
        self.scope = scope
        super().__init__(
            f"Invalid total supply for {scope}. "
            f"Expected: {requested}. Actual: {available}."
        )


class GenerationStalledError(TraitgenError):
    """Raised when the draw loop hits its attempt ceiling before the target."""

    def __init__(self, target: int, accepted: int, attempts: int):
        self.target = target
        self.accepted = accepted
        self.attempts = attempts
        super().__init__(
            f"Generation stalled after {attempts} draws: "
            f"{accepted}/{target} unique combinations accepted."
        )


class InvalidSkipPatternError(TraitgenError):
    """Raised when a skipped-trait pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid skipped trait pattern {pattern!r}: {reason}")


class RenderCancelledError(TraitgenError):
    """Raised by a render task told to stop before it wrote anything."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Artifact {index} cancelled before writing")
