class UsageError(Exception):
    """Bad command-line input. Carries the process exit code."""

    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class ResolutionFailure(UsageError):
    """The absolute-time text could not be turned into a timestamp."""


class StaleDeadlineWarning(UserWarning):
    def __init__(self, given: str, suggestion: str) -> None:
        super().__init__(given, suggestion)
        self.given = given
        self.suggestion = suggestion

    def __str__(self) -> str:
        return (
            f'WARNING: The given time ("{self.given}") is in the past.  Not sleeping.\n'
            f"  If you meant tomorrow, use this:  ex: {self.suggestion}"
        )
