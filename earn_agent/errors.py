"""Exception types shared across the earn agent."""


class CommandError(RuntimeError):
    """An external command exited non-zero, timed out or overflowed its buffer."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class WorkflowStateError(RuntimeError):
    """A workflow run is unknown or not in a state that accepts the request."""

    def __init__(self, message: str, run_id: str, not_found: bool = False):
        super().__init__(message)
        self.run_id = run_id
        self.not_found = not_found
