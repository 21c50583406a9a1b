"""Custom exception hierarchy for the SD-WAN deployment orchestrator."""


class SDWanDeployError(Exception):
    """Base exception for all orchestrator errors.

    All orchestrator-specific exceptions inherit from this class, enabling
    centralized exception handling at the CLI boundary.
    """

    pass


class ConfigError(SDWanDeployError):
    """Exception raised for configuration errors.

    Raised when environment variables, CLI options or the deployment vars
    file cannot be turned into a valid orchestrator configuration.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class DeploymentError(SDWanDeployError):
    """Exception raised when an orchestration step cannot be carried out.

    Covers state file I/O and other faults that are not a plain non-zero
    exit from a playbook.

    Attributes:
        operation: The operation that failed (e.g. "state", "run")
        message: Human-readable error message
    """

    def __init__(self, operation: str, message: str) -> None:
        """Create a deployment error for an operation."""
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class TerminationRequested(SDWanDeployError):
    """Raised from the signal handler when the process is asked to stop.

    Attributes:
        signal_name: Name of the received signal (e.g. "SIGTERM")
        exit_code: Exit code the process should terminate with
    """

    def __init__(self, signal_name: str, exit_code: int) -> None:
        """Create a termination request for a received signal."""
        self.signal_name = signal_name
        self.exit_code = exit_code
        super().__init__(f"Received {signal_name}")
