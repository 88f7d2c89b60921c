"""Exception hierarchy for the fault monitor."""


class FaultMonitorError(RuntimeError):
    pass


class MonitorSetupError(FaultMonitorError):
    """Raised when the monitor cannot be brought up in a usable state."""


class OutputRetrievalError(FaultMonitorError):
    """Raised when an output proposal cannot be read from the oracle."""

    def __init__(self, index: int, cause: BaseException) -> None:
        super().__init__(f"failed to query output index {index}: {cause}")
        self.index = index
