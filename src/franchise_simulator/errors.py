from __future__ import annotations


class SimulatorError(Exception):
    """Base class for validation failures raised by the simulator."""


class InvalidParameterSet(SimulatorError):
    pass


class InvalidHorizon(SimulatorError):
    pass


class InvalidParameter(SimulatorError):
    pass


class StoreAddRejected(SimulatorError):
    def __init__(self, month: int, reason: str) -> None:
        super().__init__(reason)
        self.month = month
        self.reason = reason


class StoreRemoveRejected(SimulatorError):
    def __init__(self, month: int, reason: str) -> None:
        super().__init__(reason)
        self.month = month
        self.reason = reason
