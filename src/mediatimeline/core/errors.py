"""Exception hierarchy for timeline construction, compilation and execution."""

from typing import Optional


class TimelineError(Exception):
    """Base exception for mediatimeline errors."""

    pass


class ConstructionError(TimelineError, ValueError):
    """Exception raised when a builder call receives invalid arguments."""

    pass


class SerializationError(TimelineError, ValueError):
    """Exception raised when a timeline document has the wrong shape."""

    pass


class UnknownEffectError(TimelineError):
    """Exception raised when a filter layer names an unregistered effect."""

    def __init__(self, effect: str, layer_index: Optional[int] = None):
        if layer_index is None:
            message = f"Unknown effect '{effect}'"
        else:
            message = f"Unknown effect '{effect}' in layer {layer_index}"
        super().__init__(message)
        self.effect = effect
        self.layer_index = layer_index


class EngineError(TimelineError):
    """Exception raised when the external engine exits unsuccessfully."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class EffectParameterError(TimelineError):
    """Exception raised when an effect cannot be built from a filter layer's params."""

    def __init__(self, effect: str, layer_index: int, detail: str):
        super().__init__(f"Invalid parameters for effect '{effect}' in layer {layer_index}: {detail}")
        self.effect = effect
        self.layer_index = layer_index
        self.detail = detail
