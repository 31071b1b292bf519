"""
Error types for Rockaf.

Simulation input is clamped or ignored, never rejected. PerformanceError is
reserved for conditions the engine cannot continue from.
"""


class PerformanceError(RuntimeError):
    """Generic runtime failure tagged with a string error code."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}" if message else code)
