from __future__ import annotations


class FirstbootError(RuntimeError):
    """Base class for every fatal condition raised by firstboot."""


class UnknownFlagError(FirstbootError, ValueError):
    def __init__(self, spelling: str) -> None:
        super().__init__(f"Unknown flag: {spelling}")
        self.spelling = spelling


class ConfigError(FirstbootError, ValueError):
    pass


class UnsupportedPlatformError(FirstbootError):
    pass


class PhaseError(FirstbootError):
    def __init__(self, phase_id: str, cause: BaseException) -> None:
        super().__init__(f"Phase {phase_id} failed: {cause}")
        self.phase_id = phase_id
        self.cause = cause
