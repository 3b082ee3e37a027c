"""Per-repository capture outcomes."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class CaptureSuccess:
    """Screenshot written to ``path``."""

    repository: str
    path: Path

    @property
    def captured(self) -> bool:
        return True


@dataclass(frozen=True)
class SkippedBadResponse:
    """Navigation returned no response or a non-2xx status."""

    repository: str
    url: str
    status: Optional[int] = None

    @property
    def captured(self) -> bool:
        return False


@dataclass(frozen=True)
class SkippedError:
    """An exception interrupted navigation or capture."""

    repository: str
    error: str

    @property
    def captured(self) -> bool:
        return False


CaptureResult = Union[CaptureSuccess, SkippedBadResponse, SkippedError]
