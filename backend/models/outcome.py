from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from errors import ErrorKind


class Classification(str, Enum):
    RETRYABLE = "retryable"   # try the next candidate
    FATAL = "fatal"           # stop and surface to the caller


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class Failure:
    classification: Classification
    message: str
    status: Optional[int] = None
    kind: ErrorKind = ErrorKind.UNKNOWN

    @property
    def retryable(self) -> bool:
        return self.classification is Classification.RETRYABLE


InvocationOutcome = Union[Success, Failure]
