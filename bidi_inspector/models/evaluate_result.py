"""Results of script.evaluate and script.callFunction."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from ..errors import DeserializationError
from .log_entry import StackTrace
from .remote_value import RemoteValue


class EvaluateResultType(Enum):
    SUCCESS = "success"
    EXCEPTION = "exception"


@dataclass(frozen=True)
class ExceptionDetails:
    text: str
    line_number: int
    column_number: int
    exception: Optional[RemoteValue] = None
    stack_trace: Optional[StackTrace] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ExceptionDetails":
        exception = raw.get("exception")
        stack_trace = raw.get("stackTrace")
        return cls(
            text=raw.get("text", ""),
            line_number=raw.get("lineNumber", 0),
            column_number=raw.get("columnNumber", 0),
            exception=RemoteValue.from_dict(exception) if exception is not None else None,
            stack_trace=StackTrace.from_dict(stack_trace) if stack_trace is not None else None,
        )


@dataclass(frozen=True)
class EvaluateResult:
    """Outcome of a script evaluation in a realm.

    ``result`` is set on success, ``exception_details`` when the script threw.
    """

    result_type: EvaluateResultType
    realm_id: Optional[str] = None
    result: Optional[RemoteValue] = None
    exception_details: Optional[ExceptionDetails] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EvaluateResult":
        try:
            result_type = EvaluateResultType(raw["type"])
        except (KeyError, ValueError) as e:
            raise DeserializationError(f"Invalid evaluate result: {raw!r}") from e

        if result_type is EvaluateResultType.SUCCESS:
            if "result" not in raw:
                raise DeserializationError(f"Success result without a value: {raw!r}")
            return cls(
                result_type=result_type,
                realm_id=raw.get("realm"),
                result=RemoteValue.from_dict(raw["result"]),
            )
        return cls(
            result_type=result_type,
            realm_id=raw.get("realm"),
            exception_details=ExceptionDetails.from_dict(raw.get("exceptionDetails") or {}),
        )

    @property
    def is_success(self) -> bool:
        return self.result_type is EvaluateResultType.SUCCESS
