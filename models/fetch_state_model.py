# ==========================
# Fetch State Model
# ==========================
from enum import Enum
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar('T')

class FetchStatus(str, Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    SUCCESS = 'success'
    ERROR = 'error'

class FetchState(BaseModel, Generic[T]):
    """
    Immutable snapshot of one resource's retrieval lifecycle

    value is set only in SUCCESS, error_message only in ERROR;
    both are None while IDLE or LOADING.
    """
    model_config = ConfigDict(frozen=True)

    status: FetchStatus = Field(FetchStatus.IDLE, description="idle, loading, success or error")
    value: Optional[T] = Field(None, description="Fetched value when status is success")
    error_message: Optional[str] = Field(None, description="Failure description when status is error")

    @model_validator(mode='after')
    def _check_consistency(self):
        if self.status == FetchStatus.SUCCESS:
            if self.value is None or self.error_message is not None:
                raise ValueError("success state requires a value and no error message")
        elif self.status == FetchStatus.ERROR:
            if self.error_message is None or self.value is not None:
                raise ValueError("error state requires an error message and no value")
        elif self.value is not None or self.error_message is not None:
            raise ValueError(f"{self.status.value} state carries neither value nor error message")
        return self

    @classmethod
    def idle(cls) -> "FetchState[T]":
        return cls(status=FetchStatus.IDLE)

    @classmethod
    def loading(cls) -> "FetchState[T]":
        return cls(status=FetchStatus.LOADING)

    @classmethod
    def success(cls, value: T) -> "FetchState[T]":
        return cls(status=FetchStatus.SUCCESS, value=value)

    @classmethod
    def error(cls, message: str) -> "FetchState[T]":
        return cls(status=FetchStatus.ERROR, error_message=message)

    @property
    def is_idle(self) -> bool:
        return self.status == FetchStatus.IDLE

    @property
    def is_loading(self) -> bool:
        return self.status == FetchStatus.LOADING

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == FetchStatus.ERROR
