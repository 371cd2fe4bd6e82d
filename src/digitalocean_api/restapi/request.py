"""Request descriptor and response envelope."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .endpoints import ApiAction, RequestMethod


@dataclass(frozen=True)
class ApiRequest:
    """An abstract API call: which endpoint, with which inputs.

    Attributes:
        action: Catalog entry giving path template, verb and result type.
        params: Path parameters, substituted into the template in order.
        page_no: 1-based page number, sent as the ``page`` query parameter.
        data: Request body model for POST/PUT calls.
    """

    action: ApiAction
    params: tuple[Any, ...] = ()
    page_no: int | None = None
    data: BaseModel | None = None

    @property
    def method(self) -> RequestMethod:
        return self.action.method

    @property
    def element_name(self) -> str:
        return self.action.element_name

    @property
    def result_type(self) -> type[BaseModel]:
        return self.action.result_type


@dataclass
class ApiResponse:
    """Decoded outcome of a single call."""

    action: ApiAction
    request_success: bool
    data: bool | BaseModel | None = None
