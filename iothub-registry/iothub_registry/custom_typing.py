# --------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union
from typing_extensions import Protocol, TypedDict


# typing does not support recursion, so we must use forward references here (PEP484)
JSONSerializable = Union[
    Dict[str, "JSONSerializable"],
    List["JSONSerializable"],
    Tuple["JSONSerializable", ...],
    str,
    int,
    float,
    bool,
    None,
]


class ServiceErrorBody(TypedDict, total=False):
    Message: str
    ExceptionMessage: str
    message: str
    error: str


class Transport(Protocol):
    """Anything that can send an HTTPRequest and return an HTTPResponse.

    The send method may be a function or a coroutine function.
    """

    def send(self, request: Any) -> Any:
        ...


# (continuation token, timeout) -> (page items, next continuation token)
PageFetcher = Callable[
    [Optional[str], Optional[float]], Awaitable[Tuple[List[JSONSerializable], Optional[str]]]
]
