"""Backend API client, request descriptors and transports."""

from .client import ApiClient
from .errors import ApiError
from .requests import ApiRequest, Operation, UploadFile
from .transport import Transport, create_transport

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiRequest",
    "Operation",
    "UploadFile",
    "Transport",
    "create_transport",
]
