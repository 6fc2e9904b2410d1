from shared.middleware.request_id import (
    RequestIdLogFilter,
    install_request_id_filter,
    request_id_middleware,
    request_id_var,
)
from shared.middleware.error_handler import (
    error_envelope_middleware,
    error_response,
    install_error_handlers,
)

__all__ = [
    "RequestIdLogFilter",
    "install_request_id_filter",
    "request_id_middleware",
    "request_id_var",
    "error_envelope_middleware",
    "error_response",
    "install_error_handlers",
]
