from .client import close_http_client, get_http_client, post_json
from .errors import TaskRelayHTTPError, TaskRelayHTTPNetworkError, TaskRelayHTTPStatusError

__all__ = [
    "get_http_client",
    "close_http_client",
    "post_json",
    "TaskRelayHTTPError",
    "TaskRelayHTTPNetworkError",
    "TaskRelayHTTPStatusError",
]
