"""Response classification."""

import httpx

from ...exceptions import error_for_status


def is_success(status_code: int) -> bool:
    """Check if a status code is in the 2xx range.

    :param status_code: HTTP status code
    :type status_code: int
    :return: True if status code is in 200-299 range
    :rtype: bool
    """
    return 200 <= status_code < 300


def check_response(response: httpx.Response) -> None:
    """Raise if the response does not carry a success status.

    The body must already be read.

    :param response: Response whose body has been read
    :type response: httpx.Response
    :raises HTTPStatusError: For any status outside 2xx, as the subclass
                             matching the status code when there is one
    """
    if is_success(response.status_code):
        return
    body = response.content.decode("utf-8", "replace")
    raise error_for_status(response.status_code, body)
