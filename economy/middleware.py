import logging

logger = logging.getLogger(__name__)

LOGGED_CONTENT_TYPES = ("application/json", "text/")
MAX_LOGGED_BODY = 2000


def _truncate(text):
    if len(text) > MAX_LOGGED_BODY:
        return text[:MAX_LOGGED_BODY] + "...<truncated>"
    return text


class RequestResponseLoggingMiddleware:
    """
    Logs every API call: method, path and body on the way in, status and
    body on the way out. Bodies are truncated; uploads and binary
    responses are summarised instead.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_body = ""
        content_type = request.META.get("CONTENT_TYPE", "")

        if "multipart/form-data" in content_type:
            request_body = "<multipart body not logged>"
        elif request.method in ("POST", "PUT", "PATCH") and request.body:
            try:
                request_body = _truncate(request.body.decode("utf-8"))
            except UnicodeDecodeError:
                request_body = "<undecodable body>"

        logger.info("API request: %s %s body=%s", request.method, request.get_full_path(), request_body)

        response = self.get_response(request)

        response_type = response.get("Content-Type", "")
        if getattr(response, "streaming", False):
            response_content = "<streaming content>"
        elif response_type.startswith(LOGGED_CONTENT_TYPES):
            try:
                response_content = _truncate(response.content.decode("utf-8"))
            except UnicodeDecodeError:
                response_content = "<undecodable content>"
        else:
            response_content = f"<Content-Type: {response_type}>"

        logger.info(
            "API response: %s %s status=%s body=%s",
            request.method,
            request.get_full_path(),
            response.status_code,
            response_content,
        )
        return response
