from fastapi import Request


def request_path(request: Request) -> str:
    """Absolute URL of the request without its query string."""
    return str(request.url.replace(query=""))
