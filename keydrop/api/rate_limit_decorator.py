"""
Rate Limit Decorator

Applies the per-IP upload and download budgets to Flask routes.
"""

import time
from datetime import datetime
from functools import wraps
from typing import Optional

from flask import current_app, make_response, request

from keydrop.domain.errors import RateLimitExceededError, create_error_response


def rate_limit(limit_type: str):
    """
    Limit a route to the per-IP ``limit_type`` budget.

    Consumes one request from the client's ``limit_type`` budget. Successful
    responses carry X-RateLimit-* headers; an exhausted budget returns 429.

    Usage:
        @rate_limit("upload")
        def post(self):
            pass
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            rate_limit_service = _get_rate_limit_service()

            # No Redis, no limits
            if not rate_limit_service:
                return f(*args, **kwargs)

            client_ip = _extract_client_ip(request)

            try:
                state = rate_limit_service.check_limit(client_ip, limit_type)
            except RateLimitExceededError as e:
                current_app.logger.info(f"Rate limit exceeded for {limit_type}")
                body, status_code = create_error_response(e.message, e.status_code)
                return body, status_code, _headers_from_context(e.context)
            except ValueError as e:
                # Unparseable client address; let the request through
                current_app.logger.warning(f"Rate limit check skipped: {e}")
                state = None

            response = make_response(f(*args, **kwargs))
            if state is not None:
                response.headers.update(state.headers())
            return response

        return decorated_function
    return decorator


def _headers_from_context(context: Optional[dict]) -> dict:
    headers = {"X-RateLimit-Remaining": "0"}
    if not context:
        return headers

    if "limit" in context:
        headers["X-RateLimit-Limit"] = str(context["limit"])
    if "reset_at" in context:
        reset_ts = int(datetime.fromisoformat(context["reset_at"]).timestamp())
        headers["X-RateLimit-Reset"] = str(reset_ts)
        headers["Retry-After"] = str(max(0, reset_ts - int(time.time())))
    return headers


def _extract_client_ip(request) -> str:
    """
    First X-Forwarded-For hop when behind a proxy, else the socket peer.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return request.remote_addr or "127.0.0.1"


def _get_rate_limit_service():
    """The registered RateLimitService, or None when the app runs without Redis."""
    container = getattr(current_app, "container", None)
    if container is None:
        return None

    from keydrop.application.rate_limit_service import RateLimitService
    if not container.is_registered(RateLimitService):
        return None
    return container.resolve(RateLimitService)
