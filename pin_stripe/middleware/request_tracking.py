"""
Request tracking for webhook endpoints.
Adds X-Request-ID to all responses and logs request details.
"""
import logging
import time
import uuid

from flask import Response, g, request

logger = logging.getLogger(__name__)


def init_request_tracking(app):
    """Initialize request tracking hooks on a Flask app."""

    @app.before_request
    def start_tracking():
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        g.request_id = request_id
        g.start_time = time.time()

        logger.info(
            f"[{request_id}] {request.method} {request.path}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.path,
                'remote_addr': request.remote_addr,
                'content_length': request.content_length,
            }
        )

    @app.after_request
    def finish_tracking(response):
        if hasattr(g, 'request_id'):
            response.headers['X-Request-ID'] = g.request_id
            duration = time.time() - g.start_time if hasattr(g, 'start_time') else 0

            logger.info(
                f"[{g.request_id}] {request.method} {request.path} -> {response.status_code} ({duration:.3f}s)",
                extra={
                    'request_id': g.request_id,
                    'method': request.method,
                    'path': request.path,
                    'status_code': response.status_code,
                    'duration_seconds': duration,
                }
            )
        return response

    @app.errorhandler(500)
    def handle_500(error):
        """Log uncaught handler errors; the sender only sees a short reason."""
        request_id = getattr(g, 'request_id', 'unknown')
        original = getattr(error, 'original_exception', None) or error

        logger.error(
            f"[{request_id}] 500 Internal Server Error: {request.method} {request.path}",
            exc_info=original if isinstance(original, BaseException) else True,
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.path,
                'error_type': type(original).__name__,
            }
        )

        response = Response('internal server error', status=500, mimetype='text/plain')
        response.headers['X-Request-ID'] = request_id
        return response

    return app
