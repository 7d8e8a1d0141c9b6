"""
Raw request body caching for webhook routes.

Signature verification needs the exact bytes Stripe signed. This WSGI
middleware reads the body of requests to configured webhook paths, keeps
the chunks in receipt order under ``environ['pin_stripe.raw_body']`` and
puts an equivalent stream back so Flask can still parse the request.
"""
import io
import logging

from werkzeug.exceptions import RequestEntityTooLarge

from ..config import normalize_path
from ..constants import DEFAULT_WEBHOOK_PATH, RAW_BODY_ENVIRON_KEY

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def read_body_chunks(environ, chunk_size=CHUNK_SIZE, max_length=None):
    """
    Read the whole request body from a WSGI environ as a list of chunks.

    Raises:
        RequestEntityTooLarge: If the body is longer than max_length bytes
    """
    stream = environ.get('wsgi.input')
    if stream is None:
        return []

    length = environ.get('CONTENT_LENGTH')
    chunks = []
    if length:
        try:
            remaining = int(length)
        except ValueError:
            remaining = 0
        if max_length is not None and remaining > max_length:
            raise RequestEntityTooLarge()
        while remaining > 0:
            chunk = stream.read(min(chunk_size, remaining))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
    elif environ.get('wsgi.input_terminated'):
        # Chunked transfer encoding, read until the server signals EOF
        received = 0
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            received += len(chunk)
            if max_length is not None and received > max_length:
                raise RequestEntityTooLarge()
            chunks.append(chunk)
    return chunks


class RawBodyMiddleware:
    """WSGI middleware caching raw bodies for webhook paths only."""

    def __init__(self, wsgi_app, paths=(DEFAULT_WEBHOOK_PATH,), chunk_size=CHUNK_SIZE,
                 max_content_length=None):
        self.wsgi_app = wsgi_app
        self.paths = frozenset(normalize_path(p) for p in paths)
        self.chunk_size = chunk_size
        self.max_content_length = max_content_length

    def is_webhook_path(self, path):
        return normalize_path(path or '/') in self.paths

    def __call__(self, environ, start_response):
        if self.is_webhook_path(environ.get('PATH_INFO')):
            try:
                chunks = read_body_chunks(environ, self.chunk_size, self.max_content_length)
            except RequestEntityTooLarge as exc:
                logger.warning(f"Rejected webhook body over {self.max_content_length} bytes on {environ.get('PATH_INFO')}")
                return exc(environ, start_response)
            body = b''.join(chunks)
            environ[RAW_BODY_ENVIRON_KEY] = chunks
            environ['wsgi.input'] = io.BytesIO(body)
            environ['CONTENT_LENGTH'] = str(len(body))
            logger.debug(f"Cached {len(body)} raw body bytes in {len(chunks)} chunk(s) for {environ.get('PATH_INFO')}")
        return self.wsgi_app(environ, start_response)


def init_raw_body(app, paths=(DEFAULT_WEBHOOK_PATH,)):
    """
    Install raw body caching on a Flask app for the given webhook paths.

    Bodies are limited to the app's MAX_CONTENT_LENGTH, read when installed.
    """
    app.wsgi_app = RawBodyMiddleware(
        app.wsgi_app, paths, max_content_length=app.config.get('MAX_CONTENT_LENGTH')
    )
    return app


def get_raw_body(request):
    """
    Return the untouched request body.

    Uses the chunks cached by RawBodyMiddleware when present, otherwise the
    body Flask buffered itself.
    """
    chunks = request.environ.get(RAW_BODY_ENVIRON_KEY)
    if chunks is not None:
        return b''.join(chunks)
    return request.get_data(cache=True)
