import logging
import random
import threading
from contextlib import contextmanager
from urllib.request import Request as UrlRequest, urlopen
from wsgiref.simple_server import (
    ServerHandler,
    WSGIRequestHandler,
    WSGIServer,
    make_server,
)

import pytest

log = logging.getLogger(__name__)
ServerHandler.handle_error = lambda self: None


class QuietHandler(WSGIRequestHandler):
    def log_request(self, *args):
        pass


class QuietServer(WSGIServer):
    def handle_error(self, request, client_address):
        pass


def _make_test_server(app, attempts=3):
    maxport = (1 << 16) - 1
    for attempt in range(attempts, 0, -1):
        port = random.randint(maxport // 2, maxport)
        try:
            server = make_server(
                'localhost',
                port,
                app,
                server_class=QuietServer,
                handler_class=QuietHandler,
            )
        except OSError:
            if attempt == 1:
                raise
            log.debug('port %d is taken, retrying', port)
            continue
        server.timeout = 5
        return server


@pytest.fixture
def serve():
    """Run a WSGI app in a background thread for the duration of a block."""
    @contextmanager
    def _serve(app):
        server = _make_test_server(app)
        worker = threading.Thread(target=server.serve_forever, daemon=True)
        worker.start()
        server.url = 'http://localhost:%d' % server.server_port
        log.debug('server started on %s', server.url)
        try:
            yield server
        finally:
            server.shutdown()
            server.server_close()
            worker.join(1)
            if worker.is_alive():
                log.warning('worker is hanged')

    return _serve


@pytest.fixture
def fetch():
    """GET a URL with the given request headers and return the body text."""
    def _fetch(url, headers):
        request = UrlRequest(url, headers=headers)
        with urlopen(request, timeout=3) as response:
            return response.read().decode('ascii')

    return _fetch
