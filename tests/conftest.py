import pytest

from sctp_server.config import Config
from sctp_server.flow_control import CancellationToken
from sctp_server.server_state import ServerContext

POLL_TIMEOUT = 0.05


@pytest.fixture
def config() -> Config:
    return Config(host="127.0.0.1", port=0, poll_timeout=POLL_TIMEOUT, send_timeout=0.5)


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture
def context(config: Config) -> ServerContext:
    ctx = ServerContext(config)
    yield ctx
    ctx.close()
