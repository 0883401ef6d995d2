from abc import ABC, abstractmethod

from .flow_control import CancellationToken
from .server_state import ServerContext


class TransportMode(ABC):
    """
    One SCTP socket style. The server picks one at startup and calls run_once() until it is stopped.
    """

    name: str
    socket_type: int

    def prepare(self, ctx: ServerContext) -> None:
        """Socket options needed once the socket is bound, before the first run_once()."""

    @abstractmethod
    async def run_once(self, ctx: ServerContext, token: CancellationToken) -> bool:
        """
        Service the socket until the token is cancelled or a session ends.
        Returns False when the socket is no longer usable and the server has to stop.
        """
        raise NotImplementedError
