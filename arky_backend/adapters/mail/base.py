from abc import ABC, abstractmethod
from email.message import Message


class AbstractMailTransport(ABC):
    """Interface for anything able to deliver a fully built email."""

    @abstractmethod
    async def send(self, message: Message) -> None:
        """Deliver ``message`` to the recipients in its headers.

        Raises:
            RuntimeError: If delivery fails.
        """
        ...
