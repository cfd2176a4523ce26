"""
This module defines the interfaces (Protocols) between the command dispatcher
and its external collaborators: the transport that delivers messages and the
sinks that display or audit executed calls.
"""

from __future__ import annotations

from typing import Optional, Protocol, Union, runtime_checkable

from .models import FunctionCall, FunctionResult


@runtime_checkable
class ITransport(Protocol):
    """
    Interface for a message channel to the remote controller.
    """

    async def receive(self) -> Optional[Union[str, bytes]]:
        """
        Waits for the next inbound message.

        Returns:
            Optional[Union[str, bytes]]: The text of the message, raw bytes for a
            non-text message, or None once the channel has been closed by the peer.

        Raises:
            TransportError: If the channel fails.
        """
        ...

    async def send(self, message: str) -> None:
        """
        Sends one outbound text message.

        Args:
            message (str): The serialized result.

        Raises:
            TransportError: If the channel fails.
        """
        ...


@runtime_checkable
class IExecutionSink(Protocol):
    """
    Interface for a consumer of executed calls, used for display and audit.
    """

    def record(self, call: FunctionCall, result: FunctionResult) -> None:
        """
        Records one executed call together with its result.

        Args:
            call (FunctionCall): The decoded call.
            result (FunctionResult): The result produced for the call.
        """
        ...

    def show_message(self, message: str) -> None:
        """
        Shows a message sent by the controller to the local user.

        Args:
            message (str): The message text.
        """
        ...
