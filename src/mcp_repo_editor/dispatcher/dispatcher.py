"""
Command dispatcher: decodes controller messages, routes each call to the
filesystem service and turns the outcome into a result envelope.
"""
from __future__ import annotations

import enum
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Type, Union

import anyio
from pydantic import BaseModel, ValidationError

from ..filesystem.exceptions import RepositoryEditorError
from ..filesystem.filesystem_service import FilesystemService
from .exceptions import TransportError
from .interfaces import IExecutionSink, ITransport
from .models import (
    CreateFileCall,
    DeleteFileCall,
    FunctionCall,
    FunctionResult,
    GetAllFilesCall,
    ModifyFileCall,
    MoveFileCall,
    PrintMessageCall,
    ReadFileCall,
    RequestCall,
    WriteFileCall,
    decode_function_call,
)

logger = logging.getLogger(__name__)


class DispatcherState(str, enum.Enum):
    """
    Enumeration for dispatcher loop states.
    """
    AWAITING = "awaiting"
    EXECUTING = "executing"
    TERMINATED = "terminated"


class CommandDispatcher:
    """
    Executes controller calls one at a time against a repository.

    Every request call yields exactly one FunctionResult. Operation errors are
    reported in the result and never stop the loop; only a closed or failed
    transport, or a ``print_message`` call, ends it.
    """

    def __init__(self, filesystem_service: FilesystemService, sink: IExecutionSink):
        self._filesystem_service = filesystem_service
        self._sink = sink
        self._state = DispatcherState.AWAITING
        self._lock = anyio.Lock()
        self._handlers: Dict[Type[BaseModel], Callable[[Any], Awaitable[Any]]] = {
            GetAllFilesCall: self._get_all_files,
            CreateFileCall: self._create_file,
            WriteFileCall: self._write_file,
            ReadFileCall: self._read_file,
            DeleteFileCall: self._delete_file,
            MoveFileCall: self._move_file,
            ModifyFileCall: self._modify_file,
        }

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def handled_call_types(self) -> tuple:
        return tuple(self._handlers)

    async def _get_all_files(self, call: GetAllFilesCall):
        return await self._filesystem_service.list_files()

    async def _create_file(self, call: CreateFileCall):
        await self._filesystem_service.create_file(call.args.path, call.args.content)
        return None

    async def _write_file(self, call: WriteFileCall):
        return await self._filesystem_service.write_file(call.args.path, call.args.content)

    async def _read_file(self, call: ReadFileCall):
        return await self._filesystem_service.read_file(call.args.path)

    async def _delete_file(self, call: DeleteFileCall):
        await self._filesystem_service.delete_file(call.args.path)
        return None

    async def _move_file(self, call: MoveFileCall):
        await self._filesystem_service.move_file(
            call.args.source_path, call.args.destination_path
        )
        return None

    async def _modify_file(self, call: ModifyFileCall):
        args = call.args
        return await self._filesystem_service.modify_file(
            args.path, args.mode, args.start_line, args.end_line, args.content
        )

    async def execute(self, call: RequestCall) -> FunctionResult:
        """
        Executes one request call and records it to the execution sink.
        A sink failure is logged and does not change the result.

        Args:
            call (RequestCall): The decoded call.

        Returns:
            FunctionResult: Success with the call's payload, or error with a message.

        Raises:
            TypeError: If no handler is registered for the call type.
        """
        handler = self._handlers.get(type(call))
        if handler is None:
            raise TypeError(f"No handler registered for {type(call).__name__}")

        async with self._lock:
            try:
                result = FunctionResult.success(await handler(call))
            except (RepositoryEditorError, OSError) as e:
                logger.warning("Function %s failed: %s", call.function, e)
                result = FunctionResult.error(str(e))
            except Exception as e:
                logger.error("Error executing function %s: %s", call.function, e, exc_info=True)
                result = FunctionResult.error(str(e))
            try:
                self._sink.record(call, result)
            except Exception as e:
                logger.error("Failed to record function %s: %s", call.function, e, exc_info=True)
        return result

    def _decode(self, message: Union[str, bytes]) -> Optional[FunctionCall]:
        if isinstance(message, bytes):
            logger.warning("Received non-text message (%s bytes), skipped", len(message))
            return None
        try:
            return decode_function_call(message)
        except ValidationError as e:
            logger.warning("Failed to decode message: %s\nText: %s", e, message)
            return None

    async def run(self, transport: ITransport) -> None:
        """
        Processes inbound messages until the transport closes or a
        ``print_message`` call arrives.

        Raises:
            TransportError: If the transport fails; the dispatcher is terminated first.
        """
        try:
            while True:
                self._state = DispatcherState.AWAITING
                message = await transport.receive()
                if message is None:
                    logger.info("Transport closed by peer")
                    break

                self._state = DispatcherState.EXECUTING
                call = self._decode(message)
                if call is None:
                    continue
                if isinstance(call, PrintMessageCall):
                    self._sink.show_message(call.args.message)
                    break

                result = await self.execute(call)
                await transport.send(result.model_dump_json())
        except TransportError as e:
            logger.error("Transport failed: %s", e)
            raise
        finally:
            self._state = DispatcherState.TERMINATED
