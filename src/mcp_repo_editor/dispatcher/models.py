"""
This module defines the Pydantic data models for the controller message
contract: inbound function calls and outbound results.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from ..filesystem.models import ModificationMode


class GetAllFilesArgs(BaseModel):
    """Arguments of ``get_all_files`` (none)."""


class CreateFileArgs(BaseModel):
    path: str = Field(..., description="Path of the new file, relative to the repository root")
    content: str = Field(..., description="Content written verbatim to the file")


class WriteFileArgs(BaseModel):
    path: str = Field(..., description="Path of the file, relative to the repository root")
    content: str = Field(..., description="Content that replaces the file")


class ReadFileArgs(BaseModel):
    path: str = Field(..., description="Path of the file, relative to the repository root")


class DeleteFileArgs(BaseModel):
    path: str = Field(..., description="Path of the file, relative to the repository root")


class MoveFileArgs(BaseModel):
    source_path: str = Field(..., description="Current path, relative to the repository root")
    destination_path: str = Field(..., description="New path, relative to the repository root")


class ModifyFileArgs(BaseModel):
    path: str = Field(..., description="Path of the file, relative to the repository root")
    start_line: int = Field(..., description="First line of the edit (1-based, inclusive)")
    end_line: Optional[int] = Field(
        None, description="Last replaced line (1-based, inclusive); required in replace mode"
    )
    content: str = Field(..., description="Lines to insert, may span several lines")
    mode: ModificationMode = Field(..., description="insert or replace")


class PrintMessageArgs(BaseModel):
    message: str = Field(..., description="Message shown to the local user")


class GetAllFilesCall(BaseModel):
    function: Literal["get_all_files"] = "get_all_files"
    args: GetAllFilesArgs = Field(default_factory=GetAllFilesArgs)


class CreateFileCall(BaseModel):
    function: Literal["create_file"] = "create_file"
    args: CreateFileArgs


class WriteFileCall(BaseModel):
    function: Literal["write_file"] = "write_file"
    args: WriteFileArgs


class ReadFileCall(BaseModel):
    function: Literal["read_file"] = "read_file"
    args: ReadFileArgs


class DeleteFileCall(BaseModel):
    function: Literal["delete_file"] = "delete_file"
    args: DeleteFileArgs


class MoveFileCall(BaseModel):
    function: Literal["move_file"] = "move_file"
    args: MoveFileArgs


class ModifyFileCall(BaseModel):
    function: Literal["modify_file"] = "modify_file"
    args: ModifyFileArgs


class PrintMessageCall(BaseModel):
    function: Literal["print_message"] = "print_message"
    args: PrintMessageArgs


RequestCall = Union[
    GetAllFilesCall,
    CreateFileCall,
    WriteFileCall,
    ReadFileCall,
    DeleteFileCall,
    MoveFileCall,
    ModifyFileCall,
]
"""Calls that always produce exactly one result."""

FunctionCall = Annotated[
    Union[RequestCall, PrintMessageCall],
    Field(discriminator="function"),
]

_function_call_adapter: TypeAdapter = TypeAdapter(FunctionCall)


def decode_function_call(text: Union[str, bytes]) -> FunctionCall:
    """
    Decode one inbound JSON message into a function call.

    Raises:
        pydantic.ValidationError: If the message is not valid JSON or does not
            match any known function.
    """
    return _function_call_adapter.validate_json(text)


class FunctionResult(BaseModel):
    """
    Result envelope sent back for every request call.
    """
    status: Literal["success", "error"] = Field(..., description="Outcome of the call")
    data: Any = Field(None, description="Payload on success, error message on error")

    @classmethod
    def success(cls, data: Any) -> "FunctionResult":
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")
        return cls(status="success", data=data)

    @classmethod
    def error(cls, message: str) -> "FunctionResult":
        return cls(status="error", data=message)

    @property
    def is_success(self) -> bool:
        return self.status == "success"
