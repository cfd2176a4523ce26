import pytest
from pydantic import ValidationError

from mcp_repo_editor.dispatcher.models import (
    FunctionResult,
    GetAllFilesCall,
    ModifyFileCall,
    MoveFileCall,
    PrintMessageCall,
    decode_function_call,
)
from mcp_repo_editor.filesystem.models import ModificationMode, ModifyFileResult


def test_decode_modify_file_without_end_line():
    """测试 insert 模式可以省略 end_line"""
    call = decode_function_call(
        '{"function": "modify_file", "args": {"path": "a.txt", "start_line": 3, "content": "x", "mode": "insert"}}'
    )
    assert isinstance(call, ModifyFileCall)
    assert call.args.mode == ModificationMode.INSERT
    assert call.args.end_line is None


def test_decode_get_all_files_without_args():
    assert isinstance(decode_function_call('{"function": "get_all_files"}'), GetAllFilesCall)
    assert isinstance(
        decode_function_call('{"function": "get_all_files", "args": {}}'), GetAllFilesCall
    )


def test_decode_move_and_print_message():
    call = decode_function_call(
        '{"function": "move_file", "args": {"source_path": "a", "destination_path": "b"}}'
    )
    assert isinstance(call, MoveFileCall)
    assert (call.args.source_path, call.args.destination_path) == ("a", "b")

    call = decode_function_call('{"function": "print_message", "args": {"message": "bye"}}')
    assert isinstance(call, PrintMessageCall)
    assert call.args.message == "bye"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "[]",
        '{"args": {"path": "a"}}',
        '{"function": "unknown", "args": {}}',
        '{"function": "create_file", "args": {"path": "a"}}',
        '{"function": "modify_file", "args": {"path": "a", "start_line": "x", "content": "", "mode": "insert"}}',
    ],
)
def test_decode_invalid(text):
    """测试无效消息抛出 ValidationError"""
    with pytest.raises(ValidationError):
        decode_function_call(text)


def test_function_result_success_dumps_models():
    """测试成功结果会把模型数据转换为 JSON 兼容的字典"""
    result = FunctionResult.success(ModifyFileResult(old_contents="a", new_contents="b\n"))
    assert result.is_success
    assert result.data == {"old_contents": "a", "new_contents": "b\n"}
    assert result.model_dump_json() == '{"status":"success","data":{"old_contents":"a","new_contents":"b\\n"}}'


def test_function_result_error():
    result = FunctionResult.error("File does not exist: a.txt")
    assert not result.is_success
    assert result.model_dump() == {"status": "error", "data": "File does not exist: a.txt"}
    assert FunctionResult.success(None).model_dump_json() == '{"status":"success","data":null}'
