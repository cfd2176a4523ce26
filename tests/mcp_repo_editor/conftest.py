"""仓库相关测试的公共 fixture"""

import shutil
import tempfile
from pathlib import Path

import git
import pytest

from mcp_repo_editor.filesystem.filesystem_service import FilesystemService
from mcp_repo_editor.repository import RepositoryContext


@pytest.fixture
def temp_dir():
    """创建不属于任何 git 仓库的临时目录"""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir).resolve()
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def repo_dir(temp_dir):
    """在临时目录中初始化一个空的 git 仓库"""
    git.Repo.init(str(temp_dir))
    return temp_dir


@pytest.fixture
def repository(repo_dir):
    return RepositoryContext.open(repo_dir)


@pytest.fixture
def filesystem_service(repository):
    return FilesystemService(repository)


@pytest.fixture
def sample_files(repo_dir):
    """创建测试文件：已暂存、未跟踪、被忽略、子目录中的文件"""
    (repo_dir / ".gitignore").write_text("ignored.txt\nbuild/\n", encoding="utf-8")
    (repo_dir / "README.md").write_text("# Sample\n", encoding="utf-8")
    (repo_dir / "untracked.txt").write_text("untracked\n", encoding="utf-8")
    (repo_dir / "ignored.txt").write_text("ignored\n", encoding="utf-8")
    (repo_dir / "src").mkdir()
    (repo_dir / "src" / "main.py").write_text("print('hello')\n", encoding="utf-8")
    (repo_dir / "build").mkdir()
    (repo_dir / "build" / "out.bin").write_bytes(b"\x00\x01")

    repo = git.Repo(str(repo_dir))
    repo.index.add([".gitignore", "README.md", "src/main.py"])

    return {
        "dir": repo_dir,
        "staged": ["README.md", "src/main.py", ".gitignore"],
        "untracked": ["untracked.txt"],
        "ignored": ["ignored.txt", "build/out.bin"],
    }
