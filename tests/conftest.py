import logging

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


logger = logging.getLogger()


def pytest_configure(config):
    """
    pytest 配置完成后、收集测试之前调用。
    使用 -v 运行时把根日志器设置为 DEBUG，方便排查分发循环和文件操作。
    """
    verbose_level = config.getoption("verbose")

    if verbose_level > 0:
        print("\nPytest running in verbose mode, setting log level to DEBUG.")
        logger.setLevel(logging.DEBUG)

        if not logger.handlers:  # 避免重复添加处理器
            handler = logging.StreamHandler()
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            handler.setFormatter(formatter)
            logger.addHandler(handler)
