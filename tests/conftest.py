import logging

import pytest

EXAMPLE_LINE = ("29/10/2014 20:31:08.942 (0) A0 A2 00 12 33 06 00 00 00 00 00 00 00 19 "
                "00 00 00 00 00 00 64 E1 01 97 B0 B3")


@pytest.fixture(autouse=True)
def reset_gp2osp_logger():
    yield
    # cli.main 会给 gp2osp logger 挂 handler，测试之间清理掉
    lg = logging.getLogger("gp2osp")
    for h in list(lg.handlers):
        lg.removeHandler(h)
        h.close()
    lg.setLevel(logging.NOTSET)


@pytest.fixture
def example_line():
    return EXAMPLE_LINE
