import io
import sys

import pytest
from freezegun import freeze_time

from icache import logger


class _FakeTTY(io.StringIO):
    def isatty(self) -> bool:
        return True


@freeze_time("2024-03-05 06:07:08")
def test_get_now_format():
    assert logger.get_now() == "2024-03-05 06:07:08"


@freeze_time("2024-03-05 06:07:08")
def test_info_plain_output(capsys):
    logger.info("Server initialized")
    out = capsys.readouterr().out
    assert out == "[INFO]:  2024-03-05 06:07:08 * Server initialized\n"


@freeze_time("2024-03-05 06:07:08")
def test_warning_plain_output(capsys):
    logger.warning("disk nearly full")
    out = capsys.readouterr().out
    assert out == "[WARNING]:  2024-03-05 06:07:08 * disk nearly full\n"


@freeze_time("2024-03-05 06:07:08")
def test_info_coloured_on_tty(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    fake = _FakeTTY()
    monkeypatch.setattr(sys, "stdout", fake)
    logger.info("ready")
    out = fake.getvalue()
    assert out.startswith("\x1b[32m[INFO]: \x1b[0m ")
    assert "2024-03-05 06:07:08 * ready" in out


@pytest.mark.parametrize("func", [logger.info, logger.warning])
def test_no_color_disables_escape_codes(monkeypatch, func):
    monkeypatch.setenv("NO_COLOR", "1")
    fake = _FakeTTY()
    monkeypatch.setattr(sys, "stdout", fake)
    func("message")
    out = fake.getvalue()
    assert "\x1b" not in out
    assert out.endswith(" * message\n")