from unittest import mock

import pygame
import pytest

from physim.app import main
from physim.engine import Engine


@pytest.fixture
def headless(monkeypatch, tmp_path):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    Engine.get_instance().shutdown()


def test_main_runs_until_quit(headless):
    with mock.patch("pygame.event.get", return_value=[pygame.event.Event(pygame.QUIT)]):
        status = main([])
    assert status == 0
    assert Engine.get_instance().renderer() is None
    text = (headless / "log.txt").read_text(encoding="utf-8")
    assert "Game initialized" in text
    assert "Game loop terminated" in text


def test_main_reports_failed_window(headless):
    with mock.patch("pygame.display.set_mode", side_effect=pygame.error("no display")):
        status = main([])
    assert status == 1
    assert Engine.get_instance().renderer() is None


def test_main_rejects_unknown_arguments(headless):
    with pytest.raises(SystemExit) as info:
        main(["--bogus"])
    assert info.value.code == 2