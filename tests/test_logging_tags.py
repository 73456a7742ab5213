"""Tests for the tagged, colour-optional log helpers."""

import pytest

from tilechase.logging_utils import (
    LOG_TAG_DETERMINISTIC,
    LOG_TAG_ERROR,
    LOG_TAG_INFO,
    LOG_TAG_SPEECH,
    LOG_TAG_SUCCESS,
    Color,
    colored,
    log_deterministic,
    log_error,
    log_info,
    log_speech,
    log_success,
)


@pytest.mark.parametrize(
    "log,tag",
    [
        (log_deterministic, LOG_TAG_DETERMINISTIC),
        (log_speech, LOG_TAG_SPEECH),
        (log_error, LOG_TAG_ERROR),
        (log_success, LOG_TAG_SUCCESS),
        (log_info, LOG_TAG_INFO),
    ],
)
def test_each_helper_prefixes_its_tag(monkeypatch, capsys, log, tag):
    monkeypatch.setenv("TILECHASE_NO_COLOR", "1")

    log("hook check")

    assert capsys.readouterr().out == f"{tag} hook check\n"


def test_colour_codes_wrap_text_unless_disabled(monkeypatch):
    monkeypatch.delenv("TILECHASE_NO_COLOR", raising=False)
    assert colored("gp", Color.RED, bold=True) == f"{Color.BOLD.value}{Color.RED.value}gp{Color.RESET.value}"

    monkeypatch.setenv("TILECHASE_NO_COLOR", "1")
    assert colored("gp", Color.RED) == "gp"
