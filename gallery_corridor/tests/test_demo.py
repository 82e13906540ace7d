"""Headless demo harness tests."""
from __future__ import annotations

import argparse

import pytest

from gallery_corridor.demo import main, parse_args, viewport_value


def test_demo_prints_one_line_per_second(capsys) -> None:
    assert main(["--seconds", "2", "--fps", "30", "--seed", "3"]) == 0
    output = capsys.readouterr().out.splitlines()
    assert output[0] == "Tier: full_3d mode=corridor"
    assert output[1] == "Loop length: 10000 over 20 rows"
    assert len([line for line in output if line.startswith("t=")]) == 3


def test_demo_boosts_on_narrow_viewport(capsys) -> None:
    main(["--seconds", "1", "--viewport", "375x812", "--boost-every", "0.1", "--seed", "1"])
    output = capsys.readouterr().out.splitlines()
    assert output[0] == "Tier: simplified_2d mode=strips"
    assert "speed=x1.00" not in output[-1]


def test_viewport_argument_validation() -> None:
    assert viewport_value("640x480") == (640, 480)
    with pytest.raises(argparse.ArgumentTypeError):
        viewport_value("0x480")
    with pytest.raises(SystemExit):
        parse_args(["--seconds", "-1"])


# //1.- Sub-hertz frame rates still print a summary on every frame.
def test_demo_handles_fractional_frame_rate(capsys) -> None:
    assert main(["--seconds", "4", "--fps", "0.5", "--seed", "1"]) == 0
    output = capsys.readouterr().out.splitlines()
    assert len([line for line in output if line.startswith("t=")]) == 3


# //2.- A boost interval shorter than one frame boosts every frame instead of never.
def test_short_boost_interval_still_boosts(capsys) -> None:
    main(["--seconds", "1", "--fps", "30", "--boost-every", "0.01", "--seed", "2"])
    output = capsys.readouterr().out.splitlines()
    assert "speed=x1.00" not in output[-1]
