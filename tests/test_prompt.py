import re
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from ffmcast.config import BITRATE_PATTERN
from ffmcast.prompt import (
    ANY_PATTERN,
    SELECTION_PATTERN,
    TIMESTAMP_PATTERN,
    SelectionError,
    prompt,
    prompt_track_selection,
    select_track,
    validate_input,
)


class TestValidateInput:
    def test_empty_returns_default(self) -> None:
        assert validate_input("", "128K", BITRATE_PATTERN) == "128K"
        assert validate_input("   ", "128K", BITRATE_PATTERN) == "128K"

    def test_matching_input(self) -> None:
        assert validate_input("256K", "128K", BITRATE_PATTERN) == "256K"
        assert validate_input("2Mib", "128K", BITRATE_PATTERN) == "2Mib"

    def test_non_matching_input(self) -> None:
        assert validate_input("loud", "128K", BITRATE_PATTERN) is None
        assert validate_input("128k", "128K", BITRATE_PATTERN) is None

    @pytest.mark.parametrize("text", ["30", "1:30", "01:30", "1:00:00", "100:00:00"])
    def test_timestamp_pattern_accepts(self, text: str) -> None:
        assert validate_input(text, "00:00:00", TIMESTAMP_PATTERN) == text

    @pytest.mark.parametrize("text", ["1:2:3:4", "abc", "1:", "123"])
    def test_timestamp_pattern_rejects(self, text: str) -> None:
        assert validate_input(text, "00:00:00", TIMESTAMP_PATTERN) is None

    @pytest.mark.parametrize(
        "text,expected", [("-1", "-1"), ("0", "0"), ("12", "12"), ("-2", None)]
    )
    def test_selection_pattern(self, text: str, expected: str | None) -> None:
        assert validate_input(text, "0", SELECTION_PATTERN) == expected


class TestPrompt:
    def test_returns_default(self, scripted_input: Callable[..., Any]) -> None:
        read = scripted_input("")

        assert prompt("Audio Bitrate", "128K", BITRATE_PATTERN, read=read) == "128K"
        assert read.questions == ["Audio Bitrate [128K]: "]

    def test_retries_until_valid(self, scripted_input: Callable[..., Any]) -> None:
        read = scripted_input("fast", "1x", "192K")
        written: list[str] = []

        value = prompt("Audio Bitrate", "128K", BITRATE_PATTERN, read=read, write=written.append)

        assert value == "192K"
        assert len(read.questions) == 3
        assert written == ["WARNING: Invalid input, please try again"] * 2

    def test_any_pattern(self, scripted_input: Callable[..., Any]) -> None:
        read = scripted_input("anything goes")

        assert prompt("Icecast Host", "localhost:8000", ANY_PATTERN, read=read) == "anything goes"

    def test_custom_pattern(self, scripted_input: Callable[..., Any]) -> None:
        read = scripted_input("no", "yes")

        assert prompt("Sure", "yes", re.compile(r"^yes$"), read=read, write=lambda _: None) == "yes"

    @patch("builtins.input")
    def test_reads_from_patched_input(self, mock_input: MagicMock) -> None:
        mock_input.return_value = "256K"

        assert prompt("Audio Bitrate", "128K", BITRATE_PATTERN) == "256K"
        mock_input.assert_called_once_with("Audio Bitrate [128K]: ")

    @patch("builtins.print")
    @patch("builtins.input")
    def test_warns_through_patched_print(
        self, mock_input: MagicMock, mock_print: MagicMock
    ) -> None:
        mock_input.side_effect = ["loud", ""]

        assert prompt("Audio Bitrate", "128K", BITRATE_PATTERN) == "128K"
        mock_print.assert_called_once_with("WARNING: Invalid input, please try again")


class TestSelectTrack:
    def test_minus_one_returns_default(self) -> None:
        assert select_track(["a", "b"], -1, "fallback") == "fallback"
        assert select_track(["a", "b"], -1, None) is None

    def test_selects_by_position(self) -> None:
        assert select_track(["a", "b"], 0, None) == "a"
        assert select_track(["a", "b"], 1, None) == "b"

    @pytest.mark.parametrize("choice", [2, 10, -2])
    def test_out_of_range_fails(self, choice: int) -> None:
        with pytest.raises(SelectionError, match="invalid selection"):
            select_track(["a", "b"], choice, None)

    def test_selection_error_is_index_error(self) -> None:
        with pytest.raises(IndexError):
            select_track([], 0, None)


class TestPromptTrackSelection:
    def test_no_candidates_returns_default(self) -> None:
        def read(_: str) -> str:
            raise AssertionError("should not prompt")

        assert prompt_track_selection("Subtitles", [], "0", None, read=read) is None

    def test_renders_menu(self, scripted_input: Callable[..., Any]) -> None:
        written: list[str] = []

        choice = prompt_track_selection(
            "Audio Stream Selection",
            ["stream #1: audio/aac", "stream #2: audio/ac3"],
            "0",
            None,
            read=scripted_input("1"),
            write=written.append,
        )

        assert choice == "stream #2: audio/ac3"
        assert written == [
            "",
            "Audio Stream Selection",
            "-" * 45,
            "-1: default/none",
            " 0: stream #1: audio/aac",
            " 1: stream #2: audio/ac3",
        ]

    def test_default_choice(self, scripted_input: Callable[..., Any]) -> None:
        choice = prompt_track_selection(
            "Video", ["v0", "v1"], "0", "v0", read=scripted_input(""), write=lambda _: None
        )

        assert choice == "v0"

    def test_minus_one_returns_default(self, scripted_input: Callable[..., Any]) -> None:
        choice = prompt_track_selection(
            "Subtitles", ["s0"], "0", None, read=scripted_input("-1"), write=lambda _: None
        )

        assert choice is None

    def test_out_of_range_asks_again(self, scripted_input: Callable[..., Any]) -> None:
        read = scripted_input("5", "0")
        written: list[str] = []

        choice = prompt_track_selection("Video", ["v0"], "0", None, read=read, write=written.append)

        assert choice == "v0"
        assert len(read.questions) == 2
        assert written[-1].startswith("WARNING: invalid selection (5)")
