import pytest

from repoview.comments import CommentAnchor, is_valid_anchor
from repoview.exceptions import CommentValidationError


class TestIsValidAnchor:
    @pytest.mark.parametrize("text", ["0L10", "12L3", "0L0", "007L01"])
    def test_accepts_side_and_line(self, text: str) -> None:
        assert is_valid_anchor(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "L5",
            "5L",
            "1l2",
            " 1L2",
            "1L2 ",
            "1L2\n",
            "1L2L3",
            "-1L2",
            "١L2",
        ],
    )
    def test_rejects_everything_else(self, text: str) -> None:
        assert is_valid_anchor(text) is False


class TestCommentAnchor:
    def test_parse_splits_side_and_line(self) -> None:
        anchor = CommentAnchor.parse("1L42")

        assert anchor.side == 1
        assert anchor.line == 42

    def test_str_keeps_original_text(self) -> None:
        assert str(CommentAnchor.parse("007L01")) == "007L01"

    def test_invalid_anchor_raises_validation_error(self) -> None:
        with pytest.raises(CommentValidationError) as exc_info:
            _ = CommentAnchor.parse("line 5")

        assert exc_info.value.field == "line"
        assert exc_info.value.value == "line 5"

    @pytest.mark.parametrize(
        "text", ["1" * 5000 + "L1", "0L" + "9" * 5000], ids=["side", "line"]
    )
    def test_oversized_numbers_raise_validation_error(self, text: str) -> None:
        assert is_valid_anchor(text)

        with pytest.raises(CommentValidationError) as exc_info:
            _ = CommentAnchor.parse(text)

        assert exc_info.value.field == "line"
        assert exc_info.value.value == text
