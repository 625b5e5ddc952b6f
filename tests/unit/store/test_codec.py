"""Unit tests for the document codec."""

import pytest

from ticketctl.store import MalformedDocumentError, decode, encode


@pytest.fixture
def metadata() -> dict:
    """Metadata block shaped like a real ticket."""
    return {
        "id": "TICKET-mgw1x2k3-9f1c2ab4",
        "title": "Fix login bug",
        "status": "backlog",
        "priority": "high",
        "type": "bug",
        "assignee": None,
        "reporter": "alice",
        "labels": ["auth", "auth"],
        "created_at": "2026-01-15T10:30:00.000Z",
        "updated_at": "2026-01-15T10:30:00.000Z",
        "comments": [
            {"author": "bob", "comment": "seen it: twice", "timestamp": "2026-01-15T11:00:00.000Z"}
        ],
    }


@pytest.mark.unit
class TestEncode:
    """Tests for encode."""

    def test_layout(self) -> None:
        """Delimiter, YAML block, delimiter, blank line, body."""
        text = encode({"id": "T-1", "title": "x"}, "Body")

        assert text == "---\nid: T-1\ntitle: x\n---\n\nBody"

    def test_preserves_key_order(self, metadata: dict) -> None:
        text = encode(metadata, "")

        assert list(decode(text)[0]) == list(metadata)
        assert text.index("id:") < text.index("title:") < text.index("comments:")

    def test_long_values_stay_on_one_line(self) -> None:
        """Line folding is disabled so no continuation line can look like a delimiter."""
        text = encode({"title": "word " * 100}, "")

        assert len(text.splitlines()) == 4


@pytest.mark.unit
class TestDecode:
    """Tests for decode."""

    def test_round_trip(self, metadata: dict) -> None:
        """decode(encode(m, b)) returns m and the stripped body."""
        assert decode(encode(metadata, "  Steps to reproduce.\n\n")) == (
            metadata,
            "Steps to reproduce.",
        )

    def test_round_trip_is_byte_identical(self, metadata: dict) -> None:
        text = encode(metadata, "Line one\n\nLine two")

        assert encode(*decode(text)) == text

    def test_timestamps_stay_strings(self, metadata: dict) -> None:
        decoded, _ = decode(encode(metadata, ""))

        assert decoded["created_at"] == "2026-01-15T10:30:00.000Z"

    def test_body_may_contain_delimiter(self, metadata: dict) -> None:
        """Only the first two delimiter lines split the document."""
        body = "Before\n---\nAfter"

        assert decode(encode(metadata, body))[1] == body

    def test_empty_body(self, metadata: dict) -> None:
        assert decode(encode(metadata, ""))[1] == ""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "no delimiters at all",
            "---\nid: T-1\n",
            "id: T-1\n---\nbody\n---\n",
        ],
    )
    def test_missing_delimiters(self, text: str) -> None:
        with pytest.raises(MalformedDocumentError):
            decode(text)

    def test_leading_text_before_block(self) -> None:
        """The metadata block must open the document."""
        with pytest.raises(MalformedDocumentError, match="must start with"):
            decode("preamble\n---\nid: T-1\n---\n\nbody")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(MalformedDocumentError, match="Invalid YAML"):
            decode("---\ntitle: [unclosed\n---\n\nbody")

    @pytest.mark.parametrize("block", ["- a\n- b\n", "", "just a string\n"])
    def test_non_mapping_block(self, block: str) -> None:
        with pytest.raises(MalformedDocumentError, match="mapping"):
            decode(f"---\n{block}---\n\nbody")
