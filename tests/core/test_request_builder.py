from __future__ import annotations

import json

from pydantic import ValidationError
import pytest

from tabby_inline.core.request_builder import build_request
from tabby_inline.core.types import CompletionRequest


class TestBuildRequest:
    def test_absent_suffix_is_omitted_from_payload(self) -> None:
        request = build_request("python", "def add(a, b):\n    ")

        payload = request.to_payload()

        assert payload == {
            "language": "python",
            "segments": {"prefix": "def add(a, b):\n    "},
        }
        assert "suffix" not in payload["segments"]

    def test_empty_suffix_is_sent_verbatim(self) -> None:
        request = build_request("python", "x = ", "")

        assert request.to_payload()["segments"] == {"prefix": "x = ", "suffix": ""}

    def test_suffix_is_kept_verbatim(self) -> None:
        request = build_request("rust", "fn main() {\n", "\n}\n")

        assert request.to_payload()["segments"]["suffix"] == "\n}\n"

    @pytest.mark.parametrize("suffix", [None, "", "  return x\n"])
    def test_payload_parses_back_to_same_segments(self, suffix: str | None) -> None:
        request = build_request("go", "package main\n", suffix)

        wire = json.loads(json.dumps(request.to_payload()))
        parsed = CompletionRequest.from_payload(wire)

        assert parsed == request
        assert (parsed.prefix, parsed.suffix) == ("package main\n", suffix)

    def test_request_is_immutable(self) -> None:
        request = build_request("python", "a")

        with pytest.raises(ValidationError):
            request.language = "rust"  # type: ignore[misc]
