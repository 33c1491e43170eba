"""Tests for junction.routing.params - percent-decoding of captured values."""

import pytest

from junction.errors import HTTPError, ParamDecodeError
from junction.routing import params
from junction.routing.params import decode_component, decode_params


class TestDecodeComponent:
    def test_space(self) -> None:
        assert decode_component("a%20b") == "a b"

    def test_encoded_slash(self) -> None:
        assert decode_component("a%2Fb") == "a/b"

    def test_plus_is_not_space(self) -> None:
        assert decode_component("a+b") == "a+b"

    def test_utf8_sequence(self) -> None:
        assert decode_component("%E2%82%AC5") == "€5"

    def test_lowercase_hex(self) -> None:
        assert decode_component("%c3%a9") == "é"

    def test_no_escapes_returned_unchanged(self) -> None:
        value = "plain-value"
        assert decode_component(value) is value

    @pytest.mark.parametrize("value", ["%", "abc%2", "%zz", "100%"])
    def test_malformed_escape(self, value: str) -> None:
        with pytest.raises(ParamDecodeError):
            decode_component(value)

    def test_invalid_utf8(self) -> None:
        with pytest.raises(ParamDecodeError) as exc_info:
            decode_component("%FF")
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_error_is_http_400(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            decode_component("%zz")
        assert exc_info.value.status == 400
        assert "%zz" in exc_info.value.detail


class TestDecodeParams:
    def test_decodes_each_value(self) -> None:
        assert decode_params({"a": "x%20y", "b": "z"}) == {"a": "x y", "b": "z"}

    def test_falsy_values_pass_through(self) -> None:
        assert decode_params({"empty": "", "absent": None}) == {"empty": "", "absent": None}

    def test_falsy_values_never_reach_decoder(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[str] = []

        def spy(value: str) -> str:
            seen.append(value)
            return value

        monkeypatch.setattr(params, "decode_component", spy)
        decode_params({"empty": "", "absent": None, "full": "v"})
        assert seen == ["v"]

    def test_returns_new_dict(self) -> None:
        groups = {"a": "x%20y"}
        result = decode_params(groups)
        assert result is not groups
        assert groups == {"a": "x%20y"}
