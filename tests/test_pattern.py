"""Tests for junction.routing.pattern - path template compilation and matching."""

import pytest

from junction.errors import ConfigurationError, PatternError
from junction.routing.pattern import Pattern, compile_pattern, pathname_of


class TestPathnameOf:
    def test_bare_path(self) -> None:
        assert pathname_of("/users/42") == "/users/42"

    def test_strips_query_and_fragment(self) -> None:
        assert pathname_of("/users/42?tab=posts#top") == "/users/42"

    def test_absolute_url(self) -> None:
        assert pathname_of("https://example.com:8443/users/42?x=1") == "/users/42"

    def test_absolute_url_without_path(self) -> None:
        assert pathname_of("http://example.com") == "/"

    def test_keeps_existing_escapes(self) -> None:
        assert pathname_of("/items/a%2Fb") == "/items/a%2Fb"

    def test_encodes_non_ascii_and_spaces(self) -> None:
        assert pathname_of("/café menu") == "/caf%C3%A9%20menu"

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("http://h/user/../admin", "/admin"),
            ("/user/../admin", "/admin"),
            ("/a/./b", "/a/b"),
            ("/a/b/..", "/a/"),
            ("/a/.", "/a/"),
            ("/../../etc", "/etc"),
            ("/a/%2E%2e/b", "/b"),
            ("/a/.%2E/b", "/b"),
            ("/a/..b/c", "/a/..b/c"),
        ],
    )
    def test_resolves_dot_segments(self, url: str, expected: str) -> None:
        assert pathname_of(url) == expected

    def test_backslash_is_separator_for_http(self) -> None:
        assert pathname_of("http://h/a\\b") == "/a/b"
        assert pathname_of("/a\\..\\b") == "/b"

    def test_non_special_scheme_keeps_path(self) -> None:
        assert pathname_of("app://h/a/../b") == "/a/../b"

    def test_dots_in_query_untouched(self) -> None:
        assert pathname_of("/a/b?next=../c") == "/a/b"


class TestCompile:
    def test_returns_pattern(self) -> None:
        pattern = compile_pattern("/users")
        assert isinstance(pattern, Pattern)
        assert pattern.template == "/users"
        assert pattern.names == ()

    def test_named_params_in_order(self) -> None:
        pattern = compile_pattern("/users/:user_id/posts/:post_id")
        assert pattern.names == ("user_id", "post_id")

    def test_anonymous_groups_numbered(self) -> None:
        pattern = compile_pattern("/a/(\\d+)/b/*")
        assert pattern.names == ("0", "1")

    def test_frozen(self) -> None:
        pattern = compile_pattern("/users")
        with pytest.raises(AttributeError):
            pattern.template = "/other"  # type: ignore[misc]


class TestCompileErrors:
    @pytest.mark.parametrize(
        ("template", "fragment"),
        [
            ("/users/:", "missing parameter name"),
            ("/users/:/x", "missing parameter name"),
            ("/files/(.*", "unbalanced"),
            ("/files/()", "empty regex"),
            ("/x/:id/y/:id", "duplicate parameter name 'id'"),
            ("/x/:id((a|b))", "capturing groups"),
            ("/x/([)", "invalid regex"),
            ("/users?", "does not follow a parameter"),
            ("/users/+", "does not follow a parameter"),
            ("/trailing\\", "dangling escape"),
            ("/{optional}?", "group braces"),
        ],
    )
    def test_invalid_template(self, template: str, fragment: str) -> None:
        with pytest.raises(PatternError) as exc_info:
            compile_pattern(template)
        assert fragment in str(exc_info.value)
        assert exc_info.value.template == template

    def test_pattern_error_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_pattern("/:")


class TestLiteral:
    def test_exact_match(self) -> None:
        pattern = compile_pattern("/api/v2/users")
        assert pattern.test("/api/v2/users")
        assert not pattern.test("/api/v2/users/1")
        assert not pattern.test("/api/v2")

    def test_root(self) -> None:
        pattern = compile_pattern("/")
        assert pattern.test("/")
        assert pattern.test("http://example.com/")
        assert not pattern.test("/x")

    def test_trailing_slash_is_significant(self) -> None:
        pattern = compile_pattern("/users")
        assert not pattern.test("/users/")

    def test_case_sensitive(self) -> None:
        assert not compile_pattern("/users").test("/Users")

    def test_regex_metacharacters_are_literal(self) -> None:
        pattern = compile_pattern("/v1.0/a|b")
        assert pattern.test("/v1.0/a|b")
        assert not pattern.test("/v1x0/a|b")

    def test_escaped_colon(self) -> None:
        pattern = compile_pattern("/time\\:now")
        assert pattern.names == ()
        assert pattern.test("/time:now")

    def test_non_ascii_literal_matches_encoded_path(self) -> None:
        pattern = compile_pattern("/café")
        assert pattern.test("/caf%C3%A9")
        assert pattern.test("/café")

    def test_query_string_ignored(self) -> None:
        assert compile_pattern("/search").test("/search?q=router")

    def test_dot_segments_resolved_before_matching(self) -> None:
        assert compile_pattern("/admin").test("http://h/user/../admin")
        assert not compile_pattern("/static/*").test("/static/../secret")


class TestNamedParams:
    def test_single_segment(self) -> None:
        pattern = compile_pattern("/user/:id")
        assert pattern.extract("/user/42") == {"id": "42"}

    def test_does_not_cross_segments(self) -> None:
        pattern = compile_pattern("/user/:id")
        assert not pattern.test("/user/42/edit")
        assert not pattern.test("/user/")

    def test_encoded_slash_stays_in_segment(self) -> None:
        pattern = compile_pattern("/items/:name")
        assert pattern.extract("/items/a%2Fb") == {"name": "a%2Fb"}

    def test_param_inside_segment(self) -> None:
        pattern = compile_pattern("/files/:name.txt")
        assert pattern.extract("/files/report.txt") == {"name": "report"}

    def test_custom_regex(self) -> None:
        pattern = compile_pattern("/api/:version(v\\d+)/users")
        assert pattern.extract("/api/v2/users") == {"version": "v2"}
        assert not pattern.test("/api/latest/users")

    def test_custom_regex_alternation(self) -> None:
        pattern = compile_pattern("/img/:size(small|large)")
        assert pattern.extract("/img/large") == {"size": "large"}
        assert not pattern.test("/img/medium")

    def test_custom_regex_nested_non_capturing_group(self) -> None:
        pattern = compile_pattern("/v/:n((?:\\d\\.)+\\d)")
        assert pattern.extract("/v/1.2.3") == {"n": "1.2.3"}

    def test_absolute_url(self) -> None:
        pattern = compile_pattern("/user/:id")
        assert pattern.extract("http://example.com/user/7?tab=1") == {"id": "7"}


class TestModifiers:
    def test_optional_present_and_absent(self) -> None:
        pattern = compile_pattern("/books/:id?")
        assert pattern.extract("/books/42") == {"id": "42"}
        assert pattern.extract("/books") == {"id": None}
        assert not pattern.test("/books/")

    def test_one_or_more(self) -> None:
        pattern = compile_pattern("/files/:path+")
        assert pattern.extract("/files/a/b/c.txt") == {"path": "a/b/c.txt"}
        assert not pattern.test("/files")

    def test_zero_or_more(self) -> None:
        pattern = compile_pattern("/tags/:tag*")
        assert pattern.extract("/tags") == {"tag": None}
        assert pattern.extract("/tags/a/b") == {"tag": "a/b"}

    def test_star_after_param_is_modifier(self) -> None:
        assert compile_pattern("/a/:x*").names == ("x",)


class TestWildcard:
    def test_captures_rest_of_path(self) -> None:
        pattern = compile_pattern("/static/*")
        assert pattern.extract("/static/css/app.css") == {"0": "css/app.css"}

    def test_empty_capture(self) -> None:
        pattern = compile_pattern("/static/*")
        assert pattern.extract("/static/") == {"0": ""}

    def test_requires_separator(self) -> None:
        assert not compile_pattern("/static/*").test("/static")

    def test_anonymous_regex(self) -> None:
        pattern = compile_pattern("/assets/(\\w+)\\.js")
        assert pattern.extract("/assets/main.js") == {"0": "main"}

    def test_catch_all(self) -> None:
        pattern = compile_pattern("*")
        assert pattern.test("/")
        assert pattern.test("/anything/at/all")


class TestExecAndExtract:
    def test_exec_returns_none_on_miss(self) -> None:
        assert compile_pattern("/user/:id").exec("/post/1") is None

    def test_exec_returns_pathname_and_groups(self) -> None:
        result = compile_pattern("/user/:id").exec("http://h/user/9?x")
        assert result is not None
        assert result.pathname == "/user/9"
        assert result.groups == {"id": "9"}

    def test_extract_on_miss_raises(self) -> None:
        with pytest.raises(ValueError, match="does not match"):
            compile_pattern("/user/:id").extract("/post/1")

    def test_test_and_exec_agree(self) -> None:
        pattern = compile_pattern("/a/:b/:c?")
        for url in ("/a/1", "/a/1/2", "/a", "/a/1/2/3", "/b/1"):
            assert pattern.test(url) == (pattern.exec(url) is not None)
