"""Tests for the Rich console factory and theme."""

from mandictl.output.console import (
    MANDI_THEME,
    create_console,
    get_output,
    style_for_suggestion,
)


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console()
        console.print("hello ₹20")
        assert get_output(console) == "hello ₹20\n"

    def test_theme_styles_resolve(self) -> None:
        console = create_console()
        console.print("[mandi.price]₹21[/mandi.price]")
        assert "₹21" in get_output(console)
        assert "mandi.trend.rising" in MANDI_THEME.styles

    def test_no_color_in_buffer(self) -> None:
        console = create_console()
        console.print("[mandi.error]ERROR[/mandi.error]")
        assert "\x1b[" not in get_output(console)

    def test_style_for_suggestion(self) -> None:
        assert style_for_suggestion("accept") == "mandi.accept"
        assert style_for_suggestion("reject") == "mandi.reject"
        assert style_for_suggestion("unknown") == ""
