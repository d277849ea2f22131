"""Tests for math span masking around translation."""

import pytest

from integralforme.shared.services.latex_guard import MaskedText, placeholder, protect, restore


class TestProtect:
    def test_single_inline_span(self):
        masked = protect("Solve $x^2$ now")
        assert masked.text == "Solve [[[MATH_0]]] now"
        assert masked.substitutions == ["$x^2$"]

    def test_spans_keep_occurrence_order(self):
        masked = protect("$a$ and $$b$$")
        assert masked.text == "[[[MATH_0]]] and [[[MATH_1]]]"
        assert masked.substitutions == ["$a$", "$$b$$"]

    def test_bracket_and_paren_delimiters(self):
        masked = protect(r"Display \[ \int f \] then inline \( g'(x) \).")
        assert masked.text == "Display [[[MATH_0]]] then inline [[[MATH_1]]]."
        assert masked.substitutions == [r"\[ \int f \]", r"\( g'(x) \)"]

    def test_block_math_may_span_lines(self):
        masked = protect("Before\n$$\na + b\n$$\nafter")
        assert masked.text == "Before\n[[[MATH_0]]]\nafter"
        assert masked.substitutions == ["$$\na + b\n$$"]

    def test_inline_math_stops_at_newline(self):
        masked = protect("$a\nb$")
        assert masked.text == "$a\nb$"
        assert masked.substitutions == []

    def test_double_dollar_wins_over_inline(self):
        masked = protect("$$x$$")
        assert masked.substitutions == ["$$x$$"]

    def test_leftmost_pairing_of_dollars(self):
        # Currency reads as a math span; leftmost pairing is kept as-is.
        masked = protect("Costs $5 and $10")
        assert masked.text == "Costs [[[MATH_0]]]10"
        assert masked.substitutions == ["$5 and $"]

    def test_empty_text(self):
        assert protect("") == MaskedText("", [])

    def test_text_without_math(self):
        masked = protect("Just words.")
        assert masked.text == "Just words."
        assert masked.substitutions == []

    def test_existing_token_text_is_masked(self):
        masked = protect("see [[[MATH_0]]] and $y$")
        assert masked.substitutions == ["[[[MATH_0]]]", "$y$"]


class TestRestore:
    def test_replaces_every_occurrence(self):
        assert restore("[[[MATH_0]]] = [[[MATH_0]]]", ["$x$"]) == "$x$ = $x$"

    def test_restored_math_is_not_rescanned(self):
        assert restore("[[[MATH_0]]]", ["[[[MATH_1]]]", "$y$"]) == "[[[MATH_1]]]"

    def test_unknown_token_left_alone(self):
        assert restore("[[[MATH_3]]] stays", ["$x$"]) == "[[[MATH_3]]] stays"

    def test_translated_surroundings(self):
        masked = protect("Solve $x^2$ now")
        translated = masked.text.replace("Solve", "Resolva").replace("now", "agora")
        assert restore(translated, masked.substitutions) == "Resolva $x^2$ agora"

    def test_placeholder_format(self):
        assert placeholder(12) == "[[[MATH_12]]]"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "plain",
        "Solve $x^2$ now",
        "$a$ and $$b$$",
        r"\[ a \] \( b \) $c$ $$d$$",
        "$$ unterminated",
        "$ $ $",
        r"\( nested $x$ \)",
        "$$a$$$b$",
        "[[[MATH_0]]] $x$ [[[MATH_1]]]",
        "[[[MATH_$x$]]]",
        "multi\nline $$\n\\frac{1}{2}\n$$ end",
    ],
)
def test_round_trip(text):
    assert restore(*protect(text)) == text
