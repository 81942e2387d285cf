from utils.quality import is_garbled, is_usable_text, single_char_token_ratio, symbol_ratio, truncate

from conftest import ABSTRACT


def test_symbol_ratio_counts_non_alphanumeric_characters():
    assert symbol_ratio("abcd") == 0.0
    assert symbol_ratio("ab!!") == 0.5
    # whitespace is ignored
    assert symbol_ratio("a b c d") == 0.0
    assert symbol_ratio("") == 1.0


def test_single_char_token_ratio():
    assert single_char_token_ratio("t h i s is") == 0.8
    assert single_char_token_ratio("plain words only") == 0.0
    assert single_char_token_ratio("   ") == 1.0


def test_symbol_soup_is_rejected():
    soup = "�#@%$^&*()!~" * 10 + " ok words"
    assert symbol_ratio(soup) > 0.7
    assert is_garbled(soup)
    assert not is_usable_text(soup)


def test_letter_by_letter_text_is_rejected():
    spaced = " ".join("this text came back letter by letter from a broken pdf layer")
    assert len(spaced) > 50
    assert is_garbled(spaced)
    assert not is_usable_text(spaced)


def test_usable_text_needs_minimum_length():
    assert is_usable_text(ABSTRACT)
    assert not is_usable_text("Too short to summarize.")
    assert not is_usable_text(None)
    assert not is_usable_text("x" * 49 + " ", min_length=50)


def test_thresholds_are_configurable():
    text = "Prices rose 3% (again) -- see the chart: $$$ ### !!! ??? ... ,,, ;;;"
    assert is_garbled(text, max_symbol_ratio=0.3)
    assert not is_garbled(text, max_symbol_ratio=0.9, max_single_char_ratio=0.9)


def test_truncate_collapses_whitespace_and_marks_cut():
    assert truncate("short   text\n", 300) == "short text"
    cut = truncate("word " * 100, 20)
    assert cut.endswith("...")
    assert len(cut) <= 23
