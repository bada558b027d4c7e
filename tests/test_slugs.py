# tests/test_slugs.py
from threadline.utils.slugs import slugify, unique_slug


def test_slugify_strips_accents_and_punctuation() -> None:
    assert slugify("  Héllo,   Wörld!  ") == "hello-world"


def test_slugify_collapses_hyphens() -> None:
    assert slugify("a -- b") == "a-b"


def test_slugify_never_returns_empty() -> None:
    assert slugify("!!!") == "thread"


def test_unique_slug_appends_counter() -> None:
    taken = {"my-question", "my-question-1"}

    assert unique_slug("My question", taken) == "my-question-2"
    assert unique_slug("Fresh one", taken) == "fresh-one"
