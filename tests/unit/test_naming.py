from core.utils.naming import (
    MAX_BASE_NAME_LENGTH,
    candidate_names,
    is_titled_name,
    make_file_base_name,
    sanitize_title,
)


def test_sanitize_replaces_forbidden_characters():
    assert sanitize_title('A/B: C*D?') == "A-B- C-D-"
    assert sanitize_title('<x>"y"|z\\') == "-x--y--z-"


def test_sanitize_underscores_and_trim():
    assert sanitize_title("  deep_learning_review  ") == "deep learning review"


def test_base_name_format():
    assert make_file_base_name("0001", "Foo Bar") == "0001 - Foo Bar"
    assert make_file_base_name("0002", "What? Why/How") == "0002 - What- Why-How"


def test_base_name_is_truncated_and_trimmed():
    title = "x" * 192 + " " + "y" * 50
    name = make_file_base_name("0001", title)
    assert len(name) <= MAX_BASE_NAME_LENGTH
    assert name == ("0001 - " + "x" * 192)[:MAX_BASE_NAME_LENGTH].strip()
    assert not name.endswith(" ")


def test_short_names_are_not_truncated():
    title = "t" * (MAX_BASE_NAME_LENGTH - len("0001 - "))
    assert make_file_base_name("0001", title) == "0001 - " + title


def test_candidates_current_scheme_first():
    assert candidate_names("0001", "Foo Bar") == ["0001 - Foo Bar", "0001"]


def test_candidates_without_title_are_legacy_only():
    assert candidate_names("0001", None) == ["0001"]
    assert candidate_names("0001", "") == ["0001"]


def test_titled_name_matches_any_title_of_the_article():
    assert is_titled_name("0001 - Old title.pdf", "0001", ".pdf")
    assert is_titled_name("0001 - Foo- Bar.docx", "0001", ".docx")


def test_titled_name_rejects_other_articles_and_kinds():
    assert not is_titled_name("00010 - Other.pdf", "0001", ".pdf")
    assert not is_titled_name("0001 - Old title.docx", "0001", ".pdf")
    assert not is_titled_name("0001.pdf", "0001", ".pdf")
    assert not is_titled_name("0001 - .pdf", "0001", ".pdf")
