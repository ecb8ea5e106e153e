from __future__ import annotations

import io
import json

import pytest

import kmp
from algoKMP import EmptyPattern, SourceTooLong, UnknownEncoding


@pytest.fixture
def stdin(monkeypatch):
    def _set(text: str) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(text))
    return _set


def test_failure_listing_does_not_read_stdin(capsys) -> None:
    assert kmp.main(["-f", "aaaa"]) == 0
    out = capsys.readouterr().out
    assert out == "Failure function for aaaa:\nf[1] = 0\nf[2] = 1\nf[3] = 2\nf[4] = 3\n"


def test_failure_listing_json(capsys) -> None:
    assert kmp.main(["-f", "--json", "abab"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {"target": "abab", "failure": [0, 0, 1, 2]}


def test_repeating_prefix(capsys) -> None:
    assert kmp.main(["-r", "ababab"]) == 0
    assert capsys.readouterr().out == "ab\n"


def test_repeating_prefix_json(capsys) -> None:
    assert kmp.main(["-r", "--json", "abcabc"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {"target": "abcabc", "prefix": "abc", "repetitions": 2}


def test_repeating_prefix_takes_precedence_over_failure(capsys) -> None:
    assert kmp.main(["-f", "-r", "abcde"]) == 0
    assert capsys.readouterr().out == "abcde\n"


# Counts include overlapping occurrences: "aa" is found 3 times in "aaaa".
@pytest.mark.parametrize("engine_flag", [[], ["-l"]])
def test_count_counts_overlapping_matches(stdin, capsys, engine_flag) -> None:
    stdin("aaaa")
    assert kmp.main(engine_flag + ["-n", "aa"]) == 0
    assert capsys.readouterr().out == "Target 'aa' found 3 times in source.\n"


def test_count_json(stdin, capsys) -> None:
    stdin("abababa")
    assert kmp.main(["-n", "--json", "aba"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {"target": "aba", "engine": "kmp", "count": 3}


def test_search_on_first_line(stdin, capsys) -> None:
    stdin("hello world\nbye\n")
    assert kmp.main(["world"]) == 0
    out = capsys.readouterr().out
    assert out == "target = world\nhello world\n      ^^^^^\n"


def test_search_reports_line_number_after_first_line(stdin, capsys) -> None:
    stdin("first line\nsecond hello world\nthird\n")
    assert kmp.main(["world"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "target = world",
        "...line 2:",
        "second hello world",
        " " * 13 + "^^^^^",
    ]


def test_search_not_found(stdin, capsys) -> None:
    stdin("hello world\n")
    assert kmp.main(["zz"]) == 1
    assert capsys.readouterr().out == "target = zz\nNot found in source\n"


def test_search_json(stdin, capsys) -> None:
    stdin("abc\nxx hello world\n")
    assert kmp.main(["--json", "world"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["found"] is True
    assert data["engine"] == "kmp"
    assert data["index"] == 13
    assert data["line"] == 2
    assert data["column"] == 9
    assert data["line_text"] == "xx hello world"
    assert data["matches"] == [{"start": 13, "end": 18, "text": "world"}]


def test_search_json_not_found(stdin, capsys) -> None:
    stdin("abc")
    assert kmp.main(["--json", "zz"]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data["found"] is False
    assert data["index"] == -1
    assert data["matches"] == []


def test_library_engine_agrees_with_kmp(stdin, capsys) -> None:
    source = "the cat and the hat\nthe end"
    stdin(source)
    kmp.main(["hat"])
    with_kmp = capsys.readouterr().out
    stdin(source)
    kmp.main(["-l", "hat"])
    assert capsys.readouterr().out == with_kmp


def test_all_occurrences_highlighted(stdin, capsys) -> None:
    stdin("xaaay")
    assert kmp.main(["-a", "aa"]) == 0
    assert capsys.readouterr().out == "target = aa\nfound at [1, 2]\nx[aaa]y\n"


def test_all_occurrences_json(stdin, capsys) -> None:
    stdin("abab")
    assert kmp.main(["-a", "--json", "ab"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [m["start"] for m in data["matches"]] == [0, 2]


def test_empty_target_is_an_error(stdin, capsys) -> None:
    stdin("abc")
    assert kmp.main([""]) == 2
    assert capsys.readouterr().err.startswith("ERROR: ")


def test_empty_target_for_repeating_prefix(capsys) -> None:
    assert kmp.main(["-r", ""]) == 2
    assert capsys.readouterr().err.startswith("ERROR: ")


def test_source_too_long_from_environment(stdin, capsys, monkeypatch) -> None:
    monkeypatch.setenv("KMP_MAX_SOURCE", "5")
    stdin("abcdef")
    assert kmp.main(["a"]) == 2
    assert capsys.readouterr().err == "ERROR: Source too long. Must be < 5\n"


def test_max_source_zero_disables_limit(stdin, capsys) -> None:
    stdin("a" * 50000 + "b")
    assert kmp.main(["--max-source", "0", "-n", "ab"]) == 0
    assert capsys.readouterr().out == "Target 'ab' found 1 times in source.\n"


def test_verbose_writes_progress_to_stderr(stdin, capsys) -> None:
    stdin("abc")
    kmp.main(["--verbose", "b"])
    assert capsys.readouterr().err.startswith("[kmp] ")


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        kmp.main(["-v"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == kmp.VERSION


def test_read_source_enforces_limit() -> None:
    assert kmp.read_source(io.StringIO("abc"), 4) == "abc"
    with pytest.raises(SourceTooLong):
        kmp.read_source(io.StringIO("abcd"), 4)


def test_encoding_option_decodes_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"caf\xe9 ok\n")))
    assert kmp.main(["--encoding", "latin-1", "\u00e9"]) == 0
    assert capsys.readouterr().out == "target = \u00e9\ncaf\u00e9 ok\n   ^\n"


def test_encoding_from_environment(monkeypatch, capsys) -> None:
    monkeypatch.setenv("KMP_ENCODING", "latin-1")
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"na\xefve")))
    assert kmp.main(["-n", "\u00ef"]) == 0
    assert capsys.readouterr().out == "Target '\u00ef' found 1 times in source.\n"


def test_unknown_encoding_is_an_error(stdin, capsys) -> None:
    stdin("abc")
    assert kmp.main(["--encoding", "nope", "a"]) == 2
    assert capsys.readouterr().err == "ERROR: Encodage inconnu: nope\n"


def test_read_source_rejects_unknown_encoding() -> None:
    with pytest.raises(UnknownEncoding):
        kmp.read_source(io.StringIO("abc"), 0, "nope")


def test_library_search_rejects_empty_pattern() -> None:
    with pytest.raises(EmptyPattern):
        kmp.LibrarySearch("")


def test_library_search_counts_overlaps() -> None:
    engine = kmp.make_engine("aa", library=True)
    assert engine.search_all("aaaa") == [0, 1, 2]
    assert engine.count("aaaa") == 3


@pytest.mark.parametrize("start", [-3, -1, 0, 2, 10])
def test_engines_agree_on_start_offsets(start: int) -> None:
    text = "abcabc"
    assert kmp.make_engine("abc", library=False).find(text, start) == \
        kmp.make_engine("abc", library=True).find(text, start)
