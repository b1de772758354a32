"""Tests for the charset rule."""

import pytest

from ec_lint.core.document import Charset, build_document
from ec_lint.core.rules import CharsetRule

UTF8_BOM = b"\xef\xbb\xbf"


@pytest.fixture
def rule() -> CharsetRule:
    return CharsetRule()


class TestResolve:
    """Tests for reading the charset setting."""

    @pytest.mark.parametrize("value", ["utf-8-bom", "utf_8_bom", "UTF-8-BOM"])
    def test_spellings(self, rule: CharsetRule, value: str) -> None:
        """Test hyphen and underscore spellings are the same charset."""
        assert rule.resolve({"charset": value}) is Charset.UTF_8_BOM

    def test_unknown(self, rule: CharsetRule) -> None:
        """Test unknown charsets resolve to None."""
        assert rule.resolve({"charset": "ebcdic"}) is None
        assert rule.resolve({}) is None


class TestCheck:
    """Tests for charset check."""

    def test_matching_bom(self, rule: CharsetRule) -> None:
        """Test a file with the configured BOM."""
        document = build_document(UTF8_BOM + b"foo")
        assert rule.check({"charset": "utf-8-bom"}, document) == []

    def test_bom_mismatch(self, rule: CharsetRule) -> None:
        """Test a different BOM than configured."""
        document = build_document(b"\xff\xfe" + "foo".encode("utf-16-le"))
        violations = rule.check({"charset": "utf-8-bom"}, document)
        assert len(violations) == 1
        assert violations[0].message == "invalid charset: utf-16le, expected: utf-8-bom"
        assert violations[0].line_number == 1
        assert violations[0].rule == "charset"

    def test_missing_bom(self, rule: CharsetRule) -> None:
        """Test a BOM-less file when a BOM-bearing charset is configured."""
        violations = rule.check({"charset": "utf-16be"}, build_document(b"foo"))
        assert [v.message for v in violations] == ["expected charset: utf-16be"]

    def test_utf8_without_bom(self, rule: CharsetRule) -> None:
        """Test plain UTF-8 content for charset utf-8."""
        assert rule.check({"charset": "utf-8"}, build_document("café".encode())) == []

    def test_unexpected_bom_for_utf8(self, rule: CharsetRule) -> None:
        """Test a UTF-8 BOM when plain utf-8 is configured."""
        violations = rule.check({"charset": "utf-8"}, build_document(UTF8_BOM + b"foo"))
        assert [v.message for v in violations] == ["invalid charset: utf-8-bom, expected: utf-8"]

    def test_latin1_boundary(self, rule: CharsetRule) -> None:
        """Test 0x7F is accepted and 0x80 is reported."""
        settings = {"charset": "latin1"}
        assert rule.check(settings, build_document(b"\x7f", "latin1")) == []

        violations = rule.check(settings, build_document(b"\x80", "latin1"))
        assert len(violations) == 1
        assert violations[0].message.startswith("character out of latin1 range:")
        assert violations[0].column_number == 1
        assert violations[0].source == "\x80"

    def test_latin1_reports_every_character(self, rule: CharsetRule) -> None:
        """Test each out-of-range character is reported with its position."""
        document = build_document(b"ok\ncaf\xe9 \xe8\n", "latin1")
        violations = rule.check({"charset": "latin1"}, document)
        assert [(v.line_number, v.column_number) for v in violations] == [(2, 4), (2, 6)]

    def test_bom_file_checked_as_latin1(self, rule: CharsetRule) -> None:
        """Test a utf-8-bom file yields one mismatch and no range violations."""
        document = build_document(UTF8_BOM + "café über".encode(), "latin1")
        violations = rule.check({"charset": "latin1"}, document)
        assert len(violations) == 1
        assert violations[0].message == "invalid charset: utf-8-bom, expected: latin1"

    def test_unset(self, rule: CharsetRule) -> None:
        """Test no setting means no violations."""
        assert rule.check({}, build_document(UTF8_BOM + b"foo")) == []


class TestFix:
    """Tests for charset fix."""

    def test_adds_bom(self, rule: CharsetRule) -> None:
        """Test fixing to utf-8-bom writes the BOM."""
        document = rule.fix({"charset": "utf-8-bom"}, build_document(b"foo"))
        assert document.to_bytes() == UTF8_BOM + b"foo"

    def test_removes_bom(self, rule: CharsetRule) -> None:
        """Test fixing to utf-8 drops the BOM."""
        document = rule.fix({"charset": "utf-8"}, build_document(UTF8_BOM + b"foo"))
        assert document.to_bytes() == b"foo"

    def test_transcodes(self, rule: CharsetRule) -> None:
        """Test fixing to utf-16le re-encodes the text."""
        document = rule.fix({"charset": "utf-16le"}, build_document("café\n".encode()))
        assert document.to_bytes() == b"\xff\xfe" + "café\n".encode("utf-16-le")

    def test_fixed_document_passes_check(self, rule: CharsetRule) -> None:
        """Test check after fix reports nothing."""
        settings = {"charset": "utf-16be"}
        fixed = rule.fix(settings, build_document(UTF8_BOM + b"foo")).to_bytes()
        assert rule.check(settings, build_document(fixed)) == []


class TestInfer:
    """Tests for charset infer."""

    def test_from_bom(self, rule: CharsetRule) -> None:
        """Test the BOM determines the inferred charset."""
        assert rule.infer(build_document(b"\xfe\xff" + "x".encode("utf-16-be"))) is Charset.UTF_16BE

    def test_without_bom(self, rule: CharsetRule) -> None:
        """Test nothing is inferred without a BOM."""
        assert rule.infer(build_document(b"foo")) is None
