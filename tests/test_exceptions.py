"""Tests for the exception hierarchy."""

from xgenerate.exceptions import (
    ConfigError,
    CursorMisuseError,
    InvalidRootBindingError,
    SectionizerError,
    UnhandledAnnotationError,
    UnterminatedSectionError,
    XGenerateError,
)


class TestXGenerateError:
    """Tests for the base exception."""

    def test_message_only(self) -> None:
        error = XGenerateError("Something failed")
        assert str(error) == "Something failed"
        assert error.context == {}

    def test_with_context(self) -> None:
        error = ConfigError("Bad config", {"source": "a.xml"})
        assert str(error) == "Bad config | Context: {'source': 'a.xml'}"


class TestSectionizerErrors:
    """Tests for the sectionizer failure kinds."""

    def test_hierarchy(self) -> None:
        for error_type in (
            UnterminatedSectionError,
            UnhandledAnnotationError,
            InvalidRootBindingError,
            CursorMisuseError,
        ):
            assert issubclass(error_type, SectionizerError)
            assert issubclass(error_type, XGenerateError)

    def test_unterminated_section(self) -> None:
        error = UnterminatedSectionError("Column", 12)
        assert error.message == "The end of section 'Column' can't be found"
        assert error.context == {"section": "Column", "offset": 12}

    def test_invalid_root_binding(self) -> None:
        error = InvalidRootBindingError("Table", 2)
        assert error.binding_count == 2
        assert error.context["section"] == "Table"
