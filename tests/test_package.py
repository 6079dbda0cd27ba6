"""Tests for rolodex package exports and metadata."""

import pytest

import rolodex


class TestPackageMetadata:
    """Package-level exports and metadata."""

    def test_version_string(self) -> None:
        assert rolodex.__version__ == "0.1.0"

    def test_all_exports_resolvable(self) -> None:
        for name in rolodex.__all__:
            assert getattr(rolodex, name) is not None

    def test_lazy_export_is_the_real_object(self) -> None:
        from rolodex.highlighting import highlight

        assert rolodex.highlight is highlight

    def test_highlight_callable_after_render_import(self) -> None:
        import rolodex.render  # noqa: F401
        from rolodex import highlight

        assert callable(highlight)
        assert highlight("Lily", "li")[0].text == "Li"

    def test_invalid_attribute_raises(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            rolodex.nonexistent_thing  # type: ignore[attr-defined]  # noqa: B018
