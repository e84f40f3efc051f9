"""Tests for the custom_functions example."""


class TestCustomFunctionsApp:
    """Verify the custom_functions example renders correctly."""

    def test_money_formatting(self, example_app) -> None:
        assert "$1,234.56" in example_app.output
        assert "€1,234.56" in example_app.output

    def test_pluralize(self, example_app) -> None:
        assert "3 items" in example_app.output

    def test_line_totals(self, example_app) -> None:
        assert "Widget A: $39.98" in example_app.output
        assert "Widget B: $5.00" in example_app.output

    def test_singular(self, example_app) -> None:
        result = example_app.template.render(count=1, total=1, items=[])
        assert result.startswith("1 item, total $1.00")
