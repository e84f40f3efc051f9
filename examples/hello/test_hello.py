"""Tests for the hello example."""


class TestHelloApp:
    """Verify the hello example renders correctly."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "Hello, World!"

    def test_rerender_with_different_record(self, example_app) -> None:
        assert example_app.greeting({"name": "Ada"}) == "Hello, Ada!"

    def test_default_name(self, example_app) -> None:
        assert example_app.greeting({}) == "Hello, stranger!"
