"""Custom functions -- extending pagelet with add_function and @env.function.

Host functions receive already-evaluated arguments. Used with pipe syntax,
the piped value is the first argument.

Run:
    python app.py
"""

from pagelet import Environment

env = Environment()


# Custom function: add_function()
def money(amount: float, currency: str = "$") -> str:
    """Format amount as currency."""
    return f"{currency}{amount:,.2f}"


env.add_function("money", money)


# Custom function: @env.function() decorator
@env.function()
def pluralize(n: int, singular: str, plural: str) -> str:
    """Return singular or plural form based on count."""
    return singular if n == 1 else plural


@env.function("lineTotal")
def line_total(item: dict) -> float:
    return item["price"] * item["qty"]


template = env.from_string(
    "{{ count }} {{ count | pluralize(\"item\", \"items\") }}, "
    "total {{ total | money }} ({{ money(total, \"€\") }})\n"
    "{{#each items as item}}- {{ item.name }}: {{ item | lineTotal | money }}\n{{/each}}"
)

output = template.render(
    count=3,
    total=1234.56,
    items=[
        {"name": "Widget A", "price": 19.99, "qty": 2},
        {"name": "Widget B", "price": 5.00, "qty": 1},
    ],
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
