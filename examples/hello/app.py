"""Hello World -- the simplest pagelet example.

Compile a template once and render it with different records.

Run:
    python app.py
"""

import pagelet

# Compile once, render many times
greeting = pagelet.compile("Hello, {{ name | default(\"stranger\") }}!")

output = greeting({"name": "World"})


def main() -> None:
    print(output)
    print()

    for name in ["Ada", "", None]:
        print(greeting({"name": name}))


if __name__ == "__main__":
    main()
