"""Search result card -- the kind of fragment pagelet is built for.

Renders a result with an optional thumbnail, a highlighted excerpt (raw
output, since the excerpt already contains ``<mark>`` tags) and up to
three sub-result chips.

Run:
    python app.py
"""

from pagelet import Environment

env = Environment()

RESULT_TEMPLATE = """\
<li class="result">
  <a href="{{ url | safeUrl }}">{{ title }}</a>
  {{#if image}}<img src="{{ image | safeUrl }}" alt="{{ image_alt | default(title) }}">{{/if}}
  <p>{{+ excerpt +}}</p>
  {{#if tags}}<p class="tags">{{ join(tags | limit(3), " · ") }}</p>{{/if}}
  {{#each sub_results | limit(3) as sub, i}}
  <a class="chip" data-rank="{{ i }}" href="{{ sub.url | safeUrl }}">{{ sub.title | truncate(20) }}</a>
  {{:else}}
  <span class="no-chips"></span>
  {{/each}}
</li>"""

template = env.from_string(RESULT_TEMPLATE)

results = [
    {
        "url": "/docs/getting-started/",
        "title": "Getting Started & Setup",
        "excerpt": "Install the <mark>search</mark> library",
        "image": "/logo.png",
        "image_alt": "",
        "tags": ["search", "static-site", "tutorial", "extra"],
        "sub_results": [
            {"url": "/docs/getting-started/#install", "title": "Installation"},
            {"url": "javascript:alert(1)", "title": "A suspicious section with a long title"},
        ],
    },
    {
        "url": "/blog/",
        "title": "Blog",
        "excerpt": "Latest <mark>search</mark> news",
        "tags": [],
        "sub_results": [],
    },
]

output = "\n".join(template(result) for result in results)


def main() -> None:
    print(output)
    print()
    print("Fields read by the template:", ", ".join(sorted(template.variables)))


if __name__ == "__main__":
    main()
