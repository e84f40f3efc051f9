"""Concurrent rendering -- one compiled template, many threads.

Parsed templates are immutable and every render builds only local state,
so a single Template can be shared by a thread pool with no locking.

Run:
    python app.py
"""

from concurrent.futures import ThreadPoolExecutor

from pagelet import Environment

env = Environment()

TEMPLATE_SOURCE = """\
<article id="page-{{ page_id }}">
  <h1>{{ title }}</h1>
  <ul>
  {{#each tags as tag}}
    <li>{{ tag }}</li>
  {{/each}}
  </ul>
</article>"""

template = env.from_string(TEMPLATE_SOURCE)

pages = [
    {"page_id": i, "title": f"Page {i}", "tags": [f"tag-{i}-a", f"tag-{i}-b", f"tag-{i}-c"]}
    for i in range(8)
]


def render_page(page: dict) -> str:
    """Render a single page -- called from a worker thread."""
    return template.render(page)


with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads:\n")
    for i, html in enumerate(results):
        print(f"--- Thread {i} ---")
        print(html)
        print()


if __name__ == "__main__":
    main()
