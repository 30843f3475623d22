"""Library: a document store that still speaks to version 7 clients.

Demonstrates the typeless routes, the typed routes served through the
compatibility layer, ingest pipelines, and an alias.

Run:
    python app.py

Then, from another shell:
    curl -XPUT localhost:9200/books/_doc/1 -H 'content-type: application/json' -d '{"title": "Dune"}'
    curl -i -XPUT localhost:9200/books/book/2 -H 'content-type: application/json' -d '{"title": "Emma"}'
"""

from typing import Any

from perch import App, AppConfig
from perch.document import InMemoryDocumentClient


def add_shelf(source: dict[str, Any]) -> dict[str, Any]:
    title = str(source.get("title", ""))
    return {**source, "shelf": title[:1].upper() or "?"}


store = InMemoryDocumentClient(
    aliases={"catalog": "books"},
    pipelines={"shelve": add_shelf},
)

app = App(AppConfig(debug=True), client=store)


@app.on_startup
def announce() -> None:
    print(f"Serving {len(app.controller.handlers)} handlers on port {app.config.port}")


if __name__ == "__main__":
    app.run()
