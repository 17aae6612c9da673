"""Basic repository validation example.

Builds a throwaway content repository and runs the ValidationEngine over it.
"""

import asyncio
import json
import tempfile
from pathlib import Path

from contentguard import InMemoryDiagnosticStore, ValidationEngine


def write_item(root: Path, content_type: str, slug: str, metadata: dict, body: str) -> None:
    directory = root / "content" / content_type / slug
    directory.mkdir(parents=True)
    (directory / "index.json").write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    (directory / "index.mdx").write_text(body, encoding="utf-8")


async def main():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)

        # One item that passes every rule set
        write_item(
            root,
            "blog",
            "welcome",
            {
                "title": "Welcome",
                "type": "blog",
                "description": "An introduction to the new site",
                "author": "Editorial",
                "language": "en",
                "publishedAt": "2024-05-01",
            },
            "# Welcome\n\nThanks for stopping by.\n",
        )

        # One item with structural problems and a missing image
        write_item(
            root,
            "blog",
            "draft",
            {"type": "blog", "tags": "news", "publishedAt": "someday"},
            "Work in progress ![hero](./hero.png)",
        )

        store = InMemoryDiagnosticStore()
        engine = ValidationEngine(root, store=store)
        count = await engine.validate_all()

        print("Validation Report")
        print("=================")
        print(f"Total problems: {count}")
        print()

        for path in store.paths():
            print(Path(path).relative_to(root))
            for problem in store.get(path):
                print(f"  [{problem.severity.label}] {problem.source}: {problem.message}")

        print()
        proceed = await engine.validate_before_sync()
        print(f"Sync allowed without confirmation: {proceed}")


if __name__ == "__main__":
    asyncio.run(main())
