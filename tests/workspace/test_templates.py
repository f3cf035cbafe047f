"""
Tests for workspace.templates - starter content for new files
"""

from datetime import date

import pytest

from codevanta.workspace.templates import default_content


class TestDefaultContent:
    """Test extension-keyed placeholders"""

    @pytest.mark.parametrize(
        "name,marker",
        [
            ("index.html", "<!DOCTYPE html>"),
            ("page.HTM", "<!DOCTYPE html>"),
            ("style.css", "box-sizing"),
            ("app.js", "function greet"),
            ("app.ts", "interface User"),
            ("App.jsx", "useState"),
            ("Counter.tsx", "CounterProps"),
            ("main.py", "def main()"),
            ("package.json", '"name"'),
        ],
    )
    def test_known_extensions(self, name, marker):
        assert marker in default_content(name)

    def test_markdown_uses_title(self):
        assert default_content("notes.md").startswith("# notes\n")

    def test_unknown_extension_is_stamped(self):
        content = default_content("Makefile", today=date(2024, 5, 1))
        assert content == "// Makefile\n// Created with CodeVanta on 2024-05-01\n"
