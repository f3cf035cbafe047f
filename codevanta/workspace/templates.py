# -*- coding: utf-8 -*-
"""
Starter content for newly created local files, keyed by extension.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>CodeVanta Project</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            min-height: 100vh;
            display: flex;
            align-items: center;
            justify-content: center;
        }
    </style>
</head>
<body>
    <div class="container">
        <h1>Welcome to CodeVanta!</h1>
        <p>Start building something amazing.</p>
    </div>
</body>
</html>
"""

_CSS = """/* CodeVanta stylesheet */
* {
    margin: 0;
    padding: 0;
    box-sizing: border-box;
}

body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    line-height: 1.6;
    color: #333;
}

.container {
    max-width: 1200px;
    margin: 0 auto;
    padding: 2rem;
}
"""

_JS = """// CodeVanta JavaScript
function greet(name) {
    return `Hello, ${name}!`;
}

console.log(greet('Developer'));
"""

_TS = """// CodeVanta TypeScript
interface User {
    id: number;
    name: string;
}

function greet(user: User): string {
    return `Hello, ${user.name}!`;
}

console.log(greet({ id: 1, name: 'Developer' }));
"""

_JSX = """import React, { useState } from 'react';

const App = () => {
    const [count, setCount] = useState(0);

    return (
        <div className="app">
            <h1>Welcome to CodeVanta!</h1>
            <button onClick={() => setCount(count + 1)}>Clicked {count} times</button>
        </div>
    );
};

export default App;
"""

_TSX = """import React, { useState } from 'react';

interface CounterProps {
    initialValue?: number;
}

const Counter: React.FC<CounterProps> = ({ initialValue = 0 }) => {
    const [count, setCount] = useState<number>(initialValue);

    return (
        <div className="counter">
            <span>{count}</span>
            <button onClick={() => setCount(count + 1)}>+</button>
        </div>
    );
};

export default Counter;
"""

_PY = '''"""CodeVanta Python script."""


def greet(name):
    return f"Hello, {name}!"


def main():
    print(greet("Developer"))


if __name__ == "__main__":
    main()
'''

_JSON = """{
  "name": "codevanta-project",
  "version": "1.0.0",
  "description": "A CodeVanta project",
  "main": "index.js",
  "scripts": {
    "start": "node index.js"
  },
  "license": "MIT"
}
"""

_BY_EXTENSION = {
    "html": _HTML,
    "htm": _HTML,
    "css": _CSS,
    "js": _JS,
    "ts": _TS,
    "jsx": _JSX,
    "tsx": _TSX,
    "py": _PY,
    "json": _JSON,
}


def _extension(file_name: str) -> str:
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


def _markdown(file_name: str) -> str:
    title = file_name[: -len(".md")] if file_name.lower().endswith(".md") else file_name
    return f"# {title}\n\nWelcome to your CodeVanta project!\n\n## Getting Started\n\nDescribe your project here.\n"


def default_content(file_name: str, today: Optional[date] = None) -> str:
    """
    Placeholder content for a new file.

    Args:
        file_name: Base name of the file; its extension selects the template
        today: Date stamped into the generic template (defaults to today)

    Returns:
        Starter text
    """
    ext = _extension(file_name)
    if ext == "md":
        return _markdown(file_name)
    template = _BY_EXTENSION.get(ext)
    if template is not None:
        return template
    stamp = (today or date.today()).isoformat()
    return f"// {file_name}\n// Created with CodeVanta on {stamp}\n"
