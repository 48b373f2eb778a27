from pathlib import Path
from typing import List

class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'
    ENDC = '\033[0m'

def wrap_description(text: str, width: int = 90, indent: int = 4) -> str:
    """
    Re-flow authored text into indented paragraphs.
    Blank lines separate paragraphs; single newlines inside a paragraph are joined.
    """
    paragraphs: List[str] = []
    for paragraph in text.split("\n\n"):
        words = paragraph.split()
        if not words:
            continue
        lines: List[str] = []
        line = " " * indent
        for word in words:
            if line.strip() and len(line) + len(word) > width:
                lines.append(line.rstrip())
                line = " " * indent
            line += word + " "
        lines.append(line.rstrip())
        paragraphs.append("\n".join(lines))
    return "\n\n".join(paragraphs)

def boxed(text: str) -> str:
    bar = "═" * (len(text) + 2)
    return f"╔{bar}╗\n║ {text} ║\n╚{bar}╝"

def read_text_file(path: Path) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read().rstrip()
