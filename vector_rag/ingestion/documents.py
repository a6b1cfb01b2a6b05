from __future__ import annotations

from pathlib import Path
from typing import List

DEFAULT_KNOWLEDGE_BASE: List[str] = [
    "The sun is a massive star and the center of our solar system.",
    "Photosynthesis is the process by which plants use sunlight to create food.",
    "Water (H2O) is made of two hydrogen atoms and one oxygen atom.",
    "The moon is Earth's only natural satellite.",
    "JavaScript is a popular programming language for web development.",
]


def load_documents(path: Path) -> List[str]:
    """Load one document per non-empty line of a UTF-8 text file."""
    return [
        line.strip()
        for line in path.read_text(encoding="utf-8", errors="ignore").splitlines()
        if line.strip()
    ]
