from __future__ import annotations

from typing import Sequence

PROMPT_TEMPLATE = """
Write a short but human and polite answer to the question using only the context below:

### Context
{context}

### Question
{question}
"""


def build_prompt(context: Sequence[str], question: str) -> str:
    """Render the RAG prompt; context passages are joined one per line."""
    return PROMPT_TEMPLATE.format(context="\n".join(context), question=question)
