from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Vector RAG (Gemini + Pinecone)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # Embed one text as document and as query; shows the task-type effect
    em = sub.add_parser("embed")
    em.add_argument("--text", required=True)
    em.add_argument("--show-vectors", action="store_true")

    # Seed the vector store
    ix = sub.add_parser("index")
    add_documents_args(ix)
    ix.add_argument("--id-prefix", default="", help="Prefix for generated record IDs (1-based index follows)")

    add_query_subparser(sub, "search")

    ask = add_query_subparser(sub, "ask")
    ask.add_argument("--show-prompt", action="store_true")

    # Local cosine ranking, no vector store involved
    rk = add_query_subparser(sub, "rank")
    add_documents_args(rk)

    sub.add_parser("stats")

    return ap


def add_documents_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--file", help="Path to a file; each non-empty line becomes a document")
    parser.add_argument("--text", action="append", default=[], help="A document; can repeat")


def add_query_subparser(sub, name: str) -> argparse.ArgumentParser:
    """Add a subcommand taking a query string and an optional top-K."""
    result = sub.add_parser(name)
    result.add_argument("--q", required=True)
    result.add_argument("--k", type=int, default=None, help="Top-K; defaults to $RAG_TOP_K")
    return result
