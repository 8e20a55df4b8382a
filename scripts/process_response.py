"""Normalize a saved model response into a knowledge graph result or export."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from graphlens.pipeline import process_model_output
from graphlens.services.annotation import render_annotated_summary, source_display_title
from graphlens.services.export import export_graph
from graphlens.services.graph_service import empty_graph_message, unpack_response
from graphlens.utils.exceptions import GraphParseError
from graphlens.utils.logging import setup_logging


def main() -> None:
    setup_logging(log_level="INFO", log_format="console", stream=sys.stderr)

    parser = argparse.ArgumentParser(description="Turn a raw model response into a knowledge graph")
    parser.add_argument(
        "response_file",
        type=str,
        help="Path to the raw response JSON, or '-' for stdin",
    )
    parser.add_argument(
        "--export",
        choices=["json", "yaml"],
        default=None,
        help="Print only the graph in this format",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the export to this file instead of stdout",
    )
    args = parser.parse_args()

    if args.response_file == "-":
        raw = json.load(sys.stdin)
    else:
        raw = json.loads(Path(args.response_file).read_text(encoding="utf-8"))

    # Either a provider response (with candidates) or a flat {text, groundingChunks, ...}
    if "candidates" in raw:
        unpacked = unpack_response(raw)
        text, chunks, supports, queries = (
            unpacked.text,
            unpacked.grounding_chunks,
            unpacked.grounding_supports,
            unpacked.search_queries,
        )
    else:
        text = raw.get("text", "")
        chunks = raw.get("groundingChunks", [])
        supports = raw.get("groundingSupports", [])
        queries = raw.get("searchQueries", [])

    try:
        result = process_model_output(text, chunks, supports, queries)
    except GraphParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.export:
        content, _, extension = export_graph(result.graph_data, args.export)
        if args.output:
            Path(args.output).write_text(content, encoding="utf-8")
            print(f"Graph exported to {args.output} ({extension})")
        else:
            print(content)
        return

    print(f"Nodes: {len(result.graph_data.nodes)}")
    print(f"Edges: {len(result.graph_data.edges)}")
    message = empty_graph_message(result)
    if message:
        print(message)
    if result.summary:
        print("\nSummary:")
        print(render_annotated_summary(result.summary, result.grounding_supports))
    if result.search_queries:
        print("\nSearch queries:")
        for query in result.search_queries:
            print(f"  - {query}")
    if result.sources:
        print("\nSources:")
        for i, source in enumerate(result.sources, start=1):
            print(f"  [{i}] {source_display_title(source)} <{source.uri}> cited {source.citation_count}x")


if __name__ == "__main__":
    main()
