#!/usr/bin/env python3
"""
CLI script to run the HTML block interpreter.

Reads HTML files, treats each file's content as one raw HTML block, and
prints the block node it is re-expressed as.

With --layout (-l), tables and paragraphs are also routed through the
capability router, using the platform from --platform/--platform-version
or the MARKDOWN_RENDER_* environment variables.

Usage:
    python run_interpreter.py table.html
    python run_interpreter.py *.html -o nodes.json
    python run_interpreter.py table.html --layout --platform ios --platform-version 15.4
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Load .env file automatically
from dotenv import load_dotenv
load_dotenv()

from markdown_render.interpreter import HTMLBlockInterpreter
from markdown_render.router import CapabilityRouter
from markdown_render.capabilities import capabilities_from_env
from markdown_render.schemas import Paragraph, Table
from markdown_render.logger import setup_logger


def main():
    parser = argparse.ArgumentParser(description="Interpret raw HTML blocks as Markdown nodes")
    parser.add_argument("files", nargs="+", help="HTML files to interpret")
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument("--layout", "-l", action="store_true", help="Also route the node to a layout")
    parser.add_argument("--platform", help="Platform name: ios, macos, tvos, watchos")
    parser.add_argument("--platform-version", help="Platform OS version, e.g. 16.4")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    interpreter = HTMLBlockInterpreter()
    router = None
    if args.layout:
        capabilities = capabilities_from_env(args.platform, args.platform_version)
        print(f"Capabilities: {capabilities!r}", file=sys.stderr)
        router = CapabilityRouter(capabilities)

    results = []

    for filepath in args.files:
        path = Path(filepath)
        print(f"Interpreting: {path.name}", file=sys.stderr)

        try:
            html = path.read_text(errors="replace")
        except OSError as e:
            results.append({"file": path.name, "status": "error", "error": str(e)})
            print(f"  ✗ Error: {e}", file=sys.stderr)
            continue

        node = interpreter.interpret(html)
        entry = {
            "file": path.name,
            "status": "success",
            "node": node.model_dump(mode="json"),
        }

        if router is not None:
            if isinstance(node, Table):
                entry["layout"] = router.route_table(node).model_dump(mode="json")
            elif isinstance(node, Paragraph):
                entry["layout"] = router.compose_paragraph(node.content).model_dump(mode="json")

        results.append(entry)
        print(f"  ✓ {node.kind}", file=sys.stderr)

    # ensure_ascii=False keeps non-ASCII text readable in the JSON
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output)
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
