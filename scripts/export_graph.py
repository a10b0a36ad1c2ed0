#!/usr/bin/env python3
"""Exporta o grafo de estados (JSON/YAML) para ferramentas de visualizacao.

Uso:
    python scripts/export_graph.py grafo.yaml
    python scripts/export_graph.py grafo.json --output grafo.export.json

Guards sao aceitos por nome sem resolucao: o export so indica presenca.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from fsm import GraphError, export_state_graph, load_graph_file  # noqa: E402


def export_file(path: Path) -> dict[str, object]:
    registry = load_graph_file(path, strict=False)
    return export_state_graph(registry)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("graph", type=Path, help="Arquivo .json, .yaml ou .yml do grafo.")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Arquivo de saida. Se omitido, escreve em stdout.",
    )
    parser.add_argument("--indent", type=int, default=2, help="Indentacao do JSON.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        document = export_file(args.graph)
    except GraphError as exc:
        print(f"[erro] {exc}", file=sys.stderr)
        return 1

    text = json.dumps(document, indent=args.indent, ensure_ascii=False)
    if args.output is None:
        print(text)
    else:
        args.output.write_text(text + "\n", encoding="utf-8")
        print(f"[ok] states={len(document['states'])} output={args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
