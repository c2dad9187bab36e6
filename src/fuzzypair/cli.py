"""Interface en ligne de commande FuzzyPair."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fuzzypair import __version__
from fuzzypair.config import DEFAULT_ALGORITHM, DEFAULT_MAX_RESULTS, DEFAULT_THRESHOLD, Config, FuzzyPairError
from fuzzypair.export import build_mapping_csv
from fuzzypair.io_excel import extract_column, list_columns, list_sheets, load_sheet
from fuzzypair.matching.linker import search
from fuzzypair.matching.registry import VALID_CATEGORIES, list_algorithms
from fuzzypair.pipeline import PipelineResult, export_pipeline, run_pipeline
from fuzzypair.report import format_percent, print_report_console

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def cmd_algorithms(category: str | None = None) -> int:
    """Liste les algorithmes disponibles."""
    algos = list_algorithms(category)
    print(f"{'id':<15} {'catégorie':<14} {'perf':<7} description")
    for a in algos:
        print(f"{a.id:<15} {a.category:<14} {a.performance:<7} {a.description}")
    return 0


def cmd_list_sheets(filepath: str) -> int:
    """Liste les feuilles d'un fichier tableur."""
    sheets = list_sheets(filepath)
    print(f"Feuilles dans {filepath}:")
    for s in sheets:
        print(f"  - {s}")
    return 0


def cmd_columns(filepath: str, sheet: str | None = None, header_row: int = 1) -> int:
    """Liste les colonnes d'une feuille."""
    df = load_sheet(filepath, sheet, header_row=header_row)
    print(f"Colonnes ({len(df)} lignes):")
    for c in list_columns(df):
        print(f"  - {c}")
    return 0


def _finish(
    result: PipelineResult,
    config: Config,
    output_path: str | None,
    *,
    dry_run: bool,
    mapping_path: str | None = None,
) -> int:
    outcome = result.outcome
    if mapping_path:
        build_mapping_csv(outcome, mapping_path)
        print(f"Mapping écrit: {mapping_path}")

    print_report_console(outcome, result.stats)

    if dry_run:
        print("Mode dry-run: pas d'écriture du fichier de sortie.")
        return 0
    if not output_path:
        print("Erreur: --output requis en mode non dry-run.", file=sys.stderr)
        return 1

    for path in export_pipeline(result, config, output_path):
        print(f"Fichier de sortie: {path}")
    return 0


def cmd_run(
    config_path: str,
    output_path: str | None,
    *,
    dry_run: bool = False,
    mapping_path: str | None = None,
) -> int:
    """Exécute le pipeline FuzzyPair depuis un fichier de configuration."""
    config = Config.load(config_path)
    result = run_pipeline(config)
    return _finish(result, config, output_path, dry_run=dry_run, mapping_path=mapping_path)


def cmd_match(
    source_file: str,
    target_file: str,
    source_column: str,
    target_column: str,
    output_path: str | None,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    threshold: float = DEFAULT_THRESHOLD,
    max_results: int = DEFAULT_MAX_RESULTS,
    simple_mode: bool = False,
    dry_run: bool = False,
) -> int:
    """Appariement direct entre deux fichiers, sans fichier de configuration."""
    config = Config.from_dict(
        {
            "source_file": source_file,
            "target_file": target_file,
            "source_column": source_column,
            "target_column": target_column,
            "algorithm": algorithm,
            "threshold": threshold,
            "max_results": max_results,
            "simple_mode": simple_mode,
        }
    )
    result = run_pipeline(config)
    return _finish(result, config, output_path, dry_run=dry_run)


def cmd_search(
    query: str,
    filepath: str,
    column: str,
    *,
    sheet: str | None = None,
    algorithm: str = DEFAULT_ALGORITHM,
    limit: int = 10,
) -> int:
    """Recherche une valeur dans une colonne et affiche les meilleurs résultats."""
    df = load_sheet(filepath, sheet)
    values = extract_column(df, column)
    hits = search(query, values, algorithm, limit=limit)
    if not hits:
        print("Aucun résultat.")
        return 0
    for hit in hits:
        print(f"  {format_percent(hit.score, 1):>7}  ligne {hit.index + 1:<6} {hit.value}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fuzzypair",
        description="Appariement approximatif entre deux colonnes de tableurs (fuzzy matching)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Journalisation détaillée (DEBUG)")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    # algorithms
    p_algos = subparsers.add_parser("algorithms", help="Lister les algorithmes")
    p_algos.add_argument("--category", choices=VALID_CATEGORIES, help="Filtrer par catégorie")

    # list-sheets
    p_list = subparsers.add_parser("list-sheets", help="Lister les feuilles d'un tableur")
    p_list.add_argument("file", help="Fichier tableur")

    # columns
    p_cols = subparsers.add_parser("columns", help="Lister les colonnes d'une feuille")
    p_cols.add_argument("file", help="Fichier tableur")
    p_cols.add_argument("--sheet", help="Feuille (défaut: première)")
    p_cols.add_argument("--header-row", type=int, default=1, help="Ligne d'en-tête (1-based)")

    # run
    p_run = subparsers.add_parser("run", help="Exécuter le matching depuis une config JSON")
    p_run.add_argument("--config", "-c", required=True, help="Fichier config JSON")
    p_run.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_run.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")
    p_run.add_argument("--mapping", "-m", help="Chemin pour le mapping CSV")
    p_run.add_argument("--verbose", "-v", action="store_true", default=argparse.SUPPRESS, help="Journalisation détaillée")

    # match
    p_match = subparsers.add_parser("match", help="Apparier deux fichiers sans config")
    p_match.add_argument("source", help="Fichier source")
    p_match.add_argument("target", help="Fichier cible")
    p_match.add_argument("--source-column", required=True, help="Colonne source")
    p_match.add_argument("--target-column", required=True, help="Colonne cible")
    p_match.add_argument("--algorithm", "-a", default=DEFAULT_ALGORITHM, help="Identifiant d'algorithme")
    p_match.add_argument("--threshold", "-t", type=float, default=DEFAULT_THRESHOLD, help="Seuil dans [0, 1]")
    p_match.add_argument("--max-results", type=int, default=DEFAULT_MAX_RESULTS, help="Nombre maximal de paires")
    p_match.add_argument("--simple", action="store_true", help="Format de sortie simple")
    p_match.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_match.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")

    # search
    p_search = subparsers.add_parser("search", help="Rechercher une valeur dans une colonne")
    p_search.add_argument("query", help="Texte recherché")
    p_search.add_argument("file", help="Fichier tableur")
    p_search.add_argument("--column", required=True, help="Colonne à parcourir")
    p_search.add_argument("--sheet", help="Feuille (défaut: première)")
    p_search.add_argument("--algorithm", "-a", default=DEFAULT_ALGORITHM, help="Identifiant d'algorithme")
    p_search.add_argument("--limit", type=int, default=10, help="Nombre maximal de résultats")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.command in ("run", "match") and not args.dry_run and not args.output:
        parser.error("--output requis sauf en --dry-run")

    try:
        if args.command == "algorithms":
            return cmd_algorithms(args.category)
        if args.command == "list-sheets":
            return cmd_list_sheets(args.file)
        if args.command == "columns":
            return cmd_columns(args.file, args.sheet, args.header_row)
        if args.command == "run":
            return cmd_run(args.config, args.output, dry_run=args.dry_run, mapping_path=args.mapping)
        if args.command == "match":
            return cmd_match(
                args.source,
                args.target,
                args.source_column,
                args.target_column,
                args.output,
                algorithm=args.algorithm,
                threshold=args.threshold,
                max_results=args.max_results,
                simple_mode=args.simple,
                dry_run=args.dry_run,
            )
        if args.command == "search":
            return cmd_search(
                args.query,
                args.file,
                args.column,
                sheet=args.sheet,
                algorithm=args.algorithm,
                limit=args.limit,
            )
    except FuzzyPairError as e:
        logger.debug("Échec de la commande %s", args.command, exc_info=True)
        print(f"Erreur: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
