"""
Entry point for running TieWeb_Analyzer as a module.

Generates a random network and prints a prominence report:
    python -m TieWeb_Analyzer --model small-world --nodes 40 --degree 4 --beta 0.2 --index DC BC EVC
"""

import logging
import sys
from typing import List, Optional

from .config import TieWebConfig, get_configuration_manager
from .engine import NetworkEngine
from .output.formatters import (
    EmojiFormatter,
    format_centrality_report,
    format_clique_census,
    format_metrics,
    format_triad_census,
    log_lines,
)
from .visualization.layouts import PROMINENCE_MODES


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    return logging.getLogger("TieWeb_Analyzer")


def run_report(config: TieWebConfig, logger: logging.Logger) -> int:
    """
    Generate the configured network and log the requested analyses.

    Returns:
        int: Exit code (0 on success, 1 when some analysis failed, 2 when the
            network could not be generated)
    """
    engine = NetworkEngine(config=config, logger=logger)
    report = config.report

    logger.info(EmojiFormatter.format("progress", f"Generating {config.generator.model} network..."))
    generated = engine.generate()
    if not generated.ok:
        logger.error(EmojiFormatter.format("error", f"Could not generate network: {generated.error}"))
        return 2

    failures = 0
    metrics = engine.connectivity()
    if metrics.ok:
        logger.info("\n==== NETWORK STRUCTURE ====")
        logger.info(format_metrics(metrics.value))
    else:
        failures += 1

    logger.info("\n==== PROMINENCE INDICES ====")
    for code, result in engine.compute_indices(report.indices, report.confirmed).items():
        if result.ok:
            log_lines(format_centrality_report(result.value, report.top_n), logger)
        elif result.needs_confirmation:
            logger.warning(
                EmojiFormatter.format("warning", f"{code} skipped: {result.error}. Re-run with --yes to compute it.")
            )
            failures += 1
        else:
            failures += 1

    if report.triad_census:
        census = engine.triad_census()
        if census.ok:
            logger.info("\n==== TRIAD CENSUS ====")
            logger.info(format_triad_census(census.value))
        else:
            failures += 1

    if report.clique_census:
        cliques = engine.clique_census(confirmed=report.confirmed)
        if cliques.ok:
            logger.info("\n==== CLIQUE CENSUS ====")
            log_lines(format_clique_census(cliques.value), logger)
        else:
            failures += 1

    if report.layout != "none":
        # Prominence layouts are driven by the first requested index
        index = report.indices[0] if report.layout in PROMINENCE_MODES and report.indices else None
        layout = engine.layout(report.layout, index=index, seed=config.generator.seed, confirmed=report.confirmed)
        if layout.ok:
            logger.info(
                EmojiFormatter.format(
                    "success", f"Applied {layout.value.method} layout to {len(layout.value.positions)} actors"
                )
            )
        else:
            failures += 1

    if failures:
        logger.warning(EmojiFormatter.format("warning", f"Report finished with {failures} failed analyses"))
        return 1
    logger.info(EmojiFormatter.format("success", "Report complete"))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, build the configuration and print the report."""
    config_manager = get_configuration_manager()
    cli_args = config_manager.parse_cli_args(argv)
    config_file = cli_args.pop("config_file", None)
    verbose = cli_args.pop("verbose", False)
    logger = setup_logging(verbose)

    try:
        config = config_manager.load_configuration(config_file, cli_args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(EmojiFormatter.format("error", f"Invalid configuration: {e}"))
        return 2

    return run_report(config, logger)


if __name__ == "__main__":
    sys.exit(main())
