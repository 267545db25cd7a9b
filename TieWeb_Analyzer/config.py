"""
Configuration management module for the TieWeb analysis engine.

This module provides centralized configuration management with validation,
default values, and clear error messages for every analysis parameter. The
weight/isolate handling toggles are an immutable AnalysisOptions value that is
passed explicitly into each analysis call; nothing reads them from global
state.
"""

import argparse
import json
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

GENERATOR_MODELS = ["erdos-renyi", "small-world", "scale-free", "regular", "ring-lattice", "lattice"]
LAYOUT_METHODS = ["none", "circle", "eades", "fruchterman-reingold", "kamada-kawai", "radial", "leveled"]


@dataclass(frozen=True)
class AnalysisOptions:
    """
    Weight and isolate handling for one analysis call.

    Attributes:
        consider_weights: Use tie weights instead of treating every tie as 1
        inverse_weights: Treat a weight w as a cost of 1/w when measuring distances
        drop_isolates: Leave isolated actors out of scores and group aggregates
    """

    consider_weights: bool = False
    inverse_weights: bool = False
    drop_isolates: bool = False

    def __post_init__(self):
        """Validate analysis options after initialization."""
        if self.inverse_weights and not self.consider_weights:
            raise ValueError("inverse_weights requires consider_weights to be enabled")


@dataclass
class ThresholdConfig:
    """Graph sizes above which expensive operations require confirmation."""

    expensive_node_threshold: int = 200
    walks_node_threshold: int = 200
    clustering_node_threshold: int = 1000

    def __post_init__(self):
        """Validate threshold configuration after initialization."""
        for name in ("expensive_node_threshold", "walks_node_threshold", "clustering_node_threshold"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive")


@dataclass
class IterationConfig:
    """Convergence settings for the iterative index solvers."""

    pagerank_damping: float = 0.85
    pagerank_max_iterations: int = 1000
    eigenvector_max_iterations: int = 1000
    tolerance: float = 1e-10

    def __post_init__(self):
        """Validate iteration configuration after initialization."""
        if not (0.0 < self.pagerank_damping < 1.0):
            raise ValueError("pagerank_damping must be between 0.0 and 1.0 (exclusive)")
        if self.pagerank_max_iterations < 1 or self.eigenvector_max_iterations < 1:
            raise ValueError("Maximum iteration counts must be positive")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")


@dataclass
class EadesLayoutConfig:
    """Configuration for the Eades spring embedder."""

    iterations: int = 100
    spring_constant: float = 2.0
    natural_length: float = 70.0
    repulsion: float = 5000.0
    step: float = 0.1

    def __post_init__(self):
        """Validate Eades layout configuration after initialization."""
        if self.iterations < 1:
            raise ValueError("iterations must be positive")
        if self.natural_length <= 0 or self.spring_constant <= 0 or self.repulsion <= 0:
            raise ValueError("Spring constant, natural length and repulsion must be positive")
        if not (0.0 < self.step <= 1.0):
            raise ValueError("step must be between 0.0 (exclusive) and 1.0")


@dataclass
class FruchtermanReingoldConfig:
    """Configuration for the Fruchterman-Reingold layout."""

    iterations: int = 100
    initial_temperature: Optional[float] = None
    cooling: float = 0.95

    def __post_init__(self):
        """Validate Fruchterman-Reingold configuration after initialization."""
        if self.iterations < 1:
            raise ValueError("iterations must be positive")
        if not (0.0 < self.cooling < 1.0):
            raise ValueError("cooling must be between 0.0 and 1.0 (exclusive)")
        if self.initial_temperature is not None and self.initial_temperature <= 0:
            raise ValueError("initial_temperature must be positive when specified")


@dataclass
class KamadaKawaiLayoutConfig:
    """Configuration for the Kamada-Kawai layout."""

    max_iterations: int = 500
    inner_iterations: int = 10
    spring_strength: float = 1.0
    epsilon: float = 1e-4

    def __post_init__(self):
        """Validate Kamada-Kawai configuration after initialization."""
        if self.max_iterations < 1 or self.inner_iterations < 1:
            raise ValueError("Iteration counts must be positive")
        if self.spring_strength <= 0 or self.epsilon <= 0:
            raise ValueError("spring_strength and epsilon must be positive")


@dataclass
class LayoutConfig:
    """Canvas and force-directed layout settings."""

    canvas_width: float = 800.0
    canvas_height: float = 600.0
    margin: float = 30.0
    base_node_size: float = 8.0
    node_size_multiplier: float = 12.0
    eades: EadesLayoutConfig = field(default_factory=EadesLayoutConfig)
    fruchterman_reingold: FruchtermanReingoldConfig = field(default_factory=FruchtermanReingoldConfig)
    kamada_kawai: KamadaKawaiLayoutConfig = field(default_factory=KamadaKawaiLayoutConfig)

    def __post_init__(self):
        """Validate layout configuration after initialization."""
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError("Canvas dimensions must be positive")
        if self.margin < 0 or 2 * self.margin >= min(self.canvas_width, self.canvas_height):
            raise ValueError("margin must be non-negative and smaller than half the canvas")
        if self.base_node_size <= 0 or self.node_size_multiplier < 0:
            raise ValueError("base_node_size must be positive and node_size_multiplier non-negative")


@dataclass
class GeneratorConfig:
    """Parameters of the random network the CLI generates."""

    model: str = "erdos-renyi"
    nodes: int = 50
    probability: Optional[float] = 0.1
    edges: Optional[int] = None
    degree: int = 4
    beta: float = 0.1
    power: float = 1.0
    initial_nodes: int = 3
    edges_per_step: int = 2
    zero_appeal: float = 1.0
    length: int = 5
    dimension: int = 2
    neighborhood: int = 1
    circular: bool = False
    directed: bool = False
    diag: bool = False
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate generator configuration after initialization."""
        if self.model not in GENERATOR_MODELS:
            raise ValueError(f"Invalid model '{self.model}'. Must be one of: {GENERATOR_MODELS}")
        if self.nodes < 1:
            raise ValueError("nodes must be positive")


@dataclass
class ReportConfig:
    """What the CLI computes and prints."""

    indices: List[str] = field(default_factory=lambda: ["DC", "BC", "PRP"])
    top_n: int = 10
    layout: str = "none"
    triad_census: bool = False
    clique_census: bool = False
    confirmed: bool = False

    def __post_init__(self):
        """Validate report configuration after initialization."""
        if self.top_n < 1:
            raise ValueError("top_n must be positive")
        if self.layout not in LAYOUT_METHODS:
            raise ValueError(f"Invalid layout '{self.layout}'. Must be one of: {LAYOUT_METHODS}")


@dataclass
class TieWebConfig:
    """Main configuration class containing all TieWeb settings."""

    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    iterations: IterationConfig = field(default_factory=IterationConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config_from_dict(config_dict: Dict[str, Any]) -> TieWebConfig:
    """
    Creates a TieWebConfig instance from a dictionary.

    Args:
        config_dict: Configuration dictionary; missing sections use defaults

    Returns:
        TieWebConfig: Validated configuration instance

    Raises:
        ValueError: If configuration validation fails
    """
    try:
        options_dict = config_dict.get("options", {})
        layout_dict = dict(config_dict.get("layout", {}))

        options = AnalysisOptions(
            consider_weights=options_dict.get("consider_weights", False),
            inverse_weights=options_dict.get("inverse_weights", False),
            drop_isolates=options_dict.get("drop_isolates", False),
        )
        layout = LayoutConfig(
            canvas_width=layout_dict.get("canvas_width", 800.0),
            canvas_height=layout_dict.get("canvas_height", 600.0),
            margin=layout_dict.get("margin", 30.0),
            base_node_size=layout_dict.get("base_node_size", 8.0),
            node_size_multiplier=layout_dict.get("node_size_multiplier", 12.0),
            eades=EadesLayoutConfig(**layout_dict.get("eades", {})),
            fruchterman_reingold=FruchtermanReingoldConfig(
                **layout_dict.get("fruchterman_reingold", {})
            ),
            kamada_kawai=KamadaKawaiLayoutConfig(**layout_dict.get("kamada_kawai", {})),
        )

        return TieWebConfig(
            options=options,
            thresholds=ThresholdConfig(**config_dict.get("thresholds", {})),
            iterations=IterationConfig(**config_dict.get("iterations", {})),
            layout=layout,
            generator=GeneratorConfig(**config_dict.get("generator", {})),
            report=ReportConfig(**config_dict.get("report", {})),
        )

    except (TypeError, ValueError) as e:
        raise ValueError(f"Configuration validation failed: {e}") from e


class ConfigurationManager:
    """
    Configuration management with validation and merging capabilities.

    This class provides:
    - Loading from JSON files and CLI arguments
    - Configuration merging with proper precedence (defaults < file < CLI)
    - CLI argument parsing with argparse
    """

    def __init__(self):
        """Initialize the configuration manager."""
        self.logger = logging.getLogger(__name__)

    def load_configuration(
        self,
        config_file: Optional[str] = None,
        cli_args: Optional[Dict] = None,
    ) -> TieWebConfig:
        """
        Load configuration from file and CLI arguments with validation.

        Args:
            config_file: Optional path to configuration file
            cli_args: Optional dictionary of CLI argument overrides

        Returns:
            TieWebConfig: Validated configuration instance

        Raises:
            ValueError: If configuration validation fails
            FileNotFoundError: If config file doesn't exist
        """
        base_config = self._serialize_configuration(TieWebConfig())

        if config_file:
            if not os.path.exists(config_file):
                raise FileNotFoundError(f"Configuration file not found: {config_file}")
            try:
                with open(config_file, "r", encoding="utf-8") as f:
                    file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in configuration file {config_file}: {e}") from e
            base_config = self._merge_configurations(base_config, file_config)
            self.logger.debug(f"Loaded configuration from {config_file}")

        if cli_args:
            base_config = self._merge_configurations(base_config, cli_args)

        return load_config_from_dict(base_config)

    def create_cli_parser(self) -> argparse.ArgumentParser:
        """
        Create command-line argument parser for configuration overrides.

        Returns:
            argparse.ArgumentParser: Configured argument parser
        """
        parser = argparse.ArgumentParser(
            description="TieWeb Social Network Analysis Engine",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  python -m TieWeb_Analyzer --model erdos-renyi --nodes 60 --probability 0.08 --index DC BC
  python -m TieWeb_Analyzer --model scale-free --nodes 200 --seed 7 --index EVC PRP --triad-census
  python -m TieWeb_Analyzer --config my_config.json --layout kamada-kawai
            """,
        )

        parser.add_argument("--config", dest="config_file", help="Path to JSON configuration file")
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

        # Generator arguments
        parser.add_argument("--model", choices=GENERATOR_MODELS, help="Random network model")
        parser.add_argument("--nodes", type=int, help="Number of actors")
        parser.add_argument("--probability", type=float, help="Tie probability (Erdos-Renyi G(n,p))")
        parser.add_argument("--edges", type=int, help="Exact number of ties (Erdos-Renyi G(n,M))")
        parser.add_argument("--degree", type=int, help="Degree for lattice, small-world and regular models")
        parser.add_argument("--beta", type=float, help="Rewiring probability (small-world)")
        parser.add_argument("--power", type=float, help="Preferential attachment power (scale-free)")
        parser.add_argument("--initial-nodes", dest="initial_nodes", type=int,
                            help="Seed clique size (scale-free)")
        parser.add_argument("--edges-per-step", dest="edges_per_step", type=int,
                            help="Ties added with every new actor (scale-free)")
        parser.add_argument("--zero-appeal", dest="zero_appeal", type=float,
                            help="Attractiveness of actors without ties (scale-free)")
        parser.add_argument("--length", type=int, help="Side length (lattice)")
        parser.add_argument("--dimension", type=int, help="Number of dimensions (lattice)")
        parser.add_argument("--neighborhood", type=int, help="Neighborhood radius (lattice)")
        parser.add_argument("--circular", action="store_true", default=None, help="Wrap lattice boundaries")
        parser.add_argument("--directed", action="store_true", default=None, help="Generate a directed network")
        parser.add_argument("--diag", action="store_true", default=None, help="Allow self-loops")
        parser.add_argument("--seed", type=int, help="Random seed")

        # Analysis options
        parser.add_argument("--weights", dest="consider_weights", action="store_true", default=None,
                            help="Consider tie weights")
        parser.add_argument("--inverse-weights", dest="inverse_weights", action="store_true", default=None,
                            help="Treat weights as strengths (distance = 1/weight)")
        parser.add_argument("--drop-isolates", dest="drop_isolates", action="store_true", default=None,
                            help="Leave isolated actors out of the computations")

        # Report arguments
        parser.add_argument("--index", dest="indices", nargs="+",
                            help="Prominence index codes to compute (DC CC IRCC BC SC EC PC IC EVC DP PRP PP)")
        parser.add_argument("--top", dest="top_n", type=int, help="Number of actors listed per index")
        parser.add_argument("--layout", choices=LAYOUT_METHODS, help="Layout to compute")
        parser.add_argument("--triad-census", dest="triad_census", action="store_true", default=None,
                            help="Print the triad census")
        parser.add_argument("--clique-census", dest="clique_census", action="store_true", default=None,
                            help="Print the clique census")
        parser.add_argument("-y", "--yes", dest="confirmed", action="store_true", default=None,
                            help="Run expensive computations on large networks without asking")

        return parser

    def parse_cli_args(self, args: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Parse command-line arguments into configuration dictionary.

        Args:
            args: Optional list of arguments (uses sys.argv if None)

        Returns:
            Dict[str, Any]: Configuration overrides from CLI, plus the
                ``config_file`` and ``verbose`` entries
        """
        parser = self.create_cli_parser()
        parsed_args = parser.parse_args(args)

        cli_config: Dict[str, Any] = {
            "config_file": parsed_args.config_file,
            "verbose": parsed_args.verbose,
        }

        sections = {
            "generator": ["model", "nodes", "probability", "edges", "degree", "beta", "power",
                          "initial_nodes", "edges_per_step", "zero_appeal", "length", "dimension",
                          "neighborhood", "circular", "directed", "diag", "seed"],
            "options": ["consider_weights", "inverse_weights", "drop_isolates"],
            "report": ["indices", "top_n", "layout", "triad_census", "clique_census", "confirmed"],
        }
        for section, attrs in sections.items():
            values = {}
            for attr in attrs:
                value = getattr(parsed_args, attr, None)
                if value is not None:
                    values[attr] = value
            if values:
                cli_config[section] = values

        # G(n,M) replaces G(n,p) when an exact tie count is requested
        if "edges" in cli_config.get("generator", {}):
            cli_config["generator"].setdefault("probability", None)

        return cli_config

    def save_configuration(self, config: TieWebConfig, file_path: str) -> None:
        """
        Save configuration to JSON file.

        Args:
            config: Configuration instance to save
            file_path: Path to save configuration file
        """
        config_dict = self._serialize_configuration(config)

        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(config_dict, f, indent=2, ensure_ascii=False)

        self.logger.info(f"Configuration saved to {file_path}")

    def _merge_configurations(self, base_config: Dict, overrides: Dict) -> Dict:
        """
        Merge configuration dictionaries with proper precedence.

        Args:
            base_config: Base configuration dictionary
            overrides: Override configuration dictionary

        Returns:
            Dict: Merged configuration dictionary
        """
        merged = base_config.copy()

        for key, value in overrides.items():
            if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
                merged[key] = self._merge_configurations(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _serialize_configuration(self, config: TieWebConfig) -> Dict[str, Any]:
        """Serialize configuration to a JSON-compatible dictionary."""
        return asdict(config)


def get_configuration_manager() -> ConfigurationManager:
    """
    Get a configured instance of ConfigurationManager.

    Returns:
        ConfigurationManager: Ready-to-use configuration manager
    """
    return ConfigurationManager()


def load_config_from_file(file_path: str) -> TieWebConfig:
    """
    Load configuration from a JSON file.

    Args:
        file_path: Path to configuration file

    Returns:
        TieWebConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If configuration is invalid
    """
    return get_configuration_manager().load_configuration(config_file=file_path)
