"""
Random network generators.

Every generator returns a fresh Graph whose vertices are numbered 1..n and
placed evenly on a circle in the middle of the canvas. All generators take a
``directed`` flag, a ``diag`` flag allowing self-loops and a ``seed`` for
reproducible output.

Models whose ties are symmetric by construction (ring lattices, regular and
small-world networks, lattices) produce reciprocated arc pairs when a
directed network is requested.
"""

import itertools
import logging
import math
import random
from typing import List, Optional, Set, Tuple

import numpy as np

from ..config import GENERATOR_MODELS, GeneratorConfig, LayoutConfig
from ..core.exceptions import InvalidParameterError
from ..core.graph import Graph
from ..utils.validation import (
    CancellationToken,
    ProgressObserver,
    ProgressTracker,
    validate_even,
    validate_non_negative_integer,
    validate_positive_integer,
    validate_range,
)

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]


def _new_graph(n: int, directed: bool, name: str, layout: Optional[LayoutConfig]) -> Graph:
    """Create ``n`` vertices placed evenly on a circle."""
    layout = layout or LayoutConfig()
    graph = Graph(directed=directed, name=name)
    center_x = layout.canvas_width / 2
    center_y = layout.canvas_height / 2
    radius = min(layout.canvas_width, layout.canvas_height) / 2 - layout.margin
    for i in range(n):
        angle = 2 * math.pi * i / n
        graph.add_vertex(
            x=center_x + radius * math.cos(angle),
            y=center_y + radius * math.sin(angle),
            size=layout.base_node_size,
        )
    return graph


def _add_pairs(graph: Graph, pairs, mutual: bool) -> None:
    """Add ties; in directed graphs ``mutual`` adds each pair as two arcs."""
    for a, b in pairs:
        graph.add_edge(a, b)
        if mutual and graph.directed and a != b:
            graph.add_edge(b, a)


def _add_self_loops(graph: Graph) -> None:
    for vertex_id in graph.vertex_ids():
        graph.add_edge(vertex_id, vertex_id)


def _ring_pairs(n: int, degree: int) -> List[Pair]:
    """Unordered pairs of a ring lattice: each vertex tied to degree/2 neighbors per side."""
    pairs = []
    for i in range(1, n + 1):
        for step in range(1, degree // 2 + 1):
            j = (i - 1 + step) % n + 1
            pairs.append((min(i, j), max(i, j)))
    return sorted(set(pairs))


def _validate_lattice_degree(n: int, degree: int) -> None:
    validate_positive_integer(n, "nodes")
    validate_positive_integer(degree, "degree")
    validate_even(degree, "degree")
    if degree >= n:
        raise InvalidParameterError(f"degree must be smaller than the number of nodes ({n}), got {degree}", "degree")


def erdos_renyi(
    n: int,
    probability: Optional[float] = None,
    edges: Optional[int] = None,
    directed: bool = False,
    diag: bool = False,
    seed: Optional[int] = None,
    layout: Optional[LayoutConfig] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> Graph:
    """
    Erdős–Rényi random network, G(n, p) or G(n, M).

    Args:
        n: Number of actors
        probability: Independent tie probability (G(n, p))
        edges: Exact number of ties (G(n, M))
        directed: Generate arcs instead of undirected ties
        diag: Allow self-loops
        seed: Random seed
        layout: Canvas used to place the actors
        observer: Progress callback
        token: Cancellation token

    Returns:
        Graph: The generated network

    Raises:
        InvalidParameterError: If neither or both of probability and edges are
            given, p is outside [0, 1] or M exceeds the number of possible ties
    """
    validate_positive_integer(n, "nodes")
    if (probability is None) == (edges is None):
        raise InvalidParameterError("Give exactly one of probability and edges", "probability")

    rng = random.Random(seed)
    graph = _new_graph(n, directed, "Erdos-Renyi", layout)
    ids = graph.vertex_ids()
    if directed:
        candidates = list(itertools.permutations(ids, 2))
    else:
        candidates = list(itertools.combinations(ids, 2))
    if diag:
        candidates.extend((v, v) for v in ids)

    if probability is not None:
        validate_range(probability, "probability", 0.0, 1.0)
        chosen = []
        with ProgressTracker(len(candidates), f"G({n}, p={probability:g}) generation",
                             logger, observer, token) as tracker:
            for position, pair in enumerate(candidates, start=1):
                if rng.random() < probability:
                    chosen.append(pair)
                if position % max(1, n) == 0:
                    tracker.update(position)
    else:
        validate_non_negative_integer(edges, "edges")
        if edges > len(candidates):
            raise InvalidParameterError(
                f"edges must be at most {len(candidates)} for {n} nodes, got {edges}", "edges"
            )
        chosen = sorted(rng.sample(candidates, edges))

    _add_pairs(graph, chosen, mutual=False)
    logger.info(f"Generated Erdos-Renyi network: {n} nodes, {graph.edge_count()} ties")
    return graph


def ring_lattice(
    n: int,
    degree: int,
    directed: bool = False,
    diag: bool = False,
    layout: Optional[LayoutConfig] = None,
) -> Graph:
    """
    Ring lattice: every actor tied to its degree/2 nearest neighbors on each side.

    Raises:
        InvalidParameterError: If degree is odd, not positive or not below n
    """
    _validate_lattice_degree(n, degree)
    graph = _new_graph(n, directed, "Ring lattice", layout)
    _add_pairs(graph, _ring_pairs(n, degree), mutual=True)
    if diag:
        _add_self_loops(graph)
    logger.info(f"Generated ring lattice: {n} nodes, degree {degree}")
    return graph


def watts_strogatz(
    n: int,
    degree: int,
    beta: float,
    directed: bool = False,
    diag: bool = False,
    seed: Optional[int] = None,
    layout: Optional[LayoutConfig] = None,
) -> Graph:
    """
    Watts–Strogatz small-world network.

    Starts from a ring lattice of even degree and rewires the far end of every
    tie to a uniformly chosen actor with probability beta, avoiding duplicate
    ties.

    Raises:
        InvalidParameterError: If degree is odd or not below n, or beta is outside [0, 1]
    """
    _validate_lattice_degree(n, degree)
    validate_range(beta, "beta", 0.0, 1.0)
    rng = random.Random(seed)

    pairs = _ring_pairs(n, degree)
    present: Set[frozenset] = {frozenset(pair) for pair in pairs}
    rewired: List[Pair] = []
    ids = list(range(1, n + 1))
    for a, b in pairs:
        if rng.random() < beta:
            options = [c for c in ids if c != a and frozenset((a, c)) not in present]
            if diag and frozenset((a,)) not in present:
                options.append(a)
            if options:
                c = rng.choice(options)
                present.discard(frozenset((a, b)))
                present.add(frozenset((a, c)))
                rewired.append((a, c))
                continue
        rewired.append((a, b))

    graph = _new_graph(n, directed, "Small world", layout)
    _add_pairs(graph, rewired, mutual=True)
    logger.info(f"Generated small-world network: {n} nodes, degree {degree}, beta {beta:g}")
    return graph


def regular(
    n: int,
    degree: int,
    directed: bool = False,
    diag: bool = False,
    seed: Optional[int] = None,
    layout: Optional[LayoutConfig] = None,
) -> Graph:
    """
    Random d-regular network.

    Built from a ring lattice and shuffled by degree-preserving tie swaps:
    ties (a, b) and (c, d) become (a, d) and (c, b) when neither exists yet.

    Raises:
        InvalidParameterError: If degree is odd (it is never rounded) or not below n
    """
    _validate_lattice_degree(n, degree)
    rng = random.Random(seed)
    pairs = _ring_pairs(n, degree)
    present = {frozenset(pair) for pair in pairs}

    for _ in range(len(pairs) * 10):
        if len(pairs) < 2:
            break
        x, y = rng.sample(range(len(pairs)), 2)
        a, b = pairs[x]
        c, d = pairs[y]
        if rng.random() < 0.5:
            c, d = d, c
        if len({a, b, c, d}) < 4:
            continue
        first, second = frozenset((a, d)), frozenset((c, b))
        if first in present or second in present:
            continue
        present -= {frozenset((a, b)), frozenset((c, d))}
        present |= {first, second}
        pairs[x] = (min(a, d), max(a, d))
        pairs[y] = (min(c, b), max(c, b))

    graph = _new_graph(n, directed, "Regular", layout)
    _add_pairs(graph, sorted(pairs), mutual=True)
    if diag:
        _add_self_loops(graph)
    logger.info(f"Generated {degree}-regular network: {n} nodes")
    return graph


def barabasi_albert(
    n: int,
    initial_nodes: int = 3,
    edges_per_step: int = 2,
    power: float = 1.0,
    zero_appeal: float = 1.0,
    directed: bool = False,
    diag: bool = False,
    seed: Optional[int] = None,
    layout: Optional[LayoutConfig] = None,
) -> Graph:
    """
    Barabási–Albert scale-free network.

    The first ``initial_nodes`` actors form a clique. Every further actor ties
    to ``edges_per_step`` distinct existing actors chosen with probability
    proportional to (degree + zero_appeal) ** power. In directed graphs the
    seed clique is mutual and each attachment is a single arc from the
    newcomer.

    Raises:
        InvalidParameterError: If initial_nodes < 1, edges_per_step < 1,
            edges_per_step > initial_nodes, n < initial_nodes or power/zero_appeal < 0
    """
    validate_positive_integer(n, "nodes")
    validate_positive_integer(initial_nodes, "initial_nodes")
    validate_positive_integer(edges_per_step, "edges_per_step")
    if edges_per_step > initial_nodes:
        raise InvalidParameterError(
            f"edges_per_step ({edges_per_step}) cannot exceed initial_nodes ({initial_nodes})",
            "edges_per_step",
        )
    if n < initial_nodes:
        raise InvalidParameterError(
            f"nodes ({n}) cannot be fewer than initial_nodes ({initial_nodes})", "nodes"
        )
    validate_range(power, "power", 0.0, math.inf)
    validate_range(zero_appeal, "zero_appeal", 0.0, math.inf)

    rng = random.Random(seed)
    graph = _new_graph(n, directed, "Scale-free", layout)
    degrees = np.zeros(n + 1)

    for a, b in itertools.combinations(range(1, initial_nodes + 1), 2):
        _add_pairs(graph, [(a, b)], mutual=True)
        degrees[a] += 1
        degrees[b] += 1

    for new in range(initial_nodes + 1, n + 1):
        existing = np.arange(1, new)
        appeal = (degrees[1:new] + zero_appeal) ** power
        if appeal.sum() <= 0:
            appeal = np.ones_like(appeal)
        targets: List[int] = []
        weights = appeal.tolist()
        candidates = existing.tolist()
        while len(targets) < edges_per_step:
            chosen = rng.choices(range(len(candidates)), weights=weights)[0]
            targets.append(candidates.pop(chosen))
            weights.pop(chosen)
            if not any(weights):
                weights = [1.0] * len(candidates)
        for target in targets:
            graph.add_edge(new, target)
            degrees[new] += 1
            degrees[target] += 1

    if diag:
        _add_self_loops(graph)
    logger.info(
        f"Generated scale-free network: {n} nodes, m0={initial_nodes}, "
        f"m={edges_per_step}, power={power:g}"
    )
    return graph


def lattice(
    length: int,
    dimension: int = 2,
    neighborhood: int = 1,
    circular: bool = False,
    directed: bool = False,
    diag: bool = False,
    layout: Optional[LayoutConfig] = None,
) -> Graph:
    """
    Regular lattice of ``length ** dimension`` actors.

    Actors are tied when their lattice distance (sum of coordinate steps,
    wrapping around when ``circular``) is at most ``neighborhood``.

    Args:
        length: Number of actors along each side
        dimension: Number of dimensions
        neighborhood: Neighborhood radius; 0 means 1
        circular: Wrap the boundaries of every dimension
        directed: Generate reciprocated arcs instead of undirected ties
        diag: Add a self-loop to every actor
        layout: Canvas used to place the actors

    Returns:
        Graph: The generated lattice

    Raises:
        InvalidParameterError: If length or dimension is not positive or neighborhood is negative
    """
    validate_positive_integer(length, "length")
    validate_positive_integer(dimension, "dimension")
    validate_non_negative_integer(neighborhood, "neighborhood")
    neighborhood = max(neighborhood, 1)

    n = length ** dimension
    coordinates = np.array(np.unravel_index(np.arange(n), (length,) * dimension)).T
    steps = np.abs(coordinates[:, None, :] - coordinates[None, :, :])
    if circular:
        steps = np.minimum(steps, length - steps)
    distances = steps.sum(axis=2)

    rows, cols = np.nonzero(np.triu((distances >= 1) & (distances <= neighborhood), k=1))
    graph = _new_graph(n, directed, "Lattice", layout)
    _add_pairs(graph, [(int(r) + 1, int(c) + 1) for r, c in zip(rows, cols)], mutual=True)
    if diag:
        _add_self_loops(graph)
    logger.info(
        f"Generated lattice: {n} nodes ({length}^{dimension}), neighborhood {neighborhood}, "
        f"{'circular' if circular else 'bounded'}"
    )
    return graph


def generate_network(
    config: GeneratorConfig,
    layout: Optional[LayoutConfig] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> Graph:
    """
    Build the network described by a generator configuration.

    Args:
        config: Model name and its parameters
        layout: Canvas used to place the actors
        observer: Progress callback (Erdős–Rényi only)
        token: Cancellation token (Erdős–Rényi only)

    Returns:
        Graph: The generated network

    Raises:
        InvalidParameterError: If the model parameters are invalid
    """
    common = {"directed": config.directed, "diag": config.diag, "layout": layout}
    if config.model == "erdos-renyi":
        return erdos_renyi(
            config.nodes, config.probability, config.edges, seed=config.seed,
            observer=observer, token=token, **common,
        )
    if config.model == "small-world":
        return watts_strogatz(config.nodes, config.degree, config.beta, seed=config.seed, **common)
    if config.model == "scale-free":
        return barabasi_albert(
            config.nodes, config.initial_nodes, config.edges_per_step, config.power,
            config.zero_appeal, seed=config.seed, **common,
        )
    if config.model == "regular":
        return regular(config.nodes, config.degree, seed=config.seed, **common)
    if config.model == "ring-lattice":
        return ring_lattice(config.nodes, config.degree, **common)
    if config.model == "lattice":
        return lattice(
            config.length, config.dimension, config.neighborhood, config.circular, **common
        )
    raise InvalidParameterError(
        f"Unknown generator model '{config.model}'. Must be one of: {GENERATOR_MODELS}", "model"
    )
