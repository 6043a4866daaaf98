"""
Force-directed layout.

A fixed-step physics relaxation in the style of d3-force: link springs,
many-body repulsion capped at a maximum distance, a centering force and
collision resolution. Runs a fixed number of ticks, never to convergence, so
the same seed and the same iteration count always give the same positions.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from kgview.common.errors import LayoutFailure
from kgview.common.types import KGId
from kgview.config import LayoutConfig
from kgview.model.graph import GraphEdge, GraphNode, NodeKind

logger = logging.getLogger(__name__)

# seed region (fraction of width/height) and spread per node kind
SEED_REGIONS = {
    NodeKind.CLASS: (0.3, 0.3, 100.0),
    NodeKind.INDIVIDUAL: (0.7, 0.7, 100.0),
    NodeKind.ATTRIBUTE: (0.7, 0.7, 100.0),
    NodeKind.ENTITY: (0.5, 0.5, 200.0),
}

_JIGGLE = 1e-6


def seed_positions(nodes: Sequence[GraphNode], config: LayoutConfig, rng: np.random.Generator) -> np.ndarray:
    pos = np.empty((len(nodes), 2), dtype=float)
    for i, node in enumerate(nodes):
        fx, fy, spread = SEED_REGIONS[node.kind]
        jitter = (rng.random(2) - 0.5) * spread
        pos[i] = (config.width * fx + jitter[0], config.height * fy + jitter[1])
    return pos


class ForceSimulation:
    """
    Simulation state for one layout call.

    `step(n)` advances n ticks, so callers can run the simulation in chunks
    (or in a worker thread) and stop early through `run(cancel=...)`.
    """

    def __init__(self, nodes: Sequence[GraphNode], edges: Sequence[GraphEdge],
                 config: Optional[LayoutConfig] = None, seed: Optional[int] = None):
        self.config = config or LayoutConfig()
        self.ids: List[KGId] = [n.id for n in nodes]
        index = {node_id: i for i, node_id in enumerate(self.ids)}

        links = [
            (index[e.source], index[e.target])
            for e in edges
            if e.source in index and e.target in index and e.source != e.target
        ]
        self.links = np.array(links, dtype=int).reshape(-1, 2)
        degree = np.bincount(self.links.ravel(), minlength=len(self.ids)).astype(float)
        if len(self.links):
            s, t = self.links[:, 0], self.links[:, 1]
            self.bias = degree[s] / (degree[s] + degree[t])
        else:
            self.bias = np.empty(0)

        self.rng = np.random.default_rng(self.config.seed if seed is None else seed)
        self.pos = seed_positions(nodes, self.config, self.rng)
        self.vel = np.zeros_like(self.pos)

        self.alpha = 1.0
        iterations = max(self.config.iterations, 1)
        self.alpha_decay = 1.0 - self.config.alpha_min ** (1.0 / iterations)
        self.ticks = 0

    def __len__(self) -> int:
        return len(self.ids)

    def _jiggle(self, shape) -> np.ndarray:
        return (self.rng.random(shape) - 0.5) * _JIGGLE

    def _apply_links(self) -> None:
        if not len(self.links):
            return
        cfg = self.config
        s, t = self.links[:, 0], self.links[:, 1]
        delta = (self.pos[t] + self.vel[t]) - (self.pos[s] + self.vel[s])
        dist = np.hypot(delta[:, 0], delta[:, 1])
        zero = dist == 0
        if zero.any():
            delta[zero] = self._jiggle((int(zero.sum()), 2))
            dist = np.hypot(delta[:, 0], delta[:, 1])
        scale = (dist - cfg.edge_rest_length) / dist * self.alpha * cfg.link_strength
        move = delta * scale[:, None]
        np.add.at(self.vel, t, -move * self.bias[:, None])
        np.add.at(self.vel, s, move * (1.0 - self.bias)[:, None])

    def _pairwise(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        # delta[i, j] = points[j] - points[i]
        delta = points[None, :, :] - points[:, None, :]
        d2 = np.einsum("ijk,ijk->ij", delta, delta)
        coincident = d2 == 0
        np.fill_diagonal(coincident, False)
        if coincident.any():
            delta[coincident] = self._jiggle((int(coincident.sum()), 2))
            d2 = np.einsum("ijk,ijk->ij", delta, delta)
        return delta, d2

    def _apply_charge(self) -> None:
        cfg = self.config
        delta, d2 = self._pairwise(self.pos)
        mask = d2 < cfg.max_interaction_distance ** 2
        np.fill_diagonal(mask, False)
        weight = np.where(mask, cfg.charge_strength * self.alpha / np.maximum(d2, 1.0), 0.0)
        self.vel += np.einsum("ijk,ij->ik", delta, weight)

    def _apply_center(self) -> None:
        center = np.array([self.config.width / 2.0, self.config.height / 2.0])
        self.pos -= self.pos.mean(axis=0) - center

    def _apply_collision(self) -> None:
        cfg = self.config
        radius = cfg.min_node_separation
        predicted = self.pos + self.vel
        delta, d2 = self._pairwise(predicted)
        reach = 2.0 * radius
        overlap = d2 < reach ** 2
        np.fill_diagonal(overlap, False)
        if not overlap.any():
            return
        dist = np.sqrt(np.where(overlap, d2, 1.0))
        scale = np.where(overlap, (reach - dist) / dist * cfg.collision_strength, 0.0)
        # equal radii, so each side of a pair takes half of the push
        self.vel -= 0.5 * np.einsum("ijk,ij->ik", delta, scale)

    def tick(self) -> None:
        self.alpha += (0.0 - self.alpha) * self.alpha_decay
        self._apply_links()
        self._apply_charge()
        self._apply_center()
        self._apply_collision()
        self.vel *= 1.0 - self.config.velocity_decay
        self.pos += self.vel
        self.ticks += 1

    def step(self, n: int = 1) -> None:
        if not len(self.ids):
            self.ticks += n
            return
        for _ in range(n):
            self.tick()

    def run(self, iterations: Optional[int] = None, cancel: Optional[threading.Event] = None,
            chunk: int = 25) -> bool:
        """Advance the remaining ticks. Returns False if cancelled before the end."""
        total = self.config.iterations if iterations is None else iterations
        while self.ticks < total:
            if cancel is not None and cancel.is_set():
                logger.debug(f"Force simulation cancelled after {self.ticks} ticks")
                return False
            self.step(min(chunk, total - self.ticks))
        return True

    def positions(self) -> Dict[KGId, Tuple[float, float]]:
        if not np.all(np.isfinite(self.pos)):
            raise LayoutFailure("force", "simulation diverged")
        offset = self.config.node_center_offset
        return {
            node_id: (float(x) - offset, float(y) - offset)
            for node_id, (x, y) in zip(self.ids, self.pos)
        }


def force_layout(nodes: Sequence[GraphNode], edges: Sequence[GraphEdge],
                 config: Optional[LayoutConfig] = None, seed: Optional[int] = None,
                 cancel: Optional[threading.Event] = None) -> List[GraphNode]:
    """Nodes with force-directed positions; same ids, same order."""
    sim = ForceSimulation(nodes, edges, config, seed=seed)
    sim.run(cancel=cancel)
    positions = sim.positions()
    logger.debug(f"Force layout placed {len(positions)} nodes in {sim.ticks} ticks")
    return [n.moved_to(*positions[n.id]) for n in nodes]
