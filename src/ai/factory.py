"""Select a move-selection engine by name"""

from __future__ import annotations

import logging
import random
from typing import Optional

from src.ai.base import Engine
from src.ai.heuristic_engine import DEFAULT_THINK_MS_PER_PLY, HeuristicEngine
from src.ai.llm_engine import LLMClient, LLMEngine
from src.ai.random_engine import DEFAULT_MAX_THINK_MS, RandomEngine
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Difficulty, EngineKind

logger = logging.getLogger(__name__)

# "minimax" is the name the heuristic engine went by in earlier API versions
ENGINE_ALIASES: dict[str, EngineKind] = {
    "minimax": EngineKind.HEURISTIC,
}


def parse_engine_kind(name: str) -> EngineKind:
    """EngineKind members are strings too, so these pass through unchanged."""
    name = name.strip().lower()
    if name in ENGINE_ALIASES:
        return ENGINE_ALIASES[name]
    try:
        return EngineKind(name)
    except ValueError as e:
        raise InvalidRequestError(
            f"Unknown engine {name!r}. Pick one from {', '.join(kind.value for kind in EngineKind)}"
        ) from e


def create_engine(
    kind: str = EngineKind.RANDOM,
    difficulty: Difficulty = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
    llm_client: Optional[LLMClient] = None,
    max_think_ms: int = DEFAULT_MAX_THINK_MS,
    think_ms_per_ply: int = DEFAULT_THINK_MS_PER_PLY,
) -> Engine:
    """
    * random (default)
    * heuristic (alias: minimax)
    * llm: needs a client. Without one, the random engine gets used.
    """
    engine_kind = parse_engine_kind(kind)

    if engine_kind == EngineKind.HEURISTIC:
        return HeuristicEngine(difficulty, think_ms_per_ply=think_ms_per_ply)

    random_engine = RandomEngine(difficulty, rng=rng, max_think_ms=max_think_ms)
    if engine_kind == EngineKind.LLM:
        if llm_client is not None:
            return LLMEngine(llm_client, difficulty, fallback=random_engine)
        logger.warning("No LLM client configured, using the random engine instead")

    return random_engine
