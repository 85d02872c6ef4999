"""Unit tests for /src/ai/factory.py"""

import pytest

from src.ai.factory import create_engine, parse_engine_kind
from src.ai.heuristic_engine import HeuristicEngine
from src.ai.llm_engine import LLMEngine
from src.ai.random_engine import RandomEngine
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Difficulty, EngineKind


class EchoClient:
    def complete(self, system_prompt: str, prompt: str) -> str:
        return "e2e4"


@pytest.mark.parametrize(
    "name, kind",
    [
        ("random", EngineKind.RANDOM),
        ("heuristic", EngineKind.HEURISTIC),
        ("minimax", EngineKind.HEURISTIC),
        (" LLM ", EngineKind.LLM),
        (EngineKind.HEURISTIC, EngineKind.HEURISTIC),
    ],
)
def test_parse_engine_kind(name: str, kind: EngineKind) -> None:
    assert parse_engine_kind(name) == kind


def test_unknown_engine() -> None:
    with pytest.raises(InvalidRequestError):
        parse_engine_kind("stockfish")


def test_create_engines() -> None:
    assert isinstance(create_engine(), RandomEngine)
    heuristic = create_engine("minimax", Difficulty.HARD, think_ms_per_ply=0)
    assert isinstance(heuristic, HeuristicEngine)
    assert heuristic.depth == 4
    assert heuristic.difficulty == Difficulty.HARD


def test_llm_engine_needs_a_client() -> None:
    assert isinstance(create_engine("llm"), RandomEngine)
    assert isinstance(create_engine("llm", llm_client=EchoClient()), LLMEngine)


def test_think_time_gets_passed_on() -> None:
    engine = create_engine("random", max_think_ms=0)
    assert isinstance(engine, RandomEngine)
    assert engine.max_think_ms == 0
