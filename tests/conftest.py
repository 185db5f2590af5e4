# Pytest configuration for StrikeZone tests
"""
Shared fixtures: a small Lahman dataset built through the seeding loader,
and scripted LLM providers that replay canned completions.
"""

import os
import sys
from pathlib import Path
from typing import List, Union

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.data import LahmanLoader
from core.engine import (
    BaseLLMProvider,
    InferencePipeline,
    LLMConfig,
    LLMError,
    LLMProvider,
    LLMRequest,
    LLMResponse,
    PipelineConfig,
)


# ============================================
# CSV Fixtures
# ============================================

PEOPLE_CSV = """\
playerID,birthYear,nameFirst,nameLast,bats,throws
colege01,1990,Gerrit,Cole,R,R
degroja01,1988,Jacob,deGrom,L,R
kirbyge01,1998,George,Kirby,R,R
snellbl01,1992,Blake,Snell,L,L
castilu02,1992,Luis,Castillo,R,R
obrieda01,1995,Dan,O'Brien,R,R
"""

TEAMS_CSV = """\
yearID,lgID,teamID,franchID,divID,Rank,name,G,W,L,park
2017,AL,NYA,NYY,E,2,New York Yankees,162,91,71,Yankee Stadium III
2019,AL,SEA,SEA,W,5,Seattle Mariners,162,68,94,T-Mobile Park
2023,AL,NYA,NYY,E,4,New York Yankees,162,82,80,Yankee Stadium III
2024,AL,NYA,NYY,E,1,New York Yankees,162,94,68,Yankee Stadium III
2024,AL,SEA,SEA,W,2,Seattle Mariners,162,85,77,T-Mobile Park
"""

PITCHING_CSV = """\
playerID,yearID,stint,teamID,lgID,W,L,G,GS,CG,SHO,SV,IPouts,H,ER,HR,BB,SO,BAOpp,ERA
colege01,2016,1,PIT,NL,7,10,21,21,0,0,0,348,138,45,7,36,98,0.28,3.88
degroja01,2018,1,NYN,NL,10,9,32,32,1,0,0,651,152,41,10,46,269,0.2,1.70
degroja01,2019,1,NYN,NL,11,8,32,32,0,0,0,613,154,55,19,44,255,0.21,2.43
colege01,2023,1,NYA,AL,15,4,33,33,2,2,0,627,157,61,20,48,222,0.21,2.63
snellbl01,2023,1,SDN,NL,14,9,32,32,0,0,0,540,115,44,15,99,234,0.18,2.25
kirbyge01,2023,1,SEA,AL,13,10,31,31,1,0,0,572,179,67,22,19,172,0.25,3.35
castilu02,2023,1,SEA,AL,14,9,33,33,0,0,0,593,166,65,28,56,219,0.22,3.34
ghostpl01,2023,1,SEA,AL,1,0,5,0,0,0,0,30,10,5,1,3,8,0.25,4.50
obrieda01,2024,1,SEA,AL,0,0,3,0,0,0,0,9,4,2,0,1,2,,
"""


@pytest.fixture
def lahman_csv_dir(tmp_path):
    """Directory holding People.csv, Teams.csv and Pitching.csv."""
    csv_dir = tmp_path / "raw"
    csv_dir.mkdir()
    (csv_dir / "People.csv").write_text(PEOPLE_CSV, encoding="utf-8")
    (csv_dir / "Teams.csv").write_text(TEAMS_CSV, encoding="utf-8")
    (csv_dir / "Pitching.csv").write_text(PITCHING_CSV, encoding="utf-8")
    return csv_dir


@pytest.fixture
def lahman_db(tmp_path, lahman_csv_dir):
    """SQLite dataset seeded from the CSV fixtures (2018-2024)."""
    db_path = tmp_path / "lahman.db"
    loader = LahmanLoader(str(db_path))
    results = loader.load(loader.read_directory(str(lahman_csv_dir)))
    assert all(r.success for r in results.values())
    return str(db_path)


# ============================================
# Scripted LLM Provider
# ============================================

class ScriptedProvider(BaseLLMProvider):
    """Replays canned completions (or raises canned errors) in order."""

    def __init__(self, responses: List[Union[str, Exception]] = None):
        super().__init__(LLMConfig(provider=LLMProvider.MOCK))
        self.responses = list(responses or [])
        self.requests: List[LLMRequest] = []

    def generate(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        if not self.responses:
            raise LLMError("No scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item,
            model="scripted-model",
            provider="scripted",
            generation_time_ms=0.0
        )

    def is_available(self) -> bool:
        return True

    def get_provider_name(self) -> str:
        return "scripted"

    def get_model_name(self) -> str:
        return "scripted-model"


@pytest.fixture
def scripted_provider():
    """Factory: scripted_provider("SELECT ...", "answer text", LLMError(...))."""
    def _make(*responses):
        return ScriptedProvider(list(responses))
    return _make


@pytest.fixture
def make_pipeline(lahman_db):
    """Factory for pipelines wired to the fixture dataset."""
    def _make(provider, **overrides):
        config = PipelineConfig(db_path=lahman_db, **overrides)
        return InferencePipeline(config=config, provider=provider)
    return _make


# ============================================
# Live API
# ============================================

def pytest_collection_modifyitems(config, items):
    """Skip live_api tests unless a real Anthropic key is configured."""
    if os.getenv("ANTHROPIC_API_KEY"):
        return
    skip_live = pytest.mark.skip(reason="ANTHROPIC_API_KEY not set")
    for item in items:
        if "live_api" in item.keywords:
            item.add_marker(skip_live)
