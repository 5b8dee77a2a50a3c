"""テスト共通フィクスチャ"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

from league_score.match import Lineup
from league_score.models import Player, Round, Team

BASE_DATE = datetime(2025, 6, 1, 18, 0, tzinfo=timezone.utc)


def make_round(
    player_id: str,
    differential: int | None,
    days_ago: int = 0,
    course_par: int | None = 36,
) -> Round:
    """ディファレンシャル指定でラウンドを作る(ホールは均等に近く配分)"""
    gross = (course_par or 36) + (differential or 0)
    holes = [gross // 9] * 9
    for i in range(gross % 9):
        holes[i] += 1
    return Round(
        player_id=player_id,
        date=BASE_DATE - timedelta(days=days_ago),
        course_par=course_par,
        hole_scores=holes,
        gross_score=gross,
        differential=differential,
    )


@pytest.fixture
def players() -> list[Player]:
    """2チーム4名の選手"""
    return [
        Player(id="p1", name="Player 1", team_id="team-1", current_handicap9=12.0),
        Player(id="p2", name="Player 2", team_id="team-1", current_handicap9=5.0),
        Player(id="p3", name="Player 3", team_id="team-2", current_handicap9=3.0),
        Player(id="p4", name="Player 4", team_id="team-2", current_handicap9=9.0),
    ]


@pytest.fixture
def teams() -> list[Team]:
    """2チーム"""
    return [
        Team(id="team-1", name="Lake Lovers 1", season_points=10.0, player_ids=["p1", "p2"]),
        Team(id="team-2", name="Lake Lovers 2", season_points=25.5, player_ids=["p3", "p4"]),
    ]


@pytest.fixture
def lineup_a(players: list[Player]) -> Lineup:
    return Lineup(team_id="team-1", players=players[:2])


@pytest.fixture
def lineup_b(players: list[Player]) -> Lineup:
    return Lineup(team_id="team-2", players=players[2:])


@pytest.fixture
def sample_round() -> Round:
    """整合したラウンド(グロス41、パー36)"""
    return Round(
        player_id="p1",
        date=BASE_DATE,
        course_par=36,
        hole_scores=[5, 4, 6, 3, 5, 4, 5, 3, 6],
        gross_score=41,
        differential=5,
    )


@pytest.fixture
def league_file(tmp_path: Path, teams: list[Team], players: list[Player]) -> Path:
    """名簿YAMLファイル"""
    path = tmp_path / "league.yaml"
    data = {
        "teams": [t.model_dump() for t in teams],
        "players": [p.model_dump() for p in players],
    }
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def round_factory():
    """ディファレンシャル指定のラウンド生成関数"""
    return make_round
