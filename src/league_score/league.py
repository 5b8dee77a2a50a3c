"""リーグ名簿モジュール

YAMLファイルからチームと選手の名簿を読み込む。

ファイル形式:
    teams:
      - id: team-1
        name: Lake Lovers 1
        season_points: 12.5
        player_ids: [p1, p2]
    players:
      - id: p1
        name: Player 1
        team_id: team-1
        current_handicap9: 3.2
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .match import PLAYERS_PER_TEAM, Lineup
from .models import Player, Team

logger = logging.getLogger(__name__)


class LeagueDataError(Exception):
    """名簿データ不正時の例外"""

    pass


class LeagueRoster:
    """リーグ名簿クラス"""

    def __init__(self, teams: list[Team], players: list[Player]):
        """初期化

        Args:
            teams: チーム一覧
            players: 選手一覧
        """
        self.teams = teams
        self.players = players
        self._teams_by_id = {t.id: t for t in teams}
        self._players_by_id = {p.id: p for p in players}

    @classmethod
    def load(cls, path: Path) -> "LeagueRoster":
        """YAMLファイルから名簿を読み込む

        Args:
            path: 名簿ファイルのパス

        Returns:
            LeagueRoster: 読み込んだ名簿

        Raises:
            LeagueDataError: ファイル構造や項目が不正な場合
        """
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise LeagueDataError(f"名簿ファイルの形式が不正です: {path}")

        try:
            teams = [Team(**item) for item in data.get("teams") or []]
            players = [Player(**item) for item in data.get("players") or []]
        except (TypeError, ValidationError) as e:
            raise LeagueDataError(f"名簿の項目が不正です: {path}") from e

        logger.info(
            "名簿を読み込みました: %s (チーム%d件, 選手%d件)",
            path,
            len(teams),
            len(players),
        )
        return cls(teams, players)

    def save(self, path: Path) -> None:
        """名簿をYAMLファイルに書き出す

        Args:
            path: 出力先パス
        """
        data = {
            "teams": [t.model_dump() for t in self.teams],
            "players": [p.model_dump() for p in self.players],
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
        logger.info("名簿を保存しました: %s", path)

    def team(self, team_id: str) -> Team:
        """チームを取得する

        Raises:
            LeagueDataError: 未登録のチームIDの場合
        """
        try:
            return self._teams_by_id[team_id]
        except KeyError:
            raise LeagueDataError(f"チームが見つかりません: {team_id}") from None

    def players_for_team(self, team_id: str) -> list[Player]:
        """チームの出場選手を取得する

        player_ids の指定があればその順で最大2名、なければ team_id が一致する
        選手の先頭2名。名簿にない選手IDは無視する。
        """
        team = self.team(team_id)
        if team.player_ids:
            players = [
                self._players_by_id[pid]
                for pid in team.player_ids
                if pid in self._players_by_id
            ]
        else:
            players = [p for p in self.players if p.team_id == team_id]
        return players[:PLAYERS_PER_TEAM]

    def lineup(self, team_id: str) -> Lineup:
        """マッチ採点用のチーム構成を作る"""
        return Lineup(team_id=team_id, players=self.players_for_team(team_id))

    def replace_teams(self, teams: list[Team]) -> "LeagueRoster":
        """チーム一覧を差し替えた新しい名簿を返す"""
        return LeagueRoster(teams, self.players)
