"""順位集計モジュール

マッチ結果のシーズンポイント反映と、順位表・ディファレンシャル集計を提供する。
"""

from collections.abc import Iterable, Sequence

from .models import MatchResult, Player, Round, Team
from .rounding import round1


def apply_match_result(teams: Sequence[Team], result: MatchResult) -> list[Team]:
    """マッチ結果のポイントを両チームのシーズンポイントに加算する

    元のTeamは変更せず、更新後のコピーを返す。対象外のチームはそのまま。

    Args:
        teams: チーム一覧
        result: マッチ結果

    Returns:
        list[Team]: 更新後のチーム一覧(入力と同じ順)
    """
    earned = {
        result.team_a_id: result.team_a_score,
        result.team_b_id: result.team_b_score,
    }
    updated = []
    for team in teams:
        if team.id in earned:
            points = round1(team.season_points + earned[team.id])
            team = team.model_copy(update={"season_points": points})
        updated.append(team)
    return updated


def team_standings(teams: Iterable[Team]) -> list[Team]:
    """シーズンポイントの多い順に並べる(同点は入力順)"""
    return sorted(teams, key=lambda t: t.season_points, reverse=True)


def differential_leaderboard(
    rounds: Iterable[Round],
    players: Iterable[Player],
) -> list[tuple[str, int]]:
    """チームごとにディファレンシャルを合計する(少ないほど上位)

    所属不明の選手のラウンドは集計しない。

    Args:
        rounds: 集計対象のラウンド
        players: 選手一覧

    Returns:
        list[tuple[str, int]]: (チームID, 合計ディファレンシャル) の昇順
    """
    team_of = {p.id: p.team_id for p in players}
    totals: dict[str, int] = {}
    for r in rounds:
        team_id = team_of.get(r.player_id)
        if not team_id:
            continue
        totals[team_id] = totals.get(team_id, 0) + r.resolved_differential()
    return sorted(totals.items(), key=lambda item: item[1])
