"""マッチ採点モジュール

2チーム(各2名)の9ホール対抗戦を採点する。

ハンディキャップのストロークはホール難易度データがないため、
ホール番号の若い順に配分する(コースのストロークインデックスは使わない)。
各ペアリングはホールごとのネット比較(勝ち1 / 引き分け0.5)と、
9ホール合計ネットの比較ボーナス1ポイントで採点し、1選手最大10ポイント。
"""

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .models import (
    HOLES_PER_ROUND,
    MatchResult,
    PairResult,
    Player,
    PlayerMatchResult,
)
from .rounding import round1, round_half_away

logger = logging.getLogger(__name__)

PLAYERS_PER_TEAM = 2
FORFEIT_POINTS = 10.0
BYE_ID_PREFIX = "__bye-"
BYE_NAME = "BYE"


class Lineup(BaseModel):
    """マッチに出場するチームの選手構成"""

    model_config = ConfigDict(frozen=True)

    team_id: str | None = None
    players: list[Player] = Field(default_factory=list)


class PairingOutcome(Enum):
    """ペアリングの出欠状況"""

    BOTH_ABSENT = "both_absent"
    A_ABSENT = "a_absent"
    B_ABSENT = "b_absent"
    BOTH_PRESENT = "both_present"


class ByePlayer(Player):
    """欠員補充用の選手(常に欠席扱い)"""


def is_bye(player: Player) -> bool:
    """BYE(欠員補充)の選手かどうか"""
    return isinstance(player, ByePlayer)


def _to_int_or_zero(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_float_or_zero(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def resolve_handicap(
    player: Player, handicaps_by_id: Mapping[str, float | None]
) -> float:
    """選手のハンディキャップを決める

    handicaps_by_id の値を優先し、なければ選手の current_handicap9、
    それもなければ0とする。並び順と採点の両方でこの値を使う。
    """
    value = handicaps_by_id.get(player.id)
    if value is None:
        value = player.current_handicap9
    return _to_float_or_zero(value)


def distribute_strokes(handicap: float) -> list[int]:
    """ハンディキャップのストロークを9ホールに配分する

    整数に四捨五入し、負の値は0とする。全ホールに strokes // 9 を与え、
    余りを1番ホールから順に1つずつ上乗せする。

    Args:
        handicap: 9ホール用ハンディキャップ

    Returns:
        list[int]: ホール順の配分ストローク(9要素)

    Examples:
        >>> distribute_strokes(10)
        [2, 1, 1, 1, 1, 1, 1, 1, 1]
    """
    strokes = max(0, round_half_away(_to_float_or_zero(handicap)))
    base, remainder = divmod(strokes, HOLES_PER_ROUND)
    return [base + 1 if i < remainder else base for i in range(HOLES_PER_ROUND)]


def compute_net_hole_scores(gross_hole_scores: Sequence, handicap: float) -> list[int]:
    """ホール別のネットスコアを求める

    Args:
        gross_hole_scores: ホール別グロス。欠けている・数値でないホールは0扱い
        handicap: 9ホール用ハンディキャップ

    Returns:
        list[int]: ホール別ネット(9要素)
    """
    strokes = distribute_strokes(handicap)
    gross = list(gross_hole_scores or [])
    nets = []
    for i in range(HOLES_PER_ROUND):
        value = gross[i] if i < len(gross) else 0
        nets.append(_to_int_or_zero(value) - strokes[i])
    return nets


def compare_hole(a_net: float, b_net: float) -> tuple[float, float]:
    """スコアを比較してポイントを配分する(少ない方が1、同点は0.5ずつ)"""
    if a_net < b_net:
        return 1.0, 0.0
    if a_net > b_net:
        return 0.0, 1.0
    return 0.5, 0.5


def _is_no_show(hole_scores) -> bool:
    if hole_scores is None or isinstance(hole_scores, (str, bytes)):
        return True
    if not isinstance(hole_scores, Sequence):
        return True
    return len(hole_scores) == 0


def classify_pairing(
    player_a: Player,
    player_b: Player,
    hole_scores_by_id: Mapping[str, Sequence | None],
) -> PairingOutcome:
    """ペアリングの出欠状況を判定する

    スコアが未入力または空の選手は欠席扱い。BYEは常に欠席。
    """
    a_absent = is_bye(player_a) or _is_no_show(hole_scores_by_id.get(player_a.id))
    b_absent = is_bye(player_b) or _is_no_show(hole_scores_by_id.get(player_b.id))
    if a_absent and b_absent:
        return PairingOutcome.BOTH_ABSENT
    if a_absent:
        return PairingOutcome.A_ABSENT
    if b_absent:
        return PairingOutcome.B_ABSENT
    return PairingOutcome.BOTH_PRESENT


def _absent(player: Player) -> PlayerMatchResult:
    return PlayerMatchResult(id=player.id, no_show=True)


def _forfeit_winner(player: Player, forfeit_points: float) -> PlayerMatchResult:
    return PlayerMatchResult(id=player.id, points=forfeit_points)


def _play_out(
    player_a: Player,
    player_b: Player,
    hole_scores_by_id: Mapping[str, Sequence | None],
    handicaps_by_id: Mapping[str, float | None],
) -> tuple[PlayerMatchResult, PlayerMatchResult]:
    a_net = compute_net_hole_scores(
        hole_scores_by_id[player_a.id], resolve_handicap(player_a, handicaps_by_id)
    )
    b_net = compute_net_hole_scores(
        hole_scores_by_id[player_b.id], resolve_handicap(player_b, handicaps_by_id)
    )

    a_hole_points = 0.0
    b_hole_points = 0.0
    for a_hole, b_hole in zip(a_net, b_net):
        a_point, b_point = compare_hole(a_hole, b_hole)
        a_hole_points += a_point
        b_hole_points += b_point

    a_total = sum(a_net)
    b_total = sum(b_net)
    a_bonus, b_bonus = compare_hole(a_total, b_total)

    return (
        PlayerMatchResult(
            id=player_a.id,
            hole_net=a_net,
            hole_points=round1(a_hole_points),
            total_net=a_total,
            points=round1(a_hole_points + a_bonus),
        ),
        PlayerMatchResult(
            id=player_b.id,
            hole_net=b_net,
            hole_points=round1(b_hole_points),
            total_net=b_total,
            points=round1(b_hole_points + b_bonus),
        ),
    )


def compute_pair_points(
    player_a: Player,
    player_b: Player,
    hole_scores_by_id: Mapping[str, Sequence | None],
    handicaps_by_id: Mapping[str, float | None],
    forfeit_points: float = FORFEIT_POINTS,
) -> PairResult:
    """1ペアリングを採点する

    Args:
        player_a: チームA側の選手
        player_b: チームB側の選手
        hole_scores_by_id: 選手ID -> ホール別グロス
        handicaps_by_id: 選手ID -> ハンディキャップ(未設定はキャッシュ値、なければ0)
        forfeit_points: 相手欠席時に与える固定ポイント

    Returns:
        PairResult: ペアリングの結果
    """
    outcome = classify_pairing(player_a, player_b, hole_scores_by_id)
    if outcome is PairingOutcome.BOTH_ABSENT:
        a_result, b_result = _absent(player_a), _absent(player_b)
    elif outcome is PairingOutcome.A_ABSENT:
        a_result, b_result = _absent(player_a), _forfeit_winner(player_b, forfeit_points)
    elif outcome is PairingOutcome.B_ABSENT:
        a_result, b_result = _forfeit_winner(player_a, forfeit_points), _absent(player_b)
    else:
        a_result, b_result = _play_out(
            player_a, player_b, hole_scores_by_id, handicaps_by_id
        )

    logger.debug(
        "ペアリング %s vs %s (%s): %.1f - %.1f",
        player_a.id,
        player_b.id,
        outcome.value,
        a_result.points,
        b_result.points,
    )
    return PairResult(
        player_a_id=player_a.id,
        player_b_id=player_b.id,
        player_a=a_result,
        player_b=b_result,
    )


def _bye_player(slot: int) -> Player:
    return ByePlayer(id=f"{BYE_ID_PREFIX}{slot}", name=BYE_NAME)


def pair_players_by_handicap(
    players: Sequence[Player],
    handicaps_by_id: Mapping[str, float | None] | None = None,
    slots: int = PLAYERS_PER_TEAM,
) -> list[Player]:
    """選手をハンディキャップの昇順に並べ、欠員をBYEで補う

    ハンディキャップは handicaps_by_id を優先し、なければ選手の
    current_handicap9、それもなければ0とする。同値は入力順を保つ。

    Args:
        players: チームの選手
        handicaps_by_id: 選手ID -> ハンディキャップ
        slots: 補充後の人数

    Returns:
        list[Player]: 並べ替え・補充済みの選手
    """
    handicaps_by_id = handicaps_by_id or {}
    ordered = sorted(players, key=lambda p: resolve_handicap(p, handicaps_by_id))
    while len(ordered) < slots:
        ordered.append(_bye_player(len(ordered)))
    return ordered


def handicaps_from_players(players: Sequence[Player]) -> dict[str, float]:
    """選手のキャッシュ済みハンディキャップを辞書にする(未設定は0)"""
    return {p.id: p.current_handicap9 or 0.0 for p in players}


def compute_match_result(
    team_a: Lineup,
    team_b: Lineup,
    hole_scores_by_id: Mapping[str, Sequence | None],
    handicaps_by_id: Mapping[str, float | None],
    forfeit_points: float = FORFEIT_POINTS,
) -> MatchResult:
    """マッチ全体を採点する

    各チームの先頭2名をハンディキャップ順に並べ、同順位同士を対戦させる。
    結果は保存しない(永続化は呼び出し側の責務)。

    Args:
        team_a: チームAの構成
        team_b: チームBの構成
        hole_scores_by_id: 選手ID -> ホール別グロス(未入力・空は欠席)
        handicaps_by_id: 選手ID -> ハンディキャップ(未設定はキャッシュ値、なければ0)
        forfeit_points: 相手欠席時に与える固定ポイント

    Returns:
        MatchResult: マッチ結果
    """
    a_sorted = pair_players_by_handicap(
        team_a.players[:PLAYERS_PER_TEAM], handicaps_by_id
    )
    b_sorted = pair_players_by_handicap(
        team_b.players[:PLAYERS_PER_TEAM], handicaps_by_id
    )

    pairs = []
    team_a_score = 0.0
    team_b_score = 0.0
    for player_a, player_b in zip(a_sorted, b_sorted):
        pair = compute_pair_points(
            player_a, player_b, hole_scores_by_id, handicaps_by_id, forfeit_points
        )
        pairs.append(pair)
        team_a_score += pair.player_a.points
        team_b_score += pair.player_b.points

    result = MatchResult(
        team_a_id=team_a.team_id,
        team_b_id=team_b.team_id,
        date=datetime.now(timezone.utc),
        pairs=pairs,
        team_a_score=round1(team_a_score),
        team_b_score=round1(team_b_score),
    )
    logger.debug(
        "マッチ採点: %s %.1f - %.1f %s",
        team_a.team_id,
        result.team_a_score,
        result.team_b_score,
        team_b.team_id,
    )
    return result
