"""ハンディキャップ算出モジュール

選手のラウンド履歴から9ホール用ハンディキャップインデックスを算出する。

ルール:
    直近最大20ラウンドのディファレンシャルを取り、5件に満たなければ
    0(パーでのプレー扱い)で補う。小さい順に5件を選んで平均し、
    小数第1位に丸める。
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from .models import DEFAULT_COURSE_PAR, HOLES_PER_ROUND, Round
from .rounding import round1

logger = logging.getLogger(__name__)

ROUND_WINDOW = 20
BEST_COUNT = 5


def differential_from_round(gross: int, par: int = DEFAULT_COURSE_PAR) -> int:
    """グロススコアとパーからディファレンシャルを求める"""
    return gross - par


def compute_handicap9_from_differentials(
    differentials: Sequence[float],
    window: int = ROUND_WINDOW,
    best_count: int = BEST_COUNT,
) -> float:
    """ディファレンシャル列からハンディキャップを算出する

    Args:
        differentials: 新しい順のディファレンシャル
        window: 対象とする直近ラウンド数
        best_count: 平均に使う件数

    Returns:
        float: ハンディキャップ(小数第1位)
    """
    recent = list(differentials[:window])
    while len(recent) < best_count:
        recent.append(0)
    best = sorted(recent)[:best_count]
    return round1(sum(best) / best_count)


def compute_handicap9(
    rounds_most_recent_first: Sequence[Round],
    window: int = ROUND_WINDOW,
    best_count: int = BEST_COUNT,
) -> float:
    """ラウンド履歴からハンディキャップを算出する

    履歴は新しい順に並んでいることが前提。並び替えは呼び出し側の責務で、
    ここでは検証しない。

    Args:
        rounds_most_recent_first: 1選手分のラウンド(新しい順)
        window: 対象とする直近ラウンド数
        best_count: 平均に使う件数

    Returns:
        float: ハンディキャップ(小数第1位)
    """
    recent = rounds_most_recent_first[:window]
    differentials = [r.resolved_differential() for r in recent]
    handicap = compute_handicap9_from_differentials(differentials, window, best_count)
    logger.debug("ハンディキャップ算出: %d件 -> %.1f", len(differentials), handicap)
    return handicap


def handicaps_for_players(
    player_ids: Iterable[str],
    rounds: Iterable[Round],
    window: int = ROUND_WINDOW,
    best_count: int = BEST_COUNT,
) -> dict[str, float]:
    """全選手のラウンド履歴から選手ごとのハンディキャップを算出する

    履歴は選手ごとにまとめ、日付の新しい順に並べてから算出する。
    ラウンドのない選手は 0.0 になる。

    Args:
        player_ids: 対象選手ID
        rounds: 並び順不問のラウンド履歴
        window: 対象とする直近ラウンド数
        best_count: 平均に使う件数

    Returns:
        dict[str, float]: 選手ID -> ハンディキャップ
    """
    by_player: dict[str, list[Round]] = defaultdict(list)
    for r in rounds:
        by_player[r.player_id].append(r)

    result = {}
    for player_id in player_ids:
        history = sorted(
            by_player.get(player_id, []), key=lambda r: r.date, reverse=True
        )
        result[player_id] = compute_handicap9(history, window, best_count)
    return result


def _score_or_zero(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def build_round(
    player_id: str,
    hole_scores: Sequence,
    course_par: int = DEFAULT_COURSE_PAR,
    date: datetime | None = None,
) -> Round:
    """入力されたホール別スコアからラウンドを作成する

    数値に変換できない値と負の値は0として扱う。9ホールに満たない分も0で埋める。

    Args:
        player_id: 選手ID
        hole_scores: ホール別グロススコア
        course_par: パー
        date: 提出日時(省略時は現在時刻UTC)

    Returns:
        Round: グロスとディファレンシャルが整合したラウンド
    """
    scores = [_score_or_zero(s) for s in list(hole_scores)[:HOLES_PER_ROUND]]
    scores += [0] * (HOLES_PER_ROUND - len(scores))
    gross = sum(scores)
    return Round(
        player_id=player_id,
        date=date or datetime.now(timezone.utc),
        course_par=course_par,
        hole_scores=scores,
        gross_score=gross,
        differential=differential_from_round(gross, course_par),
    )
