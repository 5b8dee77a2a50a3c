"""入出力処理モジュール

ラウンド履歴とマッチ結果をJSON形式でファイルに入出力する。
"""

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from .models import MatchResult, Round

logger = logging.getLogger(__name__)


def save_rounds_to_json(rounds: list[Round], file_path: Path) -> Path:
    """ラウンド履歴をJSONファイルに保存する

    Args:
        rounds: ラウンドのリスト
        file_path: 保存先パス

    Returns:
        Path: 保存したファイルのパス
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in rounds], f, ensure_ascii=False, indent=2)

    logger.info("ラウンドを保存しました: %s (%d件)", file_path, len(rounds))
    return file_path


def load_rounds_from_json(file_path: Path) -> list[Round]:
    """JSONファイルからラウンド履歴を読み込む

    Args:
        file_path: JSONファイルのパス

    Returns:
        list[Round]: ラウンドのリスト(ファイル内の順)
    """
    with file_path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    rounds = [Round(**item) for item in data]
    logger.info("ラウンドを読み込みました: %s (%d件)", file_path, len(rounds))
    return rounds


def save_match_result_to_json(
    result: MatchResult,
    output_dir: Path,
    filename: str | None = None,
) -> Path:
    """マッチ結果をJSONファイルに保存する

    Args:
        result: マッチ結果
        output_dir: 出力ディレクトリ
        filename: ファイル名(省略時は自動生成)

    Returns:
        Path: 保存したファイルのパス
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        filename = f"match_{result.team_a_id}_{result.team_b_id}_{timestamp}.json"

    output_path = output_dir / filename

    with output_path.open("w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)

    logger.info("マッチ結果を保存しました: %s", output_path)
    return output_path


def load_match_results_from_json(output_dir: Path) -> list[MatchResult]:
    """出力ディレクトリのマッチ結果を読み込む

    Args:
        output_dir: マッチ結果の出力ディレクトリ

    Returns:
        list[MatchResult]: マッチ結果のリスト(日時の古い順)
    """
    results = []
    for path in sorted(output_dir.glob("match_*.json")):
        with path.open("r", encoding="utf-8") as f:
            results.append(MatchResult(**json.load(f)))

    results.sort(key=lambda r: r.date)
    logger.info("マッチ結果を読み込みました: %s (%d件)", output_dir, len(results))
    return results


def load_hole_scores_from_json(file_path: Path) -> dict[str, list | None]:
    """マッチ用のホール別スコアを読み込む

    形式は {"選手ID": [4, 5, ...]}。値が null や空配列の選手は欠席扱いになる。

    Args:
        file_path: JSONファイルのパス

    Returns:
        dict[str, list | None]: 選手ID -> ホール別グロス

    Raises:
        ValueError: JSONがオブジェクト形式でない場合
    """
    with file_path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, Mapping):
        raise ValueError(f"ホール別スコアの形式が不正です: {file_path}")

    scores = {}
    for player_id, holes in data.items():
        scores[str(player_id)] = list(holes) if isinstance(holes, list) else None
    return scores
