"""CLIエントリーポイントモジュール

コマンドラインからハンディキャップ算出とマッチ採点を実行するためのインターフェース。
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from . import __version__
from .config import Settings, get_settings
from .handicap import build_round, compute_handicap9, handicaps_for_players
from .league import LeagueDataError, LeagueRoster
from .match import compute_match_result, handicaps_from_players
from .output import (
    load_hole_scores_from_json,
    load_rounds_from_json,
    save_match_result_to_json,
    save_rounds_to_json,
)
from .standings import apply_match_result, differential_leaderboard, team_standings


def setup_logging(debug: bool = False) -> None:
    """ロギングを設定する

    Args:
        debug: デバッグモードの場合True
    """
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """コマンドライン引数をパースする

    Args:
        argv: 引数リスト(省略時はsys.argv)

    Returns:
        argparse.Namespace: パース済み引数
    """
    parser = argparse.ArgumentParser(
        prog="league-score",
        description="9ホール ゴルフリーグのハンディキャップ算出・マッチ採点ツール",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="デバッグモードを有効にする",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    handicap = subparsers.add_parser("handicap", help="ハンディキャップを表示する")
    handicap.add_argument(
        "--rounds", "-r", type=Path, required=True, help="ラウンド履歴JSON"
    )
    handicap.add_argument(
        "--player",
        "-p",
        action="append",
        default=None,
        help="対象選手ID(複数指定可。省略時は履歴中の全選手)",
    )

    record = subparsers.add_parser("record", help="ラウンドを記録する")
    record.add_argument(
        "--rounds", "-r", type=Path, required=True, help="ラウンド履歴JSON"
    )
    record.add_argument("--player", "-p", required=True, help="選手ID")
    record.add_argument(
        "--scores",
        "-s",
        required=True,
        help="ホール別グロス(カンマ区切り9ホール分。例: 5,4,6,3,5,4,5,3,6)",
    )
    record.add_argument(
        "--par",
        type=int,
        default=None,
        help="9ホールのパー(デフォルト: 環境変数DEFAULT_COURSE_PARまたは36)",
    )

    match = subparsers.add_parser("match", help="マッチを採点する")
    match.add_argument("--league", "-l", type=Path, required=True, help="名簿YAML")
    match.add_argument(
        "--rounds",
        "-r",
        type=Path,
        default=None,
        help="ラウンド履歴JSON(省略時は名簿のハンディキャップを使用)",
    )
    match.add_argument("--team-a", required=True, help="チームAのID")
    match.add_argument("--team-b", required=True, help="チームBのID")
    match.add_argument(
        "--scores", "-s", type=Path, required=True, help="選手別ホールスコアJSON"
    )
    match.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="出力ディレクトリ(デフォルト: 環境変数OUTPUT_DIRまたはoutput)",
    )
    match.add_argument(
        "--filename",
        "-f",
        type=str,
        default=None,
        help="出力ファイル名(省略時は自動生成)",
    )
    match.add_argument(
        "--update-standings",
        action="store_true",
        help="結果を名簿のシーズンポイントに反映する",
    )

    standings = subparsers.add_parser("standings", help="順位表を表示する")
    standings.add_argument("--league", "-l", type=Path, required=True, help="名簿YAML")
    standings.add_argument(
        "--rounds",
        "-r",
        type=Path,
        default=None,
        help="ラウンド履歴JSON(指定時はディファレンシャル集計も表示)",
    )

    return parser.parse_args(argv)


def _run_handicap(args: argparse.Namespace, settings: Settings) -> int:
    rounds = load_rounds_from_json(args.rounds)
    player_ids = args.player or list(dict.fromkeys(r.player_id for r in rounds))
    handicaps = handicaps_for_players(
        player_ids,
        rounds,
        window=settings.handicap_round_window,
        best_count=settings.handicap_best_count,
    )
    for player_id, handicap in handicaps.items():
        print(f"{player_id}\t{handicap:.1f}")
    return 0


def _run_record(args: argparse.Namespace, settings: Settings) -> int:
    logger = logging.getLogger(__name__)

    rounds = load_rounds_from_json(args.rounds) if args.rounds.exists() else []
    par = args.par if args.par is not None else settings.default_course_par
    new_round = build_round(args.player, args.scores.split(","), course_par=par)
    rounds.append(new_round)
    save_rounds_to_json(rounds, args.rounds)

    history = sorted(
        (r for r in rounds if r.player_id == args.player),
        key=lambda r: r.date,
        reverse=True,
    )
    handicap = compute_handicap9(
        history,
        window=settings.handicap_round_window,
        best_count=settings.handicap_best_count,
    )
    logger.info(
        "ラウンドを記録しました: %s グロス%d (%+d)",
        args.player,
        new_round.gross_score,
        new_round.resolved_differential(),
    )
    print(f"{args.player}\t{handicap:.1f}")
    return 0


def _run_match(args: argparse.Namespace, settings: Settings) -> int:
    logger = logging.getLogger(__name__)

    roster = LeagueRoster.load(args.league)
    team_a = roster.lineup(args.team_a)
    team_b = roster.lineup(args.team_b)
    players = team_a.players + team_b.players

    if args.rounds is not None:
        handicaps = handicaps_for_players(
            [p.id for p in players],
            load_rounds_from_json(args.rounds),
            window=settings.handicap_round_window,
            best_count=settings.handicap_best_count,
        )
    else:
        handicaps = handicaps_from_players(players)

    hole_scores = load_hole_scores_from_json(args.scores)
    result = compute_match_result(
        team_a,
        team_b,
        hole_scores,
        handicaps,
        forfeit_points=settings.forfeit_points,
    )

    output_dir = args.output if args.output is not None else settings.output_dir
    output_path = save_match_result_to_json(result, output_dir, args.filename)

    if args.update_standings:
        roster = roster.replace_teams(apply_match_result(roster.teams, result))
        roster.save(args.league)

    for index, pair in enumerate(result.pairs, start=1):
        print(
            f"Pair {index}\t{pair.player_a_id} {pair.player_a.points:.1f}"
            f" - {pair.player_b.points:.1f} {pair.player_b_id}"
        )
    print(
        f"{result.team_a_id} {result.team_a_score:.1f}"
        f" - {result.team_b_score:.1f} {result.team_b_id}"
    )
    logger.info("完了: %s", output_path)
    return 0


def _run_standings(args: argparse.Namespace, settings: Settings) -> int:
    roster = LeagueRoster.load(args.league)
    for rank, team in enumerate(team_standings(roster.teams), start=1):
        print(f"{rank}\t{team.name}\t{team.season_points:.1f}")

    if args.rounds is not None:
        rounds = load_rounds_from_json(args.rounds)
        print()
        for team_id, total in differential_leaderboard(rounds, roster.players):
            print(f"{team_id}\t{total:+d}")
    return 0


COMMANDS = {
    "handicap": _run_handicap,
    "record": _run_record,
    "match": _run_match,
    "standings": _run_standings,
}


def main(argv: list[str] | None = None) -> int:
    """メインエントリーポイント

    Args:
        argv: 引数リスト(省略時はsys.argv)

    Returns:
        int: 終了コード(0: 成功, 1: 失敗)
    """
    args = parse_args(argv)

    # 設定を読み込み
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"設定の読み込みに失敗しました: {e}", file=sys.stderr)
        print("環境変数または.envファイルを確認してください。", file=sys.stderr)
        return 1

    # コマンドライン引数で設定を上書き
    if args.debug:
        settings = settings.model_copy(update={"debug": True})

    # ロギング設定
    setup_logging(settings.debug)
    logger = logging.getLogger(__name__)

    logger.debug("league-score v%s: %s", __version__, args.command)

    try:
        return COMMANDS[args.command](args, settings)
    except LeagueDataError as e:
        logger.exception("名簿データが不正です: %s", e)
        return 1
    except (OSError, ValueError) as e:
        logger.exception("データの読み書きに失敗しました: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
