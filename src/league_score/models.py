"""データモデルモジュール

ラウンド、選手、チーム、マッチ結果の型定義を提供する。
いずれも生成後は変更しない(frozen)。
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_COURSE_PAR = 36
HOLES_PER_ROUND = 9


class Round(BaseModel):
    """1選手の9ホール1ラウンド分の記録

    differential は省略可能。省略時は gross_score と course_par から算出する。
    gross_score はホール別スコアの合計、differential はグロス - パーと
    一致しなければならない。
    """

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(..., min_length=1, description="選手ID")
    date: datetime = Field(..., description="提出日時")
    course_par: int | None = Field(
        default=DEFAULT_COURSE_PAR, description="9ホールのパー合計"
    )
    hole_scores: list[Annotated[int, Field(ge=0)]] = Field(
        ...,
        min_length=HOLES_PER_ROUND,
        max_length=HOLES_PER_ROUND,
        description="各ホールのグロススコア(ホール番号順)",
    )
    gross_score: int = Field(..., description="グロススコア合計")
    differential: int | None = Field(
        default=None, description="ディファレンシャル(グロス - パー)"
    )

    @model_validator(mode="after")
    def check_totals(self) -> "Round":
        """グロスとディファレンシャルの整合性を検証する"""
        if self.gross_score != sum(self.hole_scores):
            raise ValueError(
                f"gross_score({self.gross_score})がホール別スコアの合計"
                f"({sum(self.hole_scores)})と一致しません"
            )
        par = self.course_par or DEFAULT_COURSE_PAR
        if self.differential is not None and self.differential != self.gross_score - par:
            raise ValueError(
                f"differential({self.differential})がグロス - パー"
                f"({self.gross_score - par})と一致しません"
            )
        return self

    def resolved_differential(self) -> int:
        """ディファレンシャルを取得する

        保存値がなければ gross_score - course_par で補う(パー未設定は36)。

        Returns:
            int: ディファレンシャル
        """
        if self.differential is not None:
            return self.differential
        return self.gross_score - (self.course_par or DEFAULT_COURSE_PAR)

    def to_dict(self) -> dict:
        """辞書形式に変換(JSON出力用)

        Returns:
            dict: ラウンドの辞書表現
        """
        return self.model_dump(mode="json")


class Player(BaseModel):
    """リーグ登録選手"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="選手ID")
    name: str = Field(..., description="表示名")
    team_id: str | None = Field(default=None, description="所属チームID")
    current_handicap9: float | None = Field(
        default=None, description="キャッシュ済みハンディキャップ(古い可能性あり)"
    )


class Team(BaseModel):
    """リーグ登録チーム"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="チームID")
    name: str = Field(..., description="チーム名")
    season_points: float = Field(default=0.0, description="シーズン累計ポイント")
    player_ids: list[str] = Field(
        default_factory=list, description="マッチに出場する選手ID(通常2名)"
    )


class PlayerMatchResult(BaseModel):
    """ペアリング内の1選手分の結果"""

    model_config = ConfigDict(frozen=True)

    id: str
    hole_net: list[int] = Field(default_factory=list, description="ホール別ネット")
    hole_points: float = 0.0
    total_net: int = 0
    points: float = 0.0
    no_show: bool = False


class PairResult(BaseModel):
    """1ペアリング分の結果"""

    model_config = ConfigDict(frozen=True)

    player_a_id: str
    player_b_id: str
    player_a: PlayerMatchResult
    player_b: PlayerMatchResult


class MatchResult(BaseModel):
    """2チーム間マッチの採点結果"""

    model_config = ConfigDict(frozen=True)

    team_a_id: str | None
    team_b_id: str | None
    date: datetime
    pairs: list[PairResult] = Field(..., min_length=2, max_length=2)
    team_a_score: float
    team_b_score: float

    def to_dict(self) -> dict:
        """辞書形式に変換(JSON出力用)

        Returns:
            dict: マッチ結果の辞書表現
        """
        return self.model_dump(mode="json")
