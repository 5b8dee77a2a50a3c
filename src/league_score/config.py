"""設定管理モジュール

環境変数から設定を読み込み、アプリケーション全体で使用する設定を提供する。
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定

    環境変数または.envファイルから設定を読み込む。
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ハンディキャップ算出ルール
    default_course_par: int = Field(
        default=36,
        description="record コマンドで --par を省略した場合のパー",
    )
    handicap_round_window: int = Field(
        default=20,
        gt=0,
        description="ハンディキャップ算出に使う直近ラウンド数",
    )
    handicap_best_count: int = Field(
        default=5,
        gt=0,
        description="平均を取るベストのディファレンシャル数",
    )

    # マッチ採点ルール
    forfeit_points: float = Field(
        default=10.0,
        ge=0.0,
        description="不戦勝時に出場選手へ与えるポイント",
    )

    # オプション設定
    debug: bool = Field(
        default=False,
        description="デバッグモード(true: デバッグ情報出力)",
    )
    output_dir: Path = Field(
        default=Path("output"),
        description="マッチ結果の出力ディレクトリ",
    )


def get_settings() -> Settings:
    """設定インスタンスを取得する

    Returns:
        Settings: アプリケーション設定
    """
    return Settings()
