"""9ホール ゴルフリーグ採点パッケージ"""

__version__ = "0.1.0"
