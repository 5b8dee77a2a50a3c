"""丸め処理モジュール

ハンディキャップやポイントは小数第1位に四捨五入(0.5は0から遠い側)する。
二進浮動小数点の誤差で 0.25 -> 0.2 のようにならないよう Decimal を経由する。
"""

from decimal import ROUND_HALF_UP, Decimal


def round1(value: float) -> float:
    """小数第1位に四捨五入する

    Args:
        value: 丸める値

    Returns:
        float: 丸めた値

    Examples:
        >>> round1(0.25)
        0.3
        >>> round1(-0.25)
        -0.3
    """
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def round_half_away(value: float) -> int:
    """最も近い整数に四捨五入する

    Args:
        value: 丸める値

    Returns:
        int: 丸めた整数
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
