"""
상품 분류용 Enum
"""

import enum


class Gender(str, enum.Enum):
    """대상 성별"""

    MEN = "MEN"
    WOMEN = "WOMEN"
    UNISEX = "UNISEX"
    KIDS = "KIDS"


class Season(str, enum.Enum):
    """판매 시즌"""

    SPRING = "SPRING"
    SUMMER = "SUMMER"
    FALL = "FALL"
    WINTER = "WINTER"
    ALL_SEASON = "ALL_SEASON"
