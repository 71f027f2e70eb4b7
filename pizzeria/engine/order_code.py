"""
Order engine — Human readable order codes, e.g. ORD-KR-48213.
"""
import random

ORDER_CODE_PREFIX = "ORD"


def create_order_code(first_name: str, last_name: str, rng: random.Random | None = None) -> str:
    rng = rng or random
    initials = f"{first_name[:1]}{last_name[:1]}".upper()
    return f"{ORDER_CODE_PREFIX}-{initials}-{rng.randrange(100000)}"
