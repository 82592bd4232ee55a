"""Checked fixed point arithmetic shared by the rate model and valuation"""
from .constants import INTEREST_SCALE, RAY, U256_MAX
from .errors import ArithmeticOverflow


def checked_mul(a: int, b: int) -> int:
    """Multiply with overflow checking"""
    result = a * b
    if result > U256_MAX:
        raise ArithmeticOverflow("Arithmetic overflow in multiplication")
    return result


def checked_add(a: int, b: int) -> int:
    """Add with overflow checking"""
    result = a + b
    if result > U256_MAX:
        raise ArithmeticOverflow("Arithmetic overflow in addition")
    return result


def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    if b > a:
        raise ArithmeticOverflow("Arithmetic underflow in subtraction")
    return a - b


def checked_div(a: int, b: int) -> int:
    """Divide with zero checking"""
    if b == 0:
        raise ArithmeticOverflow("Division by zero")
    return a // b


def mul_div(a: int, b: int, denominator: int) -> int:
    """a * b / denominator, truncated"""
    return checked_div(checked_mul(a, b), denominator)


def rmul(x: int, y: int) -> int:
    """Multiply two RAY values rounding half up"""
    return checked_add(checked_mul(x, y), RAY // 2) // RAY


def rpow(x: int, n: int) -> int:
    """x^n for a RAY scaled x, by repeated squaring

    Same rounding as the classic ds-math rpow, so results match an
    on-chain implementation bit for bit.
    """
    z = x if n % 2 else RAY
    n //= 2
    while n:
        x = rmul(x, x)
        if n % 2:
            z = rmul(z, x)
        n //= 2
    return z


def to_ray(value: int) -> int:
    """Convert an INTEREST_SCALE value to RAY"""
    return checked_mul(value, RAY // INTEREST_SCALE)
