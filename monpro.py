# monpro.py: bit-serial Montgomery product
# MonPro(X, Y) = X * Y * 2^{-m} mod M, one add-and-shift step per bit of X

from mont_errors import InvalidModulus


def check_modulus(modulus):
    """Reject moduli the Montgomery domain is not defined for."""
    if modulus <= 1 or modulus % 2 == 0:
        raise InvalidModulus(modulus)


def monpro(x, y, modulus, m):
    """MonPro without the modulus check, for callers that validated it once."""
    T = 0
    y0 = y & 1
    for i in range(m):
        xi = (x >> i) & 1
        # eta makes T + xi*y + eta*M even, so the shift is an exact halving
        eta = (T & 1) ^ (xi & y0)
        if xi:
            T += y
        if eta:
            T += modulus
        T >>= 1
        if T >= modulus:
            T -= modulus

    if T >= modulus:
        T -= modulus
    return T


def montgomery_multiply(x, y, modulus, m):
    """
    Bit-serial Montgomery multiplication.

    Args:
        x (int): First operand, must fit in m bits
        y (int): Second operand, must fit in m bits
        modulus (int): Odd modulus M with M < 2^m
        m (int): Bit width; R = 2^m

    Returns:
        int: x * y * R^(-1) mod modulus, in [0, modulus)

    Raises:
        InvalidModulus: if modulus is even or <= 1
    """
    check_modulus(modulus)
    return monpro(x, y, modulus, m)
