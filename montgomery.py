# montgomery.py: Montgomery parameters, domain conversion and
# RL (right-to-left) binary exponentiation on top of the bit-serial MonPro

import logging
from dataclasses import dataclass

from mont_errors import InvalidModulus, WidthUnsupported
from monpro import check_modulus, monpro, montgomery_multiply

# -----------------------------
# PARAMETERS
# -----------------------------
DEFAULT_WIDTH = 32          # register width in bits
MAX_DOUBLE_WIDTH = 8192     # widest intermediate register (R*R, 2^m)
MAX_WIDTH = MAX_DOUBLE_WIDTH // 2

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

STDERR_HANDLER = logging.StreamHandler()
STDERR_HANDLER.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(level=logging.INFO, names=(__name__,)):
    """Attach the shared stderr handler to the named loggers."""
    for name in names:
        log = logging.getLogger(name)
        log.addHandler(STDERR_HANDLER)
        log.setLevel(level)
    return STDERR_HANDLER


def stop_logging(names=(__name__,)):
    for name in names:
        log = logging.getLogger(name)
        log.removeHandler(STDERR_HANDLER)
        log.setLevel(logging.NOTSET)


# -----------------------------
# Helpers
# -----------------------------
def check_width(width):
    if width < 1 or 2 * width > MAX_DOUBLE_WIDTH:
        raise WidthUnsupported(width, f"must be between 1 and {MAX_WIDTH} bits")


def _double_width(value, width):
    """Hold value in a 2*width register; refuse instead of truncating."""
    # Unreachable from derive_params: 1 << m needs width+1 bits, R*R < 2^(2*width)
    if value >> (2 * width):
        raise WidthUnsupported(width, f"intermediate needs {value.bit_length()} bits")
    return value


def bit_length(n):
    """Smallest m such that 2^m > n (count right shifts until zero)."""
    m = 0
    while n > 0:
        n >>= 1
        m += 1
    return m


@dataclass(frozen=True)
class MontgomeryParams:
    """Per-modulus constants for one Montgomery domain."""
    modulus: int
    width: int
    m: int
    r_mod_n: int
    rr_mod_n: int


def derive_params(modulus, width=DEFAULT_WIDTH):
    """
    Compute m, R = 2^m mod n and R^2 mod n for an odd modulus.

    Raises:
        WidthUnsupported: width out of range, or modulus wider than width
        InvalidModulus: modulus even or <= 1
    """
    check_width(width)
    check_modulus(modulus)
    if modulus >> width:
        raise WidthUnsupported(width, f"modulus needs {modulus.bit_length()} bits")

    m = bit_length(modulus)
    r_mod_n = _double_width(1 << m, width) % modulus
    rr_mod_n = _double_width(r_mod_n * r_mod_n, width) % modulus

    logger.debug("Montgomery params: n=%#x m=%d R=%#x R2=%#x", modulus, m, r_mod_n, rr_mod_n)
    return MontgomeryParams(modulus, width, m, r_mod_n, rr_mod_n)


# --- Conversions via MonPro ---

def to_montgomery(a, params):
    """a_bar = a * R mod n = MonPro(a, R^2 mod n)."""
    return monpro(a, params.rr_mod_n, params.modulus, params.m)


def from_montgomery(a_bar, params):
    """a = a_bar * R^{-1} mod n = MonPro(a_bar, 1)."""
    return monpro(a_bar, 1, params.modulus, params.m)


# --- RL binary exponentiation using MonPro ---

def _check_operand(name, value, params):
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    if value >> params.width:
        raise WidthUnsupported(params.width, f"{name} needs {value.bit_length()} bits")


def _pow(base, exponent, params):
    _check_operand("base", base, params)
    _check_operand("exponent", exponent, params)

    n, m = params.modulus, params.m
    # MonPro only scans the low m bits of its operands
    if base >> m:
        base %= n

    C = monpro(1, params.rr_mod_n, n, m)     # 1 * R mod n
    P = monpro(base, params.rr_mod_n, n, m)  # base * R mod n

    e = exponent
    while e:
        if e & 1:
            C = monpro(C, P, n, m)  # multiply when bit is 1
        P = monpro(P, P, n, m)      # square every iteration
        e >>= 1

    # Convert out of Montgomery domain
    return monpro(C, 1, n, m)


def montgomery_mod_exp(base, exponent, modulus, width=DEFAULT_WIDTH):
    """
    Modular exponentiation using bit-serial Montgomery multiplication.

    Parameters (m, R, R^2 mod n) are derived on every call; use
    MontgomeryContext to reuse them across calls with the same modulus.

    Args:
        base (int): Base value, fits in width bits
        exponent (int): Exponent, fits in width bits
        modulus (int): Odd modulus > 1, fits in width bits
        width (int): Register width in bits

    Returns:
        int: base^exponent mod modulus
    """
    return _pow(base, exponent, derive_params(modulus, width))


# -----------------------------
# Caller-supplied configuration
# -----------------------------
@dataclass(frozen=True)
class ModExpRequest:
    """One exponentiation job: base^exponent mod modulus at a given width."""
    base: int
    exponent: int
    modulus: int
    width: int = DEFAULT_WIDTH


def evaluate(request):
    return montgomery_mod_exp(request.base, request.exponent, request.modulus, request.width)


def evaluate_many(requests):
    """Evaluate independent requests in order; the first failure propagates."""
    return [evaluate(request) for request in requests]


class MontgomeryContext:
    """Montgomery domain for a fixed modulus, with parameters derived once."""

    def __init__(self, modulus, width=DEFAULT_WIDTH):
        self.params = derive_params(modulus, width)

    @property
    def modulus(self):
        return self.params.modulus

    @property
    def width(self):
        return self.params.width

    @property
    def m(self):
        return self.params.m

    def multiply(self, a_bar, b_bar):
        return monpro(a_bar, b_bar, self.params.modulus, self.params.m)

    def to_montgomery(self, a):
        return to_montgomery(a, self.params)

    def from_montgomery(self, a_bar):
        return from_montgomery(a_bar, self.params)

    def pow(self, base, exponent):
        return _pow(base, exponent, self.params)

    def __repr__(self):
        return f"MontgomeryContext(modulus={self.params.modulus:#x}, width={self.params.width})"


__all__ = [
    "DEFAULT_WIDTH",
    "MAX_WIDTH",
    "MAX_DOUBLE_WIDTH",
    "InvalidModulus",
    "WidthUnsupported",
    "MontgomeryParams",
    "MontgomeryContext",
    "ModExpRequest",
    "bit_length",
    "configure_logging",
    "stop_logging",
    "derive_params",
    "evaluate",
    "evaluate_many",
    "from_montgomery",
    "montgomery_mod_exp",
    "montgomery_multiply",
    "to_montgomery",
]
