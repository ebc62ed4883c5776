"""
Exceptions raised by the Montgomery arithmetic modules.

All of them derive from ValueError so code that already guards RSA calls
with ``except ValueError`` keeps working.
"""


class MontgomeryError(ValueError):
    """Base class for Montgomery arithmetic failures."""


class InvalidModulus(MontgomeryError):
    """The modulus is even or not greater than 1."""

    def __init__(self, modulus):
        self.modulus = modulus
        super().__init__(f"Modulus must be odd and greater than 1, got {modulus}")


class WidthUnsupported(MontgomeryError):
    """A value does not fit in the configured (or doubled) register width."""

    def __init__(self, width, reason):
        self.width = width
        super().__init__(f"Width {width} unsupported: {reason}")
