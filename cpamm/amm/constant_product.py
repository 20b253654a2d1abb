"""Constant product pricing: x * y = k.

The fee is charged on the input amount and stays in the pool. With the
default 30 bps fee:

    amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)

expressed here on a 10000 basis so the fee is configurable. ``FEELESS``
reduces the formula to ``amount_in * reserve_out / (reserve_in + amount_in)``.
All rounding is floor, in favour of the pool.
"""

from __future__ import annotations

from cpamm.amm.base import AMM
from cpamm.config import DEFAULT_FEE_CONFIG, FeeConfig
from cpamm.constants import FEE_DENOMINATOR
from cpamm.errors import InvalidReserves
from cpamm.safe_int import S, SafeIntError


class ConstantProduct(AMM):
    """Constant product curve with a fixed input fee."""

    def __init__(self, fee: FeeConfig = DEFAULT_FEE_CONFIG) -> None:
        self.fee = fee

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using the constant product formula.

        Formula: amount_out = (in * m * res_out) / (res_in * 10000 + in * m)
        where m = 10000 - fee_bps.

        Raises:
            InvalidReserves: If any argument is zero or the arithmetic leaves
                the uint256 range
        """
        try:
            s_in, s_reserve_in, s_reserve_out = S(amount_in), S(reserve_in), S(reserve_out)
            if not (s_in and s_reserve_in and s_reserve_out):
                raise InvalidReserves(
                    f"amount_in, reserve_in and reserve_out must be positive: "
                    f"({amount_in}, {reserve_in}, {reserve_out})"
                )
            amount_in_with_fee = s_in * self.fee.fee_multiplier
            numerator = amount_in_with_fee * s_reserve_out
            denominator = s_reserve_in * FEE_DENOMINATOR + amount_in_with_fee
            amount_out = (numerator // denominator).value
        except SafeIntError as err:
            raise InvalidReserves(f"Arithmetic out of range: {err}") from err

        if amount_out >= reserve_out:
            raise AssertionError(f"amount_out {amount_out} would drain reserve {reserve_out}")
        return amount_out

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate the minimum input that yields at least amount_out.

        Formula: amount_in = (res_in * out * 10000) / ((res_out - out) * m) + 1

        Raises:
            InvalidReserves: If any argument is zero, amount_out would drain the
                reserve, or the arithmetic leaves the uint256 range
        """
        try:
            s_out, s_reserve_in, s_reserve_out = S(amount_out), S(reserve_in), S(reserve_out)
            if not (s_out and s_reserve_in and s_reserve_out):
                raise InvalidReserves(
                    f"amount_out, reserve_in and reserve_out must be positive: "
                    f"({amount_out}, {reserve_in}, {reserve_out})"
                )
            if s_out >= s_reserve_out:
                raise InvalidReserves(f"Cannot buy {amount_out} from reserve of {reserve_out}")
            numerator = s_reserve_in * s_out * FEE_DENOMINATOR
            denominator = (s_reserve_out - s_out) * self.fee.fee_multiplier
            return ((numerator // denominator) + 1).value
        except SafeIntError as err:
            raise InvalidReserves(f"Arithmetic out of range: {err}") from err


# Default instance (0.3% fee)
constant_product = ConstantProduct()


def quote_out(amount_in: int, reserve_in: int, reserve_out: int, fee: FeeConfig = DEFAULT_FEE_CONFIG) -> int:
    """Output for an exact input against the given reserves."""
    return ConstantProduct(fee).get_amount_out(amount_in, reserve_in, reserve_out)


def quote_in(amount_out: int, reserve_in: int, reserve_out: int, fee: FeeConfig = DEFAULT_FEE_CONFIG) -> int:
    """Input needed for an exact output against the given reserves."""
    return ConstantProduct(fee).get_amount_in(amount_out, reserve_in, reserve_out)


__all__ = ["ConstantProduct", "constant_product", "quote_out", "quote_in"]
