"""
Yield Calculator.

Turns an As-Purchased / Edible-Portion weight pair into the usable
percentage of a material.
"""

from costflow_shared.config.logging import costing_logger as logger
from costflow_shared.utils.exceptions import InvalidInputError


def compute_yield(ap_weight: float, ep_weight: float) -> float:
    """
    Yield percentage = ep_weight / ap_weight * 100, at full precision.

    An edible portion heavier than the purchased weight is accepted and
    produces a value above 100; it is logged as suspect data.

    Raises:
        InvalidInputError: If ap_weight is not greater than zero.
    """
    if ap_weight is None or ap_weight <= 0:
        raise InvalidInputError.single(
            "ap_weight", "As-purchased weight must be greater than 0", ap_weight=ap_weight
        )

    yield_percentage = (ep_weight / ap_weight) * 100

    if yield_percentage > 100:
        logger.warning(
            "Yield test above 100%",
            ap_weight=ap_weight,
            ep_weight=ep_weight,
            yield_percentage=yield_percentage,
        )

    return yield_percentage
