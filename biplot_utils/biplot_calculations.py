"""
Biplot Calculations

Derived tables behind a PCA biplot: input validation, loadings extraction,
variance explained per component and the rescaling that brings case
projections onto the same scale as the loading arrows.

All functions are pure; tables are freshly built on every call.
"""

import logging
import math
import numbers

import numpy as np
import pandas as pd
from typing import Any, Dict, Optional, Sequence, Tuple

from .config import (
    DEFAULT_COMPONENTS,
    VARIANCE_DECIMALS,
    VARIABLES_COLUMN,
    ORIGIN_COLUMN,
    NAMES_COLUMN
)
from .exceptions import DegenerateScaleError, InvalidArgument, InvalidComponentSelection
from .pca_result import PCAResult

logger = logging.getLogger(__name__)


# === INPUT VALIDATION ===

def validate_pca_result(pca_result: Any) -> PCAResult:
    """Raise InvalidArgument unless ``pca_result`` is a PCAResult."""
    if not isinstance(pca_result, PCAResult):
        raise InvalidArgument(
            f"Expected a PCAResult, got {type(pca_result).__name__}. "
            f"Use PCAResult(...) or PCAResult.from_sklearn(...) to build one."
        )
    return pca_result


def validate_components(
    pca_result: PCAResult,
    components: Sequence[int] = DEFAULT_COMPONENTS
) -> Tuple[int, int]:
    """
    Check a component selection against a PCA result.

    Parameters
    ----------
    pca_result : PCAResult
        PCA output the components are taken from.
    components : sequence of int
        Two distinct, 1-based component indices. Integral floats (``2.0``)
        are accepted.

    Returns
    -------
    tuple of int
        The validated pair as plain ints.

    Raises
    ------
    InvalidArgument
        If ``pca_result`` is not a PCAResult or ``components`` is not a pair of
        distinct positive integers.
    InvalidComponentSelection
        If the largest index exceeds the number of components available.

    Examples
    --------
    >>> validate_components(pca_result, [1, 3])
    (1, 3)
    """
    validate_pca_result(pca_result)

    if isinstance(components, (str, bytes)):
        raise InvalidArgument(f"components must be numeric, got {components!r}")
    try:
        entries = list(components)
    except TypeError:
        raise InvalidArgument(
            f"components must be a sequence of two numbers, got {components!r}"
        ) from None

    if len(entries) != 2:
        raise InvalidArgument(f"components must have exactly 2 entries, got {len(entries)}")

    selected = []
    for entry in entries:
        # bool is an Integral subclass but not a component index
        if isinstance(entry, (bool, np.bool_)) or not isinstance(entry, numbers.Real):
            raise InvalidArgument(f"components must be numeric, got {entry!r}")
        if isinstance(entry, numbers.Integral):
            index = int(entry)
        else:
            try:
                value = float(entry)
            except OverflowError:
                raise InvalidArgument(f"components must be whole numbers, got {entry!r}") from None
            if not math.isfinite(value) or not value.is_integer():
                raise InvalidArgument(f"components must be whole numbers, got {entry!r}")
            index = int(value)
        if index < 1:
            raise InvalidArgument(f"components are 1-based, got {entry!r}")
        selected.append(index)

    if selected[0] == selected[1]:
        raise InvalidArgument(f"components must be distinct, got {selected}")

    available = pca_result.n_components
    if max(selected) > available:
        raise InvalidComponentSelection(max(selected), available)

    return selected[0], selected[1]


def _select_components(matrix: pd.DataFrame, components: Tuple[int, int]) -> pd.DataFrame:
    return matrix.iloc[:, [components[0] - 1, components[1] - 1]].copy()


# === LOADINGS ===

def get_loadings(pca_result: PCAResult, components: Tuple[int, int]) -> pd.DataFrame:
    """
    Loadings table for two components.

    Parameters
    ----------
    pca_result : PCAResult
        PCA output.
    components : tuple of int
        Validated, 1-based component pair.

    Returns
    -------
    pd.DataFrame
        One row per variable with columns, in order: the two selected
        component coefficients, ``variables`` (name) and ``origin`` (0, the
        arrow tail).
    """
    rotation = pca_result.rotation
    loadings = _select_components(rotation, components)
    loadings[VARIABLES_COLUMN] = rotation.index.astype(str)
    loadings[ORIGIN_COLUMN] = 0
    return loadings


# === VARIANCE EXPLAINED ===

def calculate_sdev_share(
    sdev: Sequence[float],
    decimals: Optional[int] = VARIANCE_DECIMALS
) -> np.ndarray:
    """
    Percentage of the summed standard deviations held by each component.

    Note this is each component's share of the total standard deviation, not
    of the total variance (squared standard deviation).

    Parameters
    ----------
    sdev : array-like
        Standard deviation of every component.
    decimals : int or None, optional
        Rounding applied to the percentages. None keeps full precision.

    Returns
    -------
    np.ndarray
        Percentages, one per component. All zeros when every sdev is zero.
    """
    sdev = np.asarray(sdev, dtype=float)
    total = np.sum(sdev)

    if total > 0:
        share = sdev / total * 100
    else:
        share = np.zeros_like(sdev)

    if decimals is not None:
        share = np.round(share, decimals)
    return share


def calculate_variance_explained(
    pca_result: PCAResult,
    components: Tuple[int, int],
    decimals: int = VARIANCE_DECIMALS
) -> Tuple[float, float]:
    """Rounded percentage explained by each of the two selected components."""
    share = calculate_sdev_share(pca_result.sdev, decimals=None)
    first, second = (share[c - 1] for c in components)
    return round(float(first), decimals), round(float(second), decimals)


# === CASES ===

def calculate_scale_factor(loadings: pd.DataFrame, projections: pd.DataFrame) -> float:
    """
    Single isotropic factor mapping case projections onto the loadings' range.

    Parameters
    ----------
    loadings : pd.DataFrame
        Loadings table; its first two columns are the arrow-tip coordinates.
    projections : pd.DataFrame
        Unscaled case projections on the same two components.

    Returns
    -------
    float
        ``max|loadings| / max|projections|`` taken over both axes.

    Raises
    ------
    DegenerateScaleError
        If every projection is zero.
    """
    loadings_max = float(np.max(np.abs(loadings.iloc[:, :2].to_numpy(dtype=float))))
    projections_max = float(np.max(np.abs(projections.to_numpy(dtype=float))))

    if projections_max == 0:
        raise DegenerateScaleError(
            "All case projections on the selected components are zero; "
            "cases cannot be scaled to the loadings"
        )
    if loadings_max == 0:
        logger.warning("All loadings on the selected components are zero; cases collapse onto the origin")

    return loadings_max / projections_max


def _scale_cases(
    pca_result: PCAResult,
    components: Tuple[int, int],
    loadings: pd.DataFrame
) -> Tuple[pd.DataFrame, float]:
    scores = pca_result.x
    cases = _select_components(scores, components)

    scale_factor = calculate_scale_factor(loadings, cases)
    cases = cases * scale_factor
    cases[NAMES_COLUMN] = scores.index.astype(str)

    return cases, scale_factor


def extract_and_scale_cases(
    pca_result: PCAResult,
    components: Tuple[int, int],
    loadings: pd.DataFrame
) -> pd.DataFrame:
    """
    Cases table: selected projections rescaled to the loadings' range.

    Every projection is multiplied by ``calculate_scale_factor(loadings, ...)``
    so the largest scaled coordinate equals the largest loading coordinate.

    Parameters
    ----------
    pca_result : PCAResult
        PCA output.
    components : tuple of int
        Validated, 1-based component pair (the one ``loadings`` was built for).
    loadings : pd.DataFrame
        Output of ``get_loadings``.

    Returns
    -------
    pd.DataFrame
        One row per observation: the two scaled coordinates (same column names
        and order as ``loadings``) and ``names``.
    """
    cases, _ = _scale_cases(pca_result, components, loadings)
    return cases


# === PIPELINE ===

def compute_biplot_data(
    pca_result: PCAResult,
    components: Sequence[int] = DEFAULT_COMPONENTS,
    include_cases: bool = True
) -> Dict[str, Any]:
    """
    Validate the inputs and build every table the biplot is drawn from.

    Parameters
    ----------
    pca_result : PCAResult
        PCA output.
    components : sequence of int, optional
        Two 1-based component indices. Default is (1, 2).
    include_cases : bool, optional
        Whether to extract and scale the cases. Default is True.

    Returns
    -------
    dict
        - 'components' : tuple of int - Validated component pair
        - 'loadings' : pd.DataFrame - Loadings table
        - 'cases' : pd.DataFrame or None - Scaled cases table
        - 'variance_explained' : tuple of float - Percent per component
        - 'scale_factor' : float or None - Factor applied to the cases
    """
    selected = validate_components(pca_result, components)

    loadings = get_loadings(pca_result, selected)
    variance_explained = calculate_variance_explained(pca_result, selected)

    cases = None
    scale_factor = None
    if include_cases:
        cases, scale_factor = _scale_cases(pca_result, selected, loadings)

    logger.debug(
        "Biplot data for components %s: %d variables, %s cases, scale factor %s",
        selected, len(loadings), 'no' if cases is None else len(cases), scale_factor
    )

    return {
        'components': selected,
        'loadings': loadings,
        'cases': cases,
        'variance_explained': variance_explained,
        'scale_factor': scale_factor
    }
