"""
PCA Result Container

Read-only view of a computed principal component analysis: the rotation
(loadings) matrix, the score matrix and the per-component standard deviations.
The biplot helpers only ever read from it.

The PCA itself is computed elsewhere; the constructors below adapt the usual
producers (raw matrices, a fitted scikit-learn ``PCA`` and the results dict of
the ``compute_pca`` helpers) into one shape.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, Sequence, Union

from .config import (
    COMPONENT_PREFIX,
    VARIABLE_PREFIX,
    VARIABLES_COLUMN,
    ORIGIN_COLUMN,
    NAMES_COLUMN
)
from .exceptions import InvalidArgument

RESERVED_COLUMNS = (VARIABLES_COLUMN, ORIGIN_COLUMN, NAMES_COLUMN)


ArrayLike = Union[pd.DataFrame, np.ndarray, Sequence[Sequence[float]]]


def _as_matrix(data: ArrayLike, name: str) -> pd.DataFrame:
    """Convert ``data`` to a numeric, finite 2-D DataFrame or raise InvalidArgument."""
    if data is None:
        raise InvalidArgument(f"PCA result is missing its {name} matrix")

    if isinstance(data, pd.DataFrame):
        non_numeric = data.select_dtypes(exclude=[np.number]).columns
        if len(non_numeric) > 0:
            raise InvalidArgument(
                f"{name} matrix contains non-numeric columns: {list(non_numeric)}"
            )
        frame = data.astype(float)
    else:
        try:
            values = np.asarray(data, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"{name} matrix must be numeric: {e}") from e
        if values.ndim != 2:
            raise InvalidArgument(
                f"{name} matrix must be 2-dimensional, got {values.ndim} dimension(s)"
            )
        frame = pd.DataFrame(values)

    n_rows, n_cols = frame.shape
    if n_rows == 0 or n_cols == 0:
        raise InvalidArgument(f"Empty {name} matrix: {n_rows} rows, {n_cols} columns")
    if not np.isfinite(frame.to_numpy()).all():
        raise InvalidArgument(f"{name} matrix contains NaN or infinite values")

    return frame


class PCAResult:
    """
    Output of a principal component analysis, as consumed by ``biplot``.

    Parameters
    ----------
    rotation : pd.DataFrame or array-like
        Loading coefficients, shape (n_variables, n_components). A DataFrame
        keeps its index (variable names) and columns (component names).
    x : pd.DataFrame or array-like
        Scores (case projections), shape (n_observations, n_components).
    sdev : array-like
        Standard deviation of every component. May be longer than the number
        of retained components (rank-truncated PCA), never shorter.

    Raises
    ------
    InvalidArgument
        If any of the three pieces is missing, non-numeric, non-finite or
        inconsistent with the others.

    Examples
    --------
    >>> rotation = np.array([[0.7, -0.7], [0.7, 0.7]])
    >>> scores = np.array([[1.0, 0.2], [-1.0, -0.2]])
    >>> pca_result = PCAResult(rotation, scores, sdev=[1.4, 0.3])
    >>> pca_result.rotation.columns.tolist()
    ['PC1', 'PC2']
    """

    def __init__(self, rotation: ArrayLike, x: ArrayLike, sdev: Sequence[float]):
        self._rotation = _as_matrix(rotation, 'rotation')
        if not isinstance(rotation, pd.DataFrame):
            n_variables, n_components = self._rotation.shape
            self._rotation.index = [f'{VARIABLE_PREFIX}{i+1}' for i in range(n_variables)]
            self._rotation.columns = [f'{COMPONENT_PREFIX}{i+1}' for i in range(n_components)]

        self._x = _as_matrix(x, 'score')
        if not isinstance(x, pd.DataFrame):
            self._x.index = [str(i + 1) for i in range(self._x.shape[0])]
            if self._x.shape[1] == self._rotation.shape[1]:
                self._x.columns = self._rotation.columns

        if self._x.shape[1] != self._rotation.shape[1]:
            raise InvalidArgument(
                f"Score matrix has {self._x.shape[1]} components but rotation "
                f"matrix has {self._rotation.shape[1]}"
            )
        if list(self._x.columns) != list(self._rotation.columns):
            raise InvalidArgument(
                f"Score components {list(self._x.columns)} do not match "
                f"rotation components {list(self._rotation.columns)}"
            )

        # The derived tables add these as label columns
        reserved = [c for c in self._rotation.columns if c in RESERVED_COLUMNS]
        if reserved:
            raise InvalidArgument(
                f"Component names {reserved} clash with biplot table columns "
                f"{list(RESERVED_COLUMNS)}"
            )

        if sdev is None:
            raise InvalidArgument("PCA result is missing its standard deviation vector")
        try:
            sdev_array = np.array(sdev, dtype=float).ravel()
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"Standard deviations must be numeric: {e}") from e
        if len(sdev_array) < self._rotation.shape[1]:
            raise InvalidArgument(
                f"Got {len(sdev_array)} standard deviations for "
                f"{self._rotation.shape[1]} components"
            )
        if not np.isfinite(sdev_array).all() or (sdev_array < 0).any():
            raise InvalidArgument("Standard deviations must be finite and non-negative")
        sdev_array.flags.writeable = False
        self._sdev = sdev_array

    @property
    def rotation(self) -> pd.DataFrame:
        """Loadings, variables x components (a copy)."""
        return self._rotation.copy()

    @property
    def x(self) -> pd.DataFrame:
        """Scores, observations x components (a copy)."""
        return self._x.copy()

    @property
    def sdev(self) -> np.ndarray:
        """Per-component standard deviations (read-only)."""
        return self._sdev

    @property
    def n_components(self) -> int:
        return self._rotation.shape[1]

    def __repr__(self) -> str:
        return (
            f"PCAResult(n_variables={self._rotation.shape[0]}, "
            f"n_observations={self._x.shape[0]}, n_components={self.n_components})"
        )

    @classmethod
    def from_sklearn(cls, pca: Any, X: Union[pd.DataFrame, np.ndarray]) -> 'PCAResult':
        """
        Build a PCA result from a fitted ``sklearn.decomposition.PCA``.

        Parameters
        ----------
        pca : sklearn.decomposition.PCA
            Fitted model.
        X : pd.DataFrame or np.ndarray
            Data the cases are projected from (usually the training data).
            DataFrame columns name the variables and its index names the cases.

        Returns
        -------
        PCAResult
            rotation = ``components_.T``, x = ``transform(X)``,
            sdev = ``sqrt(explained_variance_)``.

        Notes
        -----
        A model fitted with ``n_components=k`` only exposes the variances of
        the k retained components, so ``calculate_sdev_share`` divides by the
        sum over those k rather than over every component of the data. Fit
        with ``PCA()`` to keep the full set of standard deviations.
        """
        if not hasattr(pca, 'components_') or not hasattr(pca, 'explained_variance_'):
            raise InvalidArgument("PCA model must be fitted before building a biplot")

        loadings = np.asarray(pca.components_).T
        n_components = loadings.shape[1]
        component_names = [f'{COMPONENT_PREFIX}{i+1}' for i in range(n_components)]

        if isinstance(X, pd.DataFrame):
            feature_names = [str(c) for c in X.columns]
            case_names = X.index.astype(str)
        else:
            if hasattr(pca, 'feature_names_in_'):
                feature_names = [str(c) for c in pca.feature_names_in_]
            else:
                feature_names = [f'{VARIABLE_PREFIX}{i+1}' for i in range(loadings.shape[0])]
            case_names = [str(i + 1) for i in range(np.shape(X)[0])]

        rotation = pd.DataFrame(loadings, index=feature_names, columns=component_names)
        scores = pd.DataFrame(pca.transform(X), index=case_names, columns=component_names)
        sdev = np.sqrt(np.asarray(pca.explained_variance_, dtype=float))

        return cls(rotation, scores, sdev)

    @classmethod
    def from_results_dict(cls, results: Dict[str, Any]) -> 'PCAResult':
        """
        Build a PCA result from a ``compute_pca`` style results dict.

        Expects ``'loadings'`` and ``'scores'`` DataFrames sharing the same
        component columns and an ``'eigenvalues'`` array (component variances).
        """
        missing = [key for key in ('loadings', 'scores', 'eigenvalues') if key not in results]
        if missing:
            raise InvalidArgument(f"PCA results are missing keys: {missing}")

        eigenvalues = np.asarray(results['eigenvalues'], dtype=float)
        if (eigenvalues < 0).any():
            raise InvalidArgument("Eigenvalues must be non-negative")

        return cls(results['loadings'], results['scores'], np.sqrt(eigenvalues))
