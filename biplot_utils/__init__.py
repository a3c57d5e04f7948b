"""
Biplot Utility Modules
======================

Draw a PCA biplot (cases as labelled points, variables as loading arrows on
a shared pair of principal-component axes) from an already computed PCA.

Package Structure
-----------------
pca_result          : PCAResult container and adapters (raw matrices, scikit-learn)
biplot_calculations : Validation, loadings, variance explained, case scaling
biplot_plots        : Plotly renderer and the ``biplot`` entry point
exceptions          : Error types raised by the package
config              : Package-level configuration constants

Quick Start
-----------
>>> from sklearn.decomposition import PCA
>>> from biplot_utils import PCAResult, biplot
>>>
>>> pca = PCA().fit(data)
>>> pca_result = PCAResult.from_sklearn(pca, data)
>>>
>>> # Biplot of the first two components
>>> fig = biplot(pca_result)
>>>
>>> # Variables only, components 3 and 4
>>> fig = biplot(pca_result, components=(3, 4), include_cases=False)
"""

# Import configuration constants
from .config import (
    DEFAULT_COMPONENTS,
    VARIANCE_DECIMALS
)

# Import error types
from .exceptions import (
    BiplotError,
    InvalidArgument,
    InvalidComponentSelection,
    MissingRenderingCapability,
    DegenerateScaleError
)

# Import the PCA result container
from .pca_result import PCAResult

# Import calculation functions
from .biplot_calculations import (
    validate_pca_result,
    validate_components,
    get_loadings,
    calculate_sdev_share,
    calculate_variance_explained,
    calculate_scale_factor,
    extract_and_scale_cases,
    compute_biplot_data
)

# Import plotting functions
from .biplot_plots import (
    PlotlyBiplotRenderer,
    check_rendering_capability,
    biplot
)

# Define public API
__all__ = [
    # Configuration constants
    'DEFAULT_COMPONENTS',
    'VARIANCE_DECIMALS',

    # Errors
    'BiplotError',
    'InvalidArgument',
    'InvalidComponentSelection',
    'MissingRenderingCapability',
    'DegenerateScaleError',

    # PCA result
    'PCAResult',

    # Calculation functions
    'validate_pca_result',
    'validate_components',
    'get_loadings',
    'calculate_sdev_share',
    'calculate_variance_explained',
    'calculate_scale_factor',
    'extract_and_scale_cases',
    'compute_biplot_data',

    # Plotting functions
    'PlotlyBiplotRenderer',
    'check_rendering_capability',
    'biplot',
]

# Package metadata
__version__ = '1.0.0'
__description__ = 'PCA biplot utilities'
