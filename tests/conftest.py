import numpy as np
import pandas as pd
import pytest
from sklearn.decomposition import PCA

from biplot_utils import PCAResult


# 3 variables x 3 components
ROTATION = np.array([
    [0.60, -0.30, 0.74],
    [0.50, 0.80, -0.33],
    [-0.62, 0.52, 0.58],
])

# 5 observations x 3 components
SCORES = np.array([
    [2.0, -1.0, 0.5],
    [-3.5, 0.4, 0.1],
    [1.2, 2.2, -0.3],
    [0.3, -0.6, 0.2],
    [0.0, -1.0, -0.5],
])

SDEV = np.array([2.0, 1.2, 0.4])


@pytest.fixture
def rotation_df():
    """Known rotation matrix with variable and component names"""
    return pd.DataFrame(
        ROTATION,
        index=['mpg', 'hp', 'wt'],
        columns=['PC1', 'PC2', 'PC3']
    )


@pytest.fixture
def scores_df():
    """Known score matrix with observation names"""
    return pd.DataFrame(
        SCORES,
        index=['Mazda', 'Datsun', 'Hornet', 'Valiant', 'Duster'],
        columns=['PC1', 'PC2', 'PC3']
    )


@pytest.fixture
def small_pca(rotation_df, scores_df):
    """PCA result over 3 variables and 5 observations"""
    return PCAResult(rotation_df, scores_df, SDEV)


@pytest.fixture
def sample_data():
    """Random numeric dataset with named rows and columns"""
    rng = np.random.default_rng(42)
    values = rng.normal(size=(20, 4)) * np.array([1.0, 5.0, 0.5, 2.0])
    return pd.DataFrame(
        values,
        index=[f'S{i+1}' for i in range(20)],
        columns=['Temp', 'Pressure', 'Flow', 'Level']
    )


@pytest.fixture
def sklearn_pca(sample_data):
    """PCA result built from a fitted scikit-learn PCA"""
    pca = PCA().fit(sample_data)
    return PCAResult.from_sklearn(pca, sample_data)
