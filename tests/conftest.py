"""
Shared pytest fixtures for IPDI2 tests.
"""

import numpy as np
import pandas as pd
import pytest

from tests.config import BETA0, BETA1, COV


@pytest.fixture
def two_study_ipd():
    """2 studies x 5 observations, binary exposure."""
    return pd.DataFrame(
        {
            "study": [1, 1, 1, 1, 1, 2, 2, 2, 2, 2],
            "treat": [0, 1, 0, 1, 0, 1, 0, 1, 0, 1],
            "response": [0, 1, 0, 0, 1, 1, 0, 1, 0, 0],
        }
    )


@pytest.fixture
def fixed_effects():
    """Fixed-effect table as written by a mixed-model fit."""
    return pd.DataFrame(
        {
            "Effect": ["Intercept", "treat"],
            "Estimate": [BETA0, BETA1],
            "StdErr": [0.30, 0.25],
        }
    )


@pytest.fixture
def g_matrix():
    """G matrix with a row-label column."""
    return pd.DataFrame(
        {
            "Effect": ["Intercept", "treat"],
            "Col1": [COV[0][0], COV[1][0]],
            "Col2": [COV[0][1], COV[1][1]],
        }
    )


@pytest.fixture
def csv_sources(tmp_path, two_study_ipd, fixed_effects, g_matrix):
    """The three inputs written to CSV files; returns their paths as strings."""
    paths = {
        "dataset": tmp_path / "ipd.csv",
        "paraest_mat": tmp_path / "fixed.csv",
        "g_mat": tmp_path / "g.csv",
    }
    two_study_ipd.to_csv(paths["dataset"], index=False)
    fixed_effects.to_csv(paths["paraest_mat"], index=False)
    g_matrix.to_csv(paths["g_mat"], index=False)
    return {k: str(v) for k, v in paths.items()}


@pytest.fixture
def cov():
    return np.array(COV)
