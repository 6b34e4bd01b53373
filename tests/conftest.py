"""Shared fixtures for RBF-DRT tests."""

import numpy as np
import pytest

from rbf_drt.io import generate_voigt_data


@pytest.fixture
def single_rc_data():
    """Noise-free Rs + (R || C) spectrum, 10 points per decade, descending."""
    tau0 = 1e-1
    freq = np.logspace(4, -2, 61)  # 10 kHz to 10 mHz
    freq, Z = generate_voigt_data(Rs=10.0, elements=[(100.0, tau0)], frequencies=freq)
    return freq, Z, tau0


@pytest.fixture
def two_rc_data():
    """Two RC elements two decades apart."""
    taus = (1e-3, 1e-1)
    freq, Z = generate_voigt_data(Rs=10.0, elements=[(100.0, taus[0]), (200.0, taus[1])])
    return freq, Z, taus
