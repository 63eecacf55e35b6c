"""
Input source resolution for I-squared estimation.

Converts the supported source formats (pandas DataFrame, dict of columns,
list / numpy array, file path, or a name registered in a catalog) into a
pandas DataFrame, and extracts the numeric blocks the estimator needs.
"""

from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from ..exceptions import DatasetNotFoundError, InvalidSourceShapeError
from .validators import (
    ESTIMATE_COLUMN,
    _find_estimate_column,
    _validate_covariance_table,
    _validate_estimates_table,
)

_READERS = {
    ".csv": lambda path: pd.read_csv(path),
    ".tsv": lambda path: pd.read_csv(path, sep="\t"),
    ".txt": lambda path: pd.read_csv(path, sep=None, engine="python"),
    ".parquet": lambda path: pd.read_parquet(path),
    ".pkl": lambda path: pd.read_pickle(path),
    ".pickle": lambda path: pd.read_pickle(path),
}


def normalize_table_input(data, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Convert in-memory tabular data into a pandas DataFrame.

    Accepted inputs:
        - pandas DataFrame: returned as is
        - dict of {name: array}: keys become column names
        - list or 1D numpy array: treated as single column
        - 2D numpy array: used directly

    When *columns* is not provided for array / list input, columns are
    auto-named ``column_1``, ``column_2``, ...

    Args:
        data: Raw data in any supported format.
        columns: Optional explicit column names (only used for numpy/list input).

    Returns:
        DataFrame holding *data*.

    Raises:
        TypeError: If *data* is an unsupported type.
        ValueError: If *columns* length doesn't match array width.
    """
    # --- pandas DataFrame ---------------------------------------------------
    if isinstance(data, pd.DataFrame):
        return data

    # --- dict ---------------------------------------------------------------
    if isinstance(data, dict):
        return pd.DataFrame({col: np.asarray(values) for col, values in data.items()})

    # --- list / numpy array -------------------------------------------------
    if isinstance(data, (list, tuple, np.ndarray)):
        arr = np.asarray(data)

        # 1-D → single column
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)

        if columns is None:
            columns = [f"column_{i + 1}" for i in range(arr.shape[1])]

        if len(columns) != arr.shape[1]:
            raise ValueError(f"columns length ({len(columns)}) must match data columns ({arr.shape[1]})")

        return pd.DataFrame(arr, columns=columns)

    # --- unsupported --------------------------------------------------------
    raise TypeError("data must be a pandas DataFrame, dict, list, or numpy array")


def _read_table_file(path: Path, role: str) -> pd.DataFrame:
    """Read a tabular file, mapping every "cannot open" failure to ``DatasetNotFoundError``."""
    if not path.exists():
        raise DatasetNotFoundError(f"{role}: file '{path}' does not exist")
    if not path.is_file():
        raise DatasetNotFoundError(f"{role}: '{path}' is not a file")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise DatasetNotFoundError(
            f"{role}: cannot open '{path}' - unsupported file type '{path.suffix}'. "
            f"Supported: {', '.join(sorted(_READERS))}"
        )

    # Corrupt pickles, corrupt parquet files and a missing parquet engine
    # all surface here with library-specific exception types.
    try:
        return reader(path)
    except Exception as e:
        raise DatasetNotFoundError(f"{role}: cannot read '{path}' ({type(e).__name__}: {e})") from e


def resolve_source(source: Any, role: str, catalog: Optional[Mapping[str, Any]] = None) -> pd.DataFrame:
    """
    Locate and open an input source as a DataFrame.

    Resolution order for strings: a name registered in *catalog* first, then
    a file path. ``pathlib.Path`` values are always treated as files, and
    in-memory tables are passed to ``normalize_table_input``.

    Args:
        source: DataFrame, dict, list, ndarray, file path, or catalog name.
        role: Parameter name the source was supplied as (used in messages).
        catalog: Optional mapping of dataset names to sources.

    Returns:
        The source as a DataFrame.

    Raises:
        DatasetNotFoundError: If the source cannot be located or read.
        InvalidSourceShapeError: If in-memory columns cannot form a table
            (for example dict columns of unequal length).
    """
    if isinstance(source, str):
        if catalog is not None and source in catalog:
            return resolve_source(catalog[source], role)
        path = Path(source).expanduser()
        if catalog is not None and not path.exists():
            raise DatasetNotFoundError(
                f"{role}: '{source}' is neither a catalog dataset ({', '.join(map(str, catalog)) or 'empty catalog'}) "
                f"nor an existing file"
            )
        return _read_table_file(path, role)

    if isinstance(source, Path):
        return _read_table_file(source.expanduser(), role)

    try:
        return normalize_table_input(source)
    except TypeError as e:
        raise DatasetNotFoundError(f"{role}: cannot open source of type {type(source).__name__} ({e})") from e
    except ValueError as e:
        raise InvalidSourceShapeError(f"{role}: cannot build a table from {type(source).__name__} ({e})") from e


def extract_fixed_effects(paraest: pd.DataFrame) -> Tuple[Tuple[float, float], List[str]]:
    """
    Read the intercept and slope from a parameter-estimate table.

    A table without an ``Estimate`` column but with exactly one column (for
    example a plain list of two numbers) is read as the estimate column.
    Row 1 is the intercept, row 2 the slope; the positions are not inferred
    from effect names.

    Returns:
        ((beta0, beta1), warnings)

    Raises:
        InvalidSourceShapeError: If the table layout is not usable.
    """
    if _find_estimate_column(paraest) is None and paraest.shape[1] == 1:
        paraest = paraest.set_axis([ESTIMATE_COLUMN], axis=1)

    result = _validate_estimates_table(paraest)
    result.raise_if_invalid(InvalidSourceShapeError)

    est = pd.to_numeric(paraest[_find_estimate_column(paraest)].iloc[:2])
    return (float(est.iloc[0]), float(est.iloc[1])), result.warnings


def extract_covariance_matrix(g_mat: pd.DataFrame) -> np.ndarray:
    """
    Read the 2x2 random-effects covariance block from a table.

    Non-numeric columns (row labels) are dropped; the remaining two columns
    are taken in order as the intercept and slope columns. A numeric label
    column, such as the integer ``Row`` column of a mixed-model export,
    counts as a third column: select the two matrix columns first.

    Raises:
        InvalidSourceShapeError: If the table does not hold a 2x2 numeric block.
    """
    _validate_covariance_table(g_mat).raise_if_invalid(InvalidSourceShapeError)
    return g_mat.select_dtypes(include=[np.number]).to_numpy(dtype=np.float64)
