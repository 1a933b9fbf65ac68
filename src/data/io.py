"""
Spreadsheet reader for the raw GDP / population / CO2 dataset.

**Conceptual**: This module is the *only* input boundary of the analysis. The
raw data arrives as one sheet of an Excel workbook (or, as a fallback, a CSV
export of that sheet). Whatever goes wrong while opening it (missing file,
missing sheet, corrupt workbook) is translated into a single DataSourceError
that names the path and the sheet.

**Rule**: Never call pd.read_excel or pd.read_csv directly in the transformer,
reporter or orchestration code. Always go through read_raw_spreadsheet so that
error handling stays in one place.

**Teaching note**: pandas and openpyxl raise a zoo of exceptions for bad input
(FileNotFoundError, ValueError, zipfile.BadZipFile, openpyxl's
InvalidFileException, ...). Callers should not need to know which library
failed; they need to know *which file* failed and why.
"""

import zipfile
from pathlib import Path

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException


class DataSourceError(Exception):
    """
    Raised when the input spreadsheet cannot be read.

    **Conceptual**: Covers a path that does not exist (or is a directory), a
    sheet that is not in the workbook, and a file that is not a valid
    spreadsheet. Fatal: the pipeline has nothing to analyze without it.
    """
    pass


EXCEL_SUFFIXES = ('.xlsx', '.xlsm', '.xls')
CSV_SUFFIXES = ('.csv',)


def parse_sheet_identifier(value: str | int) -> int | str:
    """
    Convert a sheet identifier from text (CLI/env) into what pandas expects.

    Digits become a 0-based sheet index; anything else is a sheet name.

    Example:
        >>> parse_sheet_identifier("0")
        0
        >>> parse_sheet_identifier("Sheet1")
        'Sheet1'
    """
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.isdigit():
        return int(text)
    return text


def read_raw_spreadsheet(
    path: Path | str,
    sheet: int | str = 0,
) -> pd.DataFrame:
    """
    Read one sheet of the raw dataset into a DataFrame.

    **Functionally**:
      - .xlsx/.xlsm/.xls: read with pd.read_excel(sheet_name=sheet).
      - .csv: read with pd.read_csv; the sheet identifier is ignored.
      - Any other suffix is tried as Excel, so a misnamed workbook still loads
        and a non-spreadsheet file fails with DataSourceError.
      - Columns are returned exactly as found in the header row.

    Args:
        path: Path to the spreadsheet file.
        sheet: Sheet index (0-based) or sheet name. Default: first sheet.

    Returns:
        Raw DataFrame, one row per spreadsheet row, in file order.

    Raises:
        DataSourceError: If the path does not exist, the sheet is missing,
                         or the file is not a readable spreadsheet.

    Example:
        >>> raw = read_raw_spreadsheet("World_GDP_Population_CO2_Emissions_Dataset.xlsx")
        >>> raw.columns[:3].tolist()
        ['Year', 'GDP Real (USD)', 'Per Capita']
    """
    path = Path(path)

    if not path.exists():
        raise DataSourceError(
            f"Input file not found: {path}. "
            f"Set CO2_EDA_DATA_PATH or pass --data-path to point at the dataset."
        )
    if path.is_dir():
        raise DataSourceError(f"Input path is a directory, not a spreadsheet: {path}")

    suffix = path.suffix.lower()

    if suffix in CSV_SUFFIXES:
        try:
            return pd.read_csv(path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
            raise DataSourceError(f"Could not read CSV file {path}: {e}") from e

    try:
        return pd.read_excel(path, sheet_name=sheet)
    except (ValueError, IndexError, KeyError) as e:
        # pandas reports both unknown sheet names/indices and undetectable
        # formats as ValueError; older versions use IndexError for indices
        raise DataSourceError(
            f"Could not read sheet {sheet!r} from {path}: {e}"
        ) from e
    except (zipfile.BadZipFile, InvalidFileException, OSError) as e:
        raise DataSourceError(
            f"File is not a readable spreadsheet: {path}: {e}"
        ) from e
