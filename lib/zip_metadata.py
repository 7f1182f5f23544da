# =============================================================================
# lib/zip_metadata.py - ZIP Metadata CSV Source
# =============================================================================
# Looks up auxiliary information about a ZIP code (place name, area, density,
# ...) from a CSV file and renders it as "header = value, ..." text for the
# analysis prompt.
#
# The CSV is read in full on every lookup; there is no cache or index.
#
# Usage:
#   source = ZipMetadataSource("California_Zip_Codes.csv")
#   text = source.describe("91344")
# =============================================================================

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from app.exceptions import ZipMetadataNotFoundError, ZipMetadataUnavailableError

logger = logging.getLogger(__name__)


class ZipMetadataSource:
    """
    CSV-backed ZIP metadata.

    All columns are read as strings so ZIP codes keep their leading zeros.
    """

    def __init__(self, csv_path: str | Path, zip_column: str = "ZIP_CODE"):
        self.csv_path = Path(csv_path)
        self.zip_column = zip_column

    def read(self) -> pd.DataFrame:
        """
        Load the whole CSV.

        Raises:
            ZipMetadataUnavailableError: If the file is missing, unreadable,
                or has no ZIP column
        """
        try:
            df = pd.read_csv(self.csv_path, dtype=str, keep_default_na=False)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            logger.error(f"Failed to read ZIP metadata from {self.csv_path}: {e}")
            raise ZipMetadataUnavailableError(str(self.csv_path), str(e)) from e

        if self.zip_column not in df.columns:
            raise ZipMetadataUnavailableError(
                str(self.csv_path), f"missing column '{self.zip_column}'"
            )
        return df

    def lookup(self, zip_code: str) -> dict[str, str]:
        """
        Return the metadata row for a ZIP as a column -> value dict.

        When the ZIP appears more than once, the last row wins.

        Raises:
            ZipMetadataNotFoundError: If the ZIP is not in the CSV
        """
        df = self.read()
        matches = df[df[self.zip_column].str.strip() == zip_code.strip()]
        if matches.empty:
            raise ZipMetadataNotFoundError(zip_code)
        return matches.iloc[-1].to_dict()

    def describe(self, zip_code: str) -> str:
        """
        Metadata for a ZIP rendered as text, in CSV column order.

        Example:
            "ZIP_CODE = 91344, PO_NAME = Granada Hills, POPULATION = 52450"
        """
        row = self.lookup(zip_code)
        return ", ".join(f"{header} = {value}" for header, value in row.items())

    def populations(self, population_column: str = "POPULATION") -> list[tuple[str, int | None]]:
        """
        (zip, population) pairs for every row, in file order.

        Blank or non-numeric populations become None.

        Raises:
            ZipMetadataUnavailableError: If the population column is missing
        """
        df = self.read()
        if population_column not in df.columns:
            raise ZipMetadataUnavailableError(
                str(self.csv_path), f"missing column '{population_column}'"
            )

        values = pd.to_numeric(df[population_column].str.replace(",", ""), errors="coerce")
        pairs = []
        for zip_code, population in zip(df[self.zip_column].str.strip(), values):
            if not zip_code:
                continue
            pairs.append((zip_code, None if pd.isna(population) else int(population)))
        return pairs
