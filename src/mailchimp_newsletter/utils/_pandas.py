# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd


def records_to_dataframe(
    rows: List[Dict[str, Any]],
    columns: Optional[Sequence[str]] = None,
    date_columns: Iterable[str] = (),
) -> pd.DataFrame:
    """Build a DataFrame from attribute dicts, parsing date columns to UTC Timestamps.

    :param rows: One dict of attributes per record.
    :param columns: Restrict and order the columns. Missing columns are filled with NA.
    :param date_columns: Columns holding MailChimp date strings. Empty strings become NaT.
    """
    df = pd.DataFrame.from_records(rows, columns=list(columns) if columns is not None else None)
    for column in date_columns:
        if column in df.columns:
            df[column] = pd.to_datetime(df[column], utc=True, format="ISO8601", errors="coerce")
    return df
