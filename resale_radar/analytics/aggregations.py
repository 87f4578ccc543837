# aggregations.py
# Chart tables derived from the trend list. Pure: same trends in, same frames out.

from typing import Iterable

import pandas as pd

from resale_radar.schemas import Platform, Trend

COLUMNS = ["name", "value"]


def platform_counts(trends: Iterable[Trend]) -> pd.DataFrame:
    """One row per Platform in enum order, zero counts kept."""
    names = [p.value for p in Platform]
    observed = pd.Series([t.platform for t in trends], dtype="object")

    counts = observed.value_counts().reindex(names, fill_value=0)
    return pd.DataFrame({"name": names, "value": counts.astype(int).tolist()})


def category_counts(trends: Iterable[Trend]) -> pd.DataFrame:
    """One row per distinct category, ordered by first occurrence."""
    categories = pd.Series([t.category for t in trends], dtype="object")
    if categories.empty:
        return pd.DataFrame(columns=COLUMNS).astype({"value": int})

    # groupby(sort=False) keeps first-seen order
    counts = categories.groupby(categories, sort=False).size()
    return pd.DataFrame({"name": counts.index.tolist(), "value": counts.astype(int).tolist()})
