"""
Starlink usage aggregations for the net-usage charts.

All group-bys run in pandas over the rows already filtered by date window;
dates come out as ISO strings and usage is rounded to two decimals.
"""

from __future__ import annotations

import pandas as pd

from app.models.starlink_usage import StarlinkUsage

COLUMNS = ["tanggal", "unit_starlink", "total_pemakaian"]


def _frame(rows: list[StarlinkUsage]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "tanggal": row.tanggal,
                "unit_starlink": row.unit_starlink,
                "total_pemakaian": float(row.total_pemakaian or 0),
            }
            for row in rows
        ],
        columns=COLUMNS,
    )
    if not df.empty:
        df["month"] = pd.to_datetime(df["tanggal"]).dt.strftime("%Y-%m")
    return df


def _total_by(df: pd.DataFrame, key: str) -> list[dict]:
    grouped = df.groupby(key, as_index=False)["total_pemakaian"].sum().sort_values(key)
    return [
        {key: _label(row[key]), "total_usage": round(float(row["total_pemakaian"]), 2)}
        for _, row in grouped.iterrows()
    ]


def _per_unit_by(df: pd.DataFrame, key: str) -> list[dict]:
    pivot = df.pivot_table(
        index=key,
        columns="unit_starlink",
        values="total_pemakaian",
        aggfunc="sum",
    ).sort_index()

    result = []
    for index_value, row in pivot.iterrows():
        entry = {key: _label(index_value)}
        # units without data on this date/month are left out, not zero-filled
        entry.update(
            {unit: round(float(value), 2) for unit, value in row.items() if pd.notna(value)}
        )
        result.append(entry)
    return result


def _label(value) -> str:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def usage_by_date(rows: list[StarlinkUsage]) -> list[dict]:
    df = _frame(rows)
    if df.empty:
        return []
    return _total_by(df, "tanggal")


def usage_by_date_and_unit(rows: list[StarlinkUsage]) -> list[dict]:
    df = _frame(rows)
    if df.empty:
        return []
    return _per_unit_by(df, "tanggal")


def usage_by_month(rows: list[StarlinkUsage], month: str | None = None) -> list[dict]:
    df = _frame(rows)
    if df.empty:
        return []
    if month:
        df = df[df["month"] == month]
        if df.empty:
            return []
    return _total_by(df, "month")


def usage_by_month_and_unit(rows: list[StarlinkUsage], month: str | None = None) -> list[dict]:
    df = _frame(rows)
    if df.empty:
        return []
    if month:
        df = df[df["month"] == month]
        if df.empty:
            return []
    return _per_unit_by(df, "month")


def months_with_data(rows: list[StarlinkUsage]) -> list[str]:
    df = _frame(rows)
    if df.empty:
        return []
    return sorted(df["month"].unique().tolist())
