from datetime import datetime
from io import BytesIO

import pandas as pd
from fastapi.responses import StreamingResponse
from openpyxl.utils import get_column_letter

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def dataframe_to_xlsx(df: pd.DataFrame, sheet_name: str) -> BytesIO:
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)

        # Auto-adjust column width
        worksheet = writer.sheets[sheet_name]
        for idx, col in enumerate(df.columns, start=1):
            col_lengths = df[col].fillna("").astype(str).str.len()
            max_len = max(col_lengths.max() if not col_lengths.empty else 0, len(str(col))) + 2
            worksheet.column_dimensions[get_column_letter(idx)].width = max_len

    output.seek(0)
    return output


def xlsx_response(
    rows: list[dict],
    *,
    columns: dict[str, str],
    sheet_name: str,
    filename_prefix: str,
) -> StreamingResponse:
    """
    Stream `rows` as an xlsx attachment.

    `columns` maps row keys to header labels and fixes the column order, so
    an empty export still carries its header row.
    """
    df = pd.DataFrame(rows, columns=list(columns.keys()))
    df.rename(columns=columns, inplace=True)

    output = dataframe_to_xlsx(df, sheet_name)
    filename = f"{filename_prefix}_{datetime.now().strftime('%Y%m%d_%H%M')}.xlsx"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(output, headers=headers, media_type=XLSX_MEDIA_TYPE)
