"""
Tabular views of a simulated response matrix.
"""

import pandas as pd

from distractor_service.core.data_models import SimResult

RESPONSE_COLUMNS = ["persona", "chosen_option", "chosen_text", "is_correct"]


def to_dataframe(result: SimResult) -> pd.DataFrame:
    """
    Convert the response matrix of a SimResult to a pandas DataFrame.

    Returns:
        DataFrame with columns: persona, chosen_option, chosen_text,
        is_correct. One row per simulated response.
    """
    if not result.responses:
        return pd.DataFrame(columns=RESPONSE_COLUMNS)
    return pd.DataFrame([r.model_dump() for r in result.responses])[
        RESPONSE_COLUMNS
    ]


def choice_distribution(result: SimResult) -> pd.DataFrame:
    """
    Fraction of each persona's responses that chose each option.

    Rows are personas (in simulation order), columns are option labels (in
    declared order). Personas with no draws have a row of zeros.
    """
    personas = [p.name for p in result.personas]
    labels = [o.label for o in result.options]

    df = to_dataframe(result)
    if df.empty:
        return pd.DataFrame(0.0, index=personas, columns=labels)

    table = pd.crosstab(df["persona"], df["chosen_option"], normalize="index")
    return table.reindex(index=personas, columns=labels, fill_value=0.0)
