"""
Rendering helpers: ProviderResult lists to pandas DataFrames, and
width-compatible Streamlit display wrappers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .formatting import format_amount
from .providers.base import ProviderResult
from .providers.registry import ProviderRegistry

RESULT_COLUMNS = ["provider", "status", "symbol", "amount", "display_amount", "claim_url", "error"]


def _provider_label(result: ProviderResult, registry: Optional[ProviderRegistry]) -> str:
    if result.success and result.data is not None:
        return result.data.provider_name
    provider = registry.get(result.provider_id) if registry is not None else None
    return provider.name if provider is not None else result.provider_id


def results_frame(
    results: Sequence[ProviderResult], registry: Optional[ProviderRegistry] = None
) -> pd.DataFrame:
    """One row per reward token; providers without tokens (or failed) get a single row."""
    rows: List[Dict[str, Any]] = []
    for result in results:
        label = _provider_label(result, registry)
        if not result.success:
            rows.append({"provider": label, "status": "error", "error": result.error})
            continue
        data = result.data
        claim_url = data.claim_url if data is not None else None
        tokens = data.tokens if data is not None else ()
        if not tokens:
            rows.append({"provider": label, "status": "no rewards", "claim_url": claim_url})
            continue
        for token in tokens:
            rows.append(
                {
                    "provider": label,
                    "status": "rewards",
                    "symbol": token.symbol,
                    "amount": token.amount,
                    "display_amount": f"{format_amount(token.amount)} {token.symbol}",
                    "claim_url": claim_url,
                }
            )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def providers_frame(registry: ProviderRegistry) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"id": d.id, "name": d.name, "platform_url": d.platform_url, "icon": d.icon}
            for d in registry.descriptors()
        ],
        columns=["id", "name", "platform_url", "icon"],
    )


def safe_for_streamlit_df(df: pd.DataFrame) -> pd.DataFrame:
    """Arrow-safe copy: object columns become strings, missing values become ''."""
    if df is None or df.empty:
        return pd.DataFrame() if df is None else df
    out = df.copy()
    for col in out.columns:
        if out[col].dtype == object:
            out[col] = out[col].map(lambda v: "" if v is None or (isinstance(v, float) and pd.isna(v)) else str(v))
    return out


def _streamlit_width_kwargs() -> dict:
    """Return width kwargs compatible with current Streamlit (avoids deprecation/TypeError)."""
    import streamlit as _st

    v = getattr(_st, "__version__", "0") or "0"
    parts = v.split(".")[:2]
    try:
        major = int(parts[0]) if parts else 0
        minor = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        return {"use_container_width": True}
    if major > 1 or (major == 1 and minor >= 40):
        return {"width": "stretch"}
    return {"use_container_width": True}


def st_df(df: pd.DataFrame, **kwargs: Any) -> Any:
    """Display DataFrame with safe conversion and width-compatible kwargs. Use instead of st.dataframe."""
    import streamlit as st

    width_kw = _streamlit_width_kwargs()
    width_kw.update(kwargs)
    if "width" in width_kw:
        width_kw.pop("use_container_width", None)
    return st.dataframe(safe_for_streamlit_df(df), **width_kw)
