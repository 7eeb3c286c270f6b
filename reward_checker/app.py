"""
Cardano reward checker dashboard.
Run: streamlit run reward_checker/app.py   (or: reward-checker streamlit)
"""
from __future__ import annotations

import asyncio
from typing import List

import streamlit as st

from reward_checker import config
from reward_checker.controller import RewardCheckController
from reward_checker.formatting import format_amount, icon_for_token
from reward_checker.preferences import JsonFilePreferences
from reward_checker.providers import ProviderResult, ValidationError, create_default_registry
from reward_checker.ui import providers_frame, st_df

_METADATA_LABELS = {"stake_count": "Active stakes", "total_rewards": "Total rewards"}


def render_card(result: ProviderResult, controller: RewardCheckController) -> None:
    provider = controller.registry.get(result.provider_id)
    with st.container(border=True):
        if not result.success:
            st.markdown(f"**{provider.name if provider else result.provider_id}** - Error")
            st.error(result.error)
            return
        data = result.data
        title = f"[{data.provider_name}]({data.claim_url})" if data.claim_url else data.provider_name
        st.markdown(f"**{title}** - Checked")
        if not data.tokens:
            st.caption("No unclaimed rewards found")
        for token in data.tokens:
            cols = st.columns([1, 6, 4])
            cols[0].image(icon_for_token(token), width=24)
            cols[1].write(token.symbol)
            cols[2].write(f"{format_amount(token.amount)} {token.symbol}")
        for key, label in _METADATA_LABELS.items():
            if data.metadata.get(key):
                st.caption(f"{label}: {data.metadata[key]}")


def render_results(results: List[ProviderResult], controller: RewardCheckController, slot) -> None:
    with slot.container():
        for result in results:
            render_card(result, controller)


def main() -> None:
    st.set_page_config(page_title="Cardano Reward Checker", layout="centered")
    st.title("Cardano Reward Checker")

    registry = create_default_registry()
    preferences = JsonFilePreferences(config.preferences_path())
    controller = RewardCheckController(registry, preferences)

    address = st.text_input("Wallet address", value=controller.restore_address() or "")
    slot = st.empty()
    controller.renderer = lambda results: render_results(results, controller, slot)

    if st.button("Check rewards", type="primary"):
        try:
            with st.spinner("Checking providers..."):
                asyncio.run(controller.check(address))
        except ValidationError as exc:
            st.warning(str(exc))

    with st.expander("Supported services"):
        st_df(providers_frame(registry), hide_index=True)


if __name__ == "__main__":
    main()
