# app.py
import streamlit as st

from loaders.csv_loader import load_csv
from loaders.validate import prepare_observations

from utils.config import AnalysisConfig, DEFAULTS, EMPTY_GROUP_POLICIES
from utils.io import CIAnalysisError, dataframe_to_csv_buffer
from utils.logger import setup_logger

from analysis.pipeline import run_ci_comparison, STRATEGIES

from plots.intervals import (
    plot_group_cis,
    plot_group_cis_matplotlib,
    plot_sampling_distribution,
)
from plots.export import export_figure_to_png


logger = setup_logger("analysis")
setup_logger("loaders")


# =========================================================
# Strategy tooltips
# =========================================================
STRATEGY_TOOLTIPS = {
    "sample_t": "Closed-form CI from the drawn sample, t distribution with n - 1 df.",
    "population_z": "Closed-form CI treating the whole dataset as the population, z quantiles.",
    "bootstrap_normal": "Mean of bootstrap means ± z · sd of bootstrap means.",
    "bootstrap_percentile": "Empirical quantiles of the bootstrap means (linear interpolation).",
}


# =========================================================
# Page & State
# =========================================================
def init_page():
    st.set_page_config(
        page_title="Group Mean Confidence Intervals",
        page_icon="📊",
        layout="wide",
    )


def init_state():
    defaults = {
        "dataset": None,
        "dataset_name": None,
        "observations": None,
        "results": None,
        "uploader_key": 0,
        "columns": {"group": None, "value": None, "id": None, "age": None},
        "min_age": None,
        **DEFAULTS,
    }
    for k, v in defaults.items():
        st.session_state.setdefault(k, v)


# =========================================================
# Header
# =========================================================
def render_header():
    st.title("📊 Group Mean Confidence Intervals")
    st.caption(
        "Compare theoretical (t / z) and bootstrap (normal / percentile) "
        "confidence intervals for the mean of a value across two groups."
    )
    st.divider()


# =========================================================
# Dataset
# =========================================================
def render_dataset_loader() -> None:
    st.header("📁 Dataset")

    f = st.file_uploader(
        "Load dataset",
        type=["csv"],
        label_visibility="collapsed",
        key=f"uploader_{st.session_state['uploader_key']}",
    )
    if f:
        try:
            st.session_state["dataset"] = load_csv(f)
            st.session_state["dataset_name"] = f.name
            st.session_state["observations"] = None
            st.session_state["results"] = None
        except CIAnalysisError as e:
            st.error(str(e))
        st.session_state["uploader_key"] += 1
        st.rerun()

    if st.session_state["dataset"] is None:
        st.info("Load a CSV dataset to begin.")
        return

    df = st.session_state["dataset"]
    st.caption(f"**{st.session_state['dataset_name']}**: {len(df)} rows, {len(df.columns)} columns.")


def render_column_controls() -> None:
    with st.expander("🧾 Columns", expanded=True):
        df = st.session_state["dataset"]
        cols = list(df.columns)
        optional = ["None"] + cols
        sel = st.session_state["columns"]

        def _index(options, value, fallback=0):
            return options.index(value) if value in options else fallback

        sel["group"] = st.selectbox("Group column", cols, index=_index(cols, sel["group"]))
        sel["value"] = st.selectbox("Value column", cols, index=_index(cols, sel["value"], min(1, len(cols) - 1)))
        id_col = st.selectbox("Subject id (dedupe)", optional, index=_index(optional, sel["id"]))
        age_col = st.selectbox("Age column (filter)", optional, index=_index(optional, sel["age"]))
        sel["id"] = None if id_col == "None" else id_col
        sel["age"] = None if age_col == "None" else age_col

        if sel["age"]:
            st.session_state["min_age"] = st.number_input(
                "Minimum age",
                min_value=0,
                step=1,
                value=int(st.session_state.get("min_age") or 18),
            )
        else:
            st.session_state["min_age"] = None


def render_config_controls() -> None:
    with st.expander("⚙️ Settings", expanded=True):
        st.session_state["sample_size"] = int(
            st.number_input("Sample size (N)", min_value=2, step=10, value=int(st.session_state["sample_size"]))
        )
        st.session_state["n_boot"] = int(
            st.number_input("Bootstrap resamples (B)", min_value=2, step=100, value=int(st.session_state["n_boot"]))
        )
        st.session_state["ci_level"] = st.slider("Confidence level", 0.80, 0.99, float(st.session_state["ci_level"]), 0.01)
        seed = st.number_input("Seed", min_value=0, step=1, value=int(st.session_state.get("seed") or 0))
        st.session_state["seed"] = int(seed)
        st.session_state["empty_group_policy"] = st.selectbox(
            "Empty group in a resample",
            EMPTY_GROUP_POLICIES,
            index=EMPTY_GROUP_POLICIES.index(st.session_state["empty_group_policy"]),
            help="'raise' aborts the run, 'redraw' draws that resample again.",
        )


def build_config() -> AnalysisConfig:
    return AnalysisConfig(
        sample_size=st.session_state["sample_size"],
        n_boot=st.session_state["n_boot"],
        ci_level=st.session_state["ci_level"],
        seed=st.session_state["seed"],
        empty_group_policy=st.session_state["empty_group_policy"],
    )


def run_analysis() -> None:
    sel = st.session_state["columns"]
    try:
        obs = prepare_observations(
            st.session_state["dataset"],
            group_field=sel["group"],
            value_field=sel["value"],
            id_field=sel["id"],
            age_field=sel["age"],
            min_age=st.session_state["min_age"],
        )
        config = build_config()
        st.session_state["observations"] = obs
        st.session_state["results"] = run_ci_comparison(obs, config)
    except CIAnalysisError as e:
        logger.error("Analysis failed: %s", e)
        st.session_state["results"] = None
        st.error(str(e))


# =========================================================
# Results
# =========================================================
def render_tables(results: dict) -> None:
    st.subheader("📋 Confidence Intervals")

    panels = [
        ("sample_t", results["sample_ci"]),
        ("population_z", results["population_ci"]),
        ("bootstrap_normal", results["bootstrap_normal_ci"]),
        ("bootstrap_percentile", results["bootstrap_percentile_ci"]),
    ]

    cols = st.columns(2)
    for i, (key, df) in enumerate(panels):
        with cols[i % 2]:
            st.markdown(f"#### {STRATEGIES[key]}", help=STRATEGY_TOOLTIPS[key])
            st.dataframe(df, use_container_width=True, hide_index=True)

    comparison = results["comparison"]
    st.download_button(
        "⬇️ Download comparison CSV",
        dataframe_to_csv_buffer(comparison),
        file_name="ci_comparison.csv",
        mime="text/csv",
        use_container_width=True,
    )


def render_plots(results: dict) -> None:
    value_label = st.session_state["columns"]["value"] or "value"

    st.subheader("📈 Comparison")
    fig = plot_group_cis(
        results["comparison"],
        title=f"{int(st.session_state['ci_level'] * 100)}% CI of mean {value_label}",
        value_label=value_label,
        labels=STRATEGIES,
    )
    st.plotly_chart(fig, use_container_width=True)

    st.subheader("🎲 Bootstrap Sampling Distribution")
    ci_kind = st.radio("Overlay bounds", ["percentile", "normal", "none"], horizontal=True)
    overlay = {
        "percentile": results["bootstrap_percentile_ci"],
        "normal": results["bootstrap_normal_ci"],
        "none": None,
    }[ci_kind]
    hist = plot_sampling_distribution(
        results["sampling_distribution"],
        ci_table=overlay,
        value_label=f"mean {value_label}",
    )
    st.plotly_chart(hist, use_container_width=True)

    c1, c2 = st.columns(2)
    with c1:
        st.download_button(
            "⬇️ Download sampling distribution CSV",
            dataframe_to_csv_buffer(results["sampling_distribution"].reset_index()),
            file_name="sampling_distribution.csv",
            mime="text/csv",
            use_container_width=True,
        )
    with c2:
        mpl_fig = plot_group_cis_matplotlib(
            results["comparison"],
            value_label=value_label,
            labels=STRATEGIES,
        )
        st.download_button(
            "⬇️ ci_comparison.png",
            export_figure_to_png(mpl_fig),
            file_name="ci_comparison.png",
            mime="image/png",
            use_container_width=True,
        )


# =========================================================
# Main
# =========================================================
def main():
    init_page()
    init_state()
    render_header()

    render_dataset_loader()
    if st.session_state["dataset"] is None:
        return

    left, right = st.columns([1.2, 3.2], gap="large")

    with left:
        render_column_controls()
        render_config_controls()
        if st.button("▶️ Compute intervals", use_container_width=True):
            run_analysis()

    with right:
        results = st.session_state.get("results")
        if not results:
            st.info("Pick columns and settings, then compute.")
            return
        render_tables(results)
        render_plots(results)


if __name__ == "__main__":
    main()
