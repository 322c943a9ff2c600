"""Team Optimizer: Streamlit app.

Load a collaboration history, pick team sizes, and search every canonical
partition for the teams with the least historical overlap.

Run with ``streamlit run app.py``.
"""

import logging
import time

import streamlit as st

from team_optimizer.graph import build_graph, collaboration_figure, force_layout
from team_optimizer.history import (
    HistoryDataset,
    parse_history_csv,
    parse_history_json,
    top_collaborations,
)
from team_optimizer.history_repository import HistoryRepository
from team_optimizer.engine.optimizer import RECOMMENDED_MAX_PEOPLE
from team_optimizer.engine.partitions import count_canonical_partitions
from team_optimizer.exceptions import InvalidInputError
from team_optimizer.jobs import OptimizationJob
from team_optimizer.settings import load_settings
from team_optimizer.team_sizes import even_team_sizes


SETTINGS = load_settings()
logging.basicConfig(level=SETTINGS.log_level)
logger = logging.getLogger(__name__)

_REPO = HistoryRepository(SETTINGS.history_path)


# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Team Optimizer", page_icon="🧩", layout="wide")
st.title("🧩 Team Optimizer")
st.caption("Split people into teams that minimize how often teammates have worked together before.")


# ---------------------------------------------------------------------------
# Session-state helpers
# ---------------------------------------------------------------------------
def _get_dataset() -> HistoryDataset | None:
    if "dataset" not in st.session_state:
        try:
            st.session_state.dataset = _REPO.load_dataset()
        except ValueError as exc:
            logger.warning("Ignoring stored dataset: %s", exc)
            st.session_state.dataset = None
    return st.session_state.dataset


def _set_dataset(dataset: HistoryDataset) -> None:
    st.session_state.dataset = dataset
    st.session_state.pop("result", None)
    st.session_state.pop("layout", None)
    _REPO.save_dataset(dataset)


def _get_layout(dataset: HistoryDataset):
    if "layout" not in st.session_state:
        nodes, edges = build_graph(dataset.people, dataset.conflict_matrix)
        st.session_state.layout = (force_layout(nodes, edges), edges)
    return st.session_state.layout


if "job" not in st.session_state:
    st.session_state.job = None


# ---------------------------------------------------------------------------
# Sidebar: history upload
# ---------------------------------------------------------------------------
with st.sidebar:
    st.header("📂 Collaboration history")
    upload = st.file_uploader("Upload JSON or CSV (team,member)", type=["json", "csv"])
    if upload is not None and st.button("Load history", use_container_width=True):
        text = upload.getvalue().decode("utf-8")
        try:
            if upload.name.lower().endswith(".csv"):
                loaded = parse_history_csv(text)
            else:
                loaded = parse_history_json(text)
        except InvalidInputError as exc:
            st.error(str(exc))
        else:
            _set_dataset(loaded)
            st.success(f"Loaded {len(loaded.people)} people")
            st.rerun()

    if _get_dataset() is not None and st.button("🗑 Clear history", use_container_width=True):
        _REPO.clear()
        for key in ("dataset", "result", "layout"):
            st.session_state.pop(key, None)
        st.rerun()

dataset = _get_dataset()
if dataset is None or not dataset.people:
    st.info("Upload a collaboration history to get started.")
    st.stop()

tab1, tab2 = st.tabs(["🕸 History", "⚙️ Optimize"])


# =========================================================================
# Tab 1: history overview
# =========================================================================
with tab1:
    c1, c2 = st.columns(2)
    c1.metric("People", len(dataset.people))
    c2.metric("Past teams", len(dataset.team_history))

    nodes, edges = _get_layout(dataset)
    st.plotly_chart(collaboration_figure(nodes, edges), use_container_width=True)

    st.subheader("Most frequent collaborations")
    pairs = top_collaborations(dataset)
    if pairs:
        st.dataframe(
            [
                {"Person A": c.person_a.name, "Person B": c.person_b.name, "Times together": c.count}
                for c in pairs
            ],
            hide_index=True,
            use_container_width=True,
        )
    else:
        st.write("Nobody has worked together yet.")


# =========================================================================
# Tab 2: optimization
# =========================================================================
with tab2:
    n_people = len(dataset.people)
    if n_people > RECOMMENDED_MAX_PEOPLE:
        st.warning(
            f"{n_people} people is above the recommended {RECOMMENDED_MAX_PEOPLE} "
            "for exhaustive search; set a deadline or expect a long run."
        )

    mode = st.radio("Team sizes", ["Even split", "Suggested", "Custom"], horizontal=True)
    team_sizes: list[int] = []
    if mode == "Even split":
        n_teams = st.number_input("Number of teams", min_value=1, max_value=n_people, value=min(2, n_people))
        team_sizes = even_team_sizes(n_people, int(n_teams))
    elif mode == "Suggested":
        if dataset.suggested_team_sizes:
            choice = st.selectbox(
                "Layout",
                options=range(len(dataset.suggested_team_sizes)),
                format_func=lambda i: " + ".join(map(str, dataset.suggested_team_sizes[i])),
            )
            team_sizes = list(dataset.suggested_team_sizes[choice])
        else:
            st.write("No suggested layouts for this many people.")
    else:
        raw = st.text_input("Sizes (comma separated)", value=",".join(map(str, even_team_sizes(n_people, 1))))
        try:
            team_sizes = [int(s) for s in raw.split(",") if s.strip()]
        except ValueError:
            st.error("Sizes must be whole numbers")

    max_results = st.number_input("Max tied results", min_value=1, max_value=100, value=SETTINGS.max_results)
    deadline = st.number_input(
        "Deadline in seconds (0 = none)",
        min_value=0.0,
        value=float(SETTINGS.deadline_seconds or 0.0),
    )
    st.caption(
        f"Teams {team_sizes} → {count_canonical_partitions(n_people, team_sizes):,} canonical partitions"
    )

    job: OptimizationJob | None = st.session_state.job
    running = job is not None and not job.done

    if st.button("🚀 Optimize", type="primary", disabled=running or not team_sizes, use_container_width=True):
        job = OptimizationJob(
            dataset.people,
            team_sizes,
            dataset.conflict_matrix,
            max_results=int(max_results),
            deadline_seconds=deadline or None,
            progress_interval=SETTINGS.progress_interval,
        )
        job.start()
        st.session_state.job = job
        st.rerun()

    if running:
        progress = job.progress()
        total = max(progress["total"] or 1, 1)
        ratio = min(progress["checked"] / total, 1.0)
        elapsed = int(time.time() - (job.started_at or time.time()))
        col1, col2 = st.columns([3, 1])
        with col1:
            st.progress(ratio, text=f"{progress['checked']:,} / {total:,} partitions")
            st.caption(f"Running {elapsed}s | best score so far: {progress['best_score']}")
        with col2:
            if st.button("🛑 Cancel", use_container_width=True):
                job.cancel()
        time.sleep(1.0)
        st.rerun()

    if job is not None and job.done:
        if job.error:
            st.error(job.error)
        elif job.result is not None:
            if job.cancelled:
                st.warning(f"⚠️ Partial result: {job.stop_reason}")
            else:
                _REPO.save_result(job.result)
            st.session_state.result = job.result
        st.session_state.job = None

    result = st.session_state.get("result")
    if result is None:
        try:
            result = _REPO.load_result()
        except ValueError as exc:
            logger.warning("Ignoring stored result: %s", exc)

    if result is not None and result.best_assignments:
        m1, m2, m3 = st.columns(3)
        m1.metric("Best score", result.best_score)
        m2.metric("Partitions checked", f"{result.total_combinations_checked:,}")
        m3.metric("Time", f"{result.execution_time_ms:.0f} ms")

        labels = [
            f"Option {i + 1} (score {a.conflict_score})"
            for i, a in enumerate(result.best_assignments)
        ]
        picked = st.selectbox("Solution", options=range(len(labels)), format_func=lambda i: labels[i])
        assignment = result.best_assignments[picked]

        cols = st.columns(len(assignment.teams))
        for idx, (col, team) in enumerate(zip(cols, assignment.teams)):
            with col:
                st.markdown(f"**Team {idx + 1}**")
                for member in team.members:
                    st.write(f"• {member.name}")

        nodes, edges = _get_layout(dataset)
        st.plotly_chart(collaboration_figure(nodes, edges, assignment.teams), use_container_width=True)
