import streamlit as st
import logging
import os
from dotenv import load_dotenv
load_dotenv()

from import_graph import AnalysisOptions, ImportGraphError, analyze, get_graph_stats
from import_graph.cli import split_list
from import_graph.config import setup_logging
from import_graph.models import IGNORED_PSEUDO_PACKAGES
from import_graph.visualizer import GraphVisualizer

logger = setup_logging("INFO")


def options_from_sidebar() -> tuple:
    """Collect the root package, search root and run options from the sidebar"""
    with st.sidebar:
        st.header("⚙️ Configuration")
        search_root = st.text_input("Search root", value=os.getcwd())
        ignore_stdlib = st.checkbox("Ignore standard library packages")
        delve_stdlib = st.checkbox("Show dependencies of standard library packages")
        include_tests = st.checkbox("Include test modules")
        horizontal = st.checkbox("Horizontal layout")
        ignore_packages = st.text_input("Packages to ignore", placeholder="e.g. app.legacy,app.vendor")
        ignore_prefixes = st.text_input("Prefixes to ignore", placeholder="e.g. tests,app.experimental")
        only_prefixes = st.text_input("Prefixes to include", placeholder="e.g. app")
        tags = st.text_input("Tags", placeholder="e.g. win32,TYPE_CHECKING")

    options = AnalysisOptions(
        ignore_stdlib=ignore_stdlib,
        delve_stdlib=delve_stdlib,
        ignored=IGNORED_PSEUDO_PACKAGES | set(split_list(ignore_packages)),
        ignored_prefixes=split_list(ignore_prefixes),
        only_prefixes=split_list(only_prefixes),
        tags=split_list(tags),
        horizontal=horizontal,
        include_tests=include_tests,
    )
    return search_root, options


def main():
    st.set_page_config(page_title="import-graph", page_icon="🔗", layout="wide")

    st.title("🔗 import-graph")
    st.markdown("##### Explore how a Python package and everything it imports fit together.")

    search_root, options = options_from_sidebar()

    col1, col2 = st.columns([1, 3])
    with col1:
        package_name = st.text_input("Root package", placeholder="e.g. import_graph, json")
        if st.button("🔍 Analyze", type="primary", use_container_width=True) and package_name:
            with st.spinner(f"Resolving imports of '{package_name}'..."):
                try:
                    st.session_state.import_analysis = analyze(package_name, options, search_root=search_root)
                    st.session_state.import_root = package_name
                except ImportGraphError as e:
                    logger.error(str(e))
                    st.session_state.import_analysis = None
                    st.error(str(e))

    result = st.session_state.get('import_analysis')
    if not result:
        return

    with col2:
        stats = get_graph_stats(result.graph)
        m_col1, m_col2, m_col3 = st.columns(3)
        with m_col1:
            st.metric("Packages", stats['total_packages'])
        with m_col2:
            st.metric("Imports", stats['total_dependencies'])
        with m_col3:
            st.metric("Graph Density", f"{stats['density']:.3f}")

    tab1, tab2, tab3 = st.tabs(["📊 Graph", "🗂️ Packages", "📄 DOT Source"])

    with tab1:
        st.graphviz_chart(result.dot, use_container_width=True)
        visualizer = GraphVisualizer(result.graph)
        st.plotly_chart(visualizer.create_graph_plot(), use_container_width=True)

    with tab2:
        visualizer = GraphVisualizer(result.graph)
        st.dataframe(visualizer.package_table(), use_container_width=True)
        is_connected = "Yes" if stats['is_connected'] else "No"
        st.metric("Weakly Connected", is_connected)

    with tab3:
        st.code(result.dot, language="dot")
        st.download_button("Download .dot", result.dot,
                           file_name=f"{st.session_state.import_root}.dot",
                           mime="text/vnd.graphviz")


if __name__ == "__main__":
    main()
