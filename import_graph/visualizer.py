"""
Graph Visualizer
Interactive plotly views of a package import graph for the dashboard
"""

import logging
from typing import Dict, List

import networkx as nx
import pandas as pd
import plotly.graph_objects as go

from .config import Config

logger = logging.getLogger(__name__)

# Graphviz X11 color names are not all valid CSS colors
PLOT_COLORS = {
    Config.STDLIB_COLOR: '#98FB98',
    Config.NATIVE_COLOR: '#FFB90F',
    Config.DEFAULT_COLOR: '#AFEEEE',
}


class GraphVisualizer:
    """Creates interactive visualizations for an import graph"""

    def __init__(self, graph: nx.DiGraph):
        self.graph = graph
        self.layout_cache = {}

    def create_graph_plot(self) -> go.Figure:
        """Create an interactive import graph visualization"""
        if self.graph.number_of_nodes() == 0:
            return self._create_empty_plot("No packages to visualize")

        pos = self._get_graph_layout()
        edge_trace = self._create_edge_trace(pos)
        node_trace = self._create_node_trace(pos)

        return go.Figure(data=[edge_trace, node_trace],
                         layout=self._get_plot_layout())

    def _get_graph_layout(self) -> Dict:
        """Calculate graph layout using spring algorithm"""
        if 'spring' not in self.layout_cache:
            if self.graph.number_of_nodes() > 100:
                # For large graphs, use a faster algorithm
                pos = nx.spring_layout(self.graph, k=1, iterations=20, seed=0)
            else:
                pos = nx.spring_layout(self.graph, k=2, iterations=50, seed=0)
            self.layout_cache['spring'] = pos

        return self.layout_cache['spring']

    def _create_node_trace(self, pos: Dict) -> go.Scatter:
        node_x = []
        node_y = []
        node_colors = []
        hover = []

        for node, data in self.graph.nodes(data=True):
            x, y = pos[node]
            node_x.append(x)
            node_y.append(y)
            node_colors.append(PLOT_COLORS.get(data.get('color'), '#CCCCCC'))

            hover_text = f"<b>{node}</b><br>"
            hover_text += f"Node ID: {data.get('id')}<br>"
            hover_text += f"Imports: {self.graph.out_degree(node)}<br>"
            hover_text += f"Imported by: {self.graph.in_degree(node)}"
            if data.get('is_stdlib'):
                hover_text += "<br><b>Standard library</b>"
            elif data.get('has_native_interop'):
                hover_text += "<br><b>Native extension code</b>"
            hover.append(hover_text)

        return go.Scatter(
            x=node_x, y=node_y,
            mode='markers+text',
            text=list(self.graph.nodes()),
            textposition="top center",
            textfont=dict(size=9),
            hovertemplate='%{hovertext}<extra></extra>',
            hovertext=hover,
            marker=dict(
                size=[12 + min(self.graph.in_degree(n), 10) for n in self.graph.nodes()],
                color=node_colors,
                line=dict(width=1, color='#555'),
            ),
            name="Packages"
        )

    def _create_edge_trace(self, pos: Dict) -> go.Scatter:
        edge_x = []
        edge_y = []
        for source, target in self.graph.edges():
            x0, y0 = pos[source]
            x1, y1 = pos[target]
            edge_x.extend([x0, x1, None])
            edge_y.extend([y0, y1, None])

        return go.Scatter(
            x=edge_x, y=edge_y,
            line=dict(width=1, color='#888'),
            hoverinfo='none',
            mode='lines',
            name="Imports"
        )

    def _get_plot_layout(self) -> dict:
        return dict(
            title=dict(text="Import Graph", font=dict(size=16)),
            showlegend=False,
            hovermode='closest',
            margin=dict(b=20, l=5, r=5, t=40),
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            plot_bgcolor='white'
        )

    def _create_empty_plot(self, message: str) -> go.Figure:
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper", yref="paper",
            x=0.5, y=0.5,
            showarrow=False,
            font=dict(size=16, color="gray")
        )
        fig.update_layout(
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            plot_bgcolor='white'
        )
        return fig

    def package_table(self) -> pd.DataFrame:
        """One row per package, most imported first"""
        rows: List[Dict] = []
        for node, data in self.graph.nodes(data=True):
            if data.get('is_stdlib'):
                kind = 'standard library'
            elif data.get('has_native_interop'):
                kind = 'native'
            else:
                kind = 'python'
            rows.append({
                'ID': data.get('id'),
                'Package': node,
                'Kind': kind,
                'Imports': self.graph.out_degree(node),
                'Imported By': self.graph.in_degree(node),
            })

        df = pd.DataFrame(rows, columns=['ID', 'Package', 'Kind', 'Imports', 'Imported By'])
        return df.sort_values(['Imported By', 'ID'], ascending=[False, True]).reset_index(drop=True)
