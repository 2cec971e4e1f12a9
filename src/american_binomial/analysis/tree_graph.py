# %% Imports

import networkx as nx
import plotly.graph_objects as go


from ..pricing import AmericanBinomialTree, InvalidInput
from ..pricing.lattice import level_start


# %% Classes


class TreeGraph:
    def __init__(
        self,
        tree: AmericanBinomialTree,
        dimension_chart: tuple = (1200, 800),
        max_steps: int = 30,
    ):
        """Initialization of the TreeGraph class

        Args:
            tree (AmericanBinomialTree): the solved Tree for which we want to create the graph
            dimension_chart (tuple, optional): the dimension of the output figure. Default to (1200, 800).
            max_steps (int, optional): largest number of steps that can be displayed. Default to 30.
        """
        self.tree = tree
        self.dimension_chart = dimension_chart

        if self.tree.num_steps > max_steps:
            raise InvalidInput(
                f"Number of steps in the Tree too large to be displayed. Please choose a number of steps less than {max_steps + 1}."
            )

    def build_graph(self) -> nx.DiGraph:
        """Directed graph of the lattice, one graph node per lattice index."""
        G = nx.DiGraph()
        spots = self.tree.asset_prices
        values = self.tree.option_prices

        for level in range(self.tree.num_steps + 1):
            start = level_start(level)
            for j in range(level + 1):
                index = start + j
                G.add_node(
                    index,
                    level=level,
                    spot_price=float(spots[index]),
                    option_value=float(values[index]),
                )
                if level < self.tree.num_steps:
                    G.add_edge(index, index + level + 1, probability=self.tree.p_up)
                    G.add_edge(index, index + level + 2, probability=self.tree.p_down)

        return G

    def display_tree(self) -> go.Figure:
        """Function allowing us to create the graph by positioning the nodes according to the underlying price."""

        G = self.build_graph()
        positions = {
            node: (data["level"], data["spot_price"]) for node, data in G.nodes(data=True)
        }

        edge_x = []
        edge_y = []
        for edge in G.edges():
            x0, y0 = positions[edge[0]]
            x1, y1 = positions[edge[1]]
            edge_x += [x0, x1, None]
            edge_y += [y0, y1, None]

        edge_trace = go.Scatter(
            x=edge_x,
            y=edge_y,
            mode="lines",
            line=dict(width=1, color="#888"),
            hoverinfo="none",
        )

        node_x = [positions[node][0] for node in G.nodes()]
        node_y = [positions[node][1] for node in G.nodes()]
        node_labels = [
            f"Spot Price : {data['spot_price']:.4f}<br>Option Value : {data['option_value']:.4f}"
            for _, data in G.nodes(data=True)
        ]

        nodes_trace = go.Scatter(
            x=node_x,
            y=node_y,
            mode="markers",
            text=node_labels,
            hoverinfo="text",
            marker=dict(
                colorscale="YlGnBu",
                color=[data["option_value"] for _, data in G.nodes(data=True)],
                size=12,
                showscale=True,
            ),
        )

        option_type = "call" if self.tree.contract.is_call else "put"
        strike = self.tree.contract.strike_price
        graph_title = f"Binomial Tree, American {option_type} option, strike {strike}"

        fig = go.Figure(
            data=[edge_trace, nodes_trace],
            layout=go.Layout(
                title=graph_title,
                showlegend=False,
                hovermode="closest",
                margin=dict(b=20, l=5, r=5, t=40),
                xaxis=dict(showgrid=False, zeroline=False, title="Step"),
                yaxis=dict(showgrid=False, zeroline=False, title="Spot Price"),
            ),
        )

        fig.update_layout(width=self.dimension_chart[0], height=self.dimension_chart[1])

        return fig
