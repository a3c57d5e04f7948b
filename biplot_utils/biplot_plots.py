"""
Biplot Plotting Functions

Builds the biplot chart from the tables in ``biplot_calculations``. Drawing is
done through a renderer object so other charting back ends can be injected;
``PlotlyBiplotRenderer`` is the default.
"""

import logging

import plotly.graph_objects as go
from typing import Any, Optional, Sequence

from .biplot_calculations import compute_biplot_data, validate_components
from .config import (
    DEFAULT_COMPONENTS,
    VARIABLES_COLUMN,
    ORIGIN_COLUMN,
    NAMES_COLUMN,
    VARIABLE_COLOR,
    ARROW_COLOR,
    CASE_COLOR,
    ARROW_HEAD,
    ARROW_SIZE,
    ARROW_WIDTH,
    AXIS_LABEL_TEMPLATE
)
from .exceptions import MissingRenderingCapability
from .pca_result import PCAResult

logger = logging.getLogger(__name__)

REQUIRED_RENDERER_OPERATIONS = (
    'create_chart',
    'add_text_layer',
    'add_arrow_layer',
    'set_axis_labels'
)


class PlotlyBiplotRenderer:
    """
    Draws biplot layers on a ``plotly.graph_objects.Figure``.

    Text layers are ``go.Scatter(mode='text')`` traces. Arrows are a single
    line trace (segments separated by None) plus one annotation per arrow
    carrying the arrowhead.
    """

    def create_chart(self) -> go.Figure:
        fig = go.Figure()
        fig.update_layout(hovermode='closest', template='plotly_white')
        return fig

    def add_text_layer(
        self,
        chart: go.Figure,
        x: Sequence[float],
        y: Sequence[float],
        labels: Sequence[str],
        color: str,
        name: str
    ) -> go.Figure:
        chart.add_trace(go.Scatter(
            x=list(x),
            y=list(y),
            mode='text',
            text=list(labels),
            textfont=dict(color=color),
            name=name,
            showlegend=False,
            hoverinfo='text'
        ))
        return chart

    def add_arrow_layer(
        self,
        chart: go.Figure,
        x0: Sequence[float],
        y0: Sequence[float],
        x1: Sequence[float],
        y1: Sequence[float],
        color: str,
        name: str
    ) -> go.Figure:
        line_x, line_y = [], []
        for tail_x, tail_y, tip_x, tip_y in zip(x0, y0, x1, y1):
            line_x.extend([tail_x, tip_x, None])
            line_y.extend([tail_y, tip_y, None])

        chart.add_trace(go.Scatter(
            x=line_x,
            y=line_y,
            mode='lines',
            line=dict(color=color, width=ARROW_WIDTH),
            name=name,
            showlegend=False,
            hoverinfo='skip'
        ))

        # Arrowheads
        for tail_x, tail_y, tip_x, tip_y in zip(x0, y0, x1, y1):
            chart.add_annotation(
                x=tip_x, y=tip_y,
                ax=tail_x, ay=tail_y,
                xref='x', yref='y',
                axref='x', ayref='y',
                text='',
                showarrow=True,
                arrowhead=ARROW_HEAD,
                arrowsize=ARROW_SIZE,
                arrowwidth=ARROW_WIDTH,
                arrowcolor=color
            )
        return chart

    def set_axis_labels(self, chart: go.Figure, x_label: str, y_label: str) -> go.Figure:
        chart.update_layout(xaxis_title=x_label, yaxis_title=y_label)
        return chart


def check_rendering_capability(renderer: Any) -> None:
    """
    Raise MissingRenderingCapability unless ``renderer`` can draw every layer.

    A usable renderer exposes callable ``create_chart``, ``add_text_layer``,
    ``add_arrow_layer`` and ``set_axis_labels`` operations.
    """
    missing = [
        operation for operation in REQUIRED_RENDERER_OPERATIONS
        if not callable(getattr(renderer, operation, None))
    ]
    if missing:
        raise MissingRenderingCapability(missing)


def biplot(
    pca_result: PCAResult,
    components: Sequence[int] = DEFAULT_COMPONENTS,
    include_variables: bool = True,
    include_cases: bool = True,
    renderer: Optional[Any] = None
) -> Any:
    """
    Create a biplot of two principal components.

    Variables are drawn as arrows from the origin to their loadings, labelled
    with their names. Cases are drawn as their names, placed at their scores
    rescaled so the largest case coordinate matches the largest loading.

    Parameters
    ----------
    pca_result : PCAResult
        PCA output to plot.
    components : sequence of int, optional
        Which two principal components to plot (1-based). Default is (1, 2).
    include_variables : bool, optional
        Draw the variable arrows and labels. Default is True.
    include_cases : bool, optional
        Draw the case labels. Default is True.
    renderer : object, optional
        Charting back end; defaults to ``PlotlyBiplotRenderer()``.

    Returns
    -------
    go.Figure
        The chart built by the renderer (a Plotly figure by default). It is
        not shown or saved.

    Raises
    ------
    InvalidArgument
        If ``pca_result`` or ``components`` is malformed.
    InvalidComponentSelection
        If a component index exceeds the components available.
    MissingRenderingCapability
        If ``renderer`` lacks one of the drawing operations.
    DegenerateScaleError
        If cases are requested and all their projections are zero.

    Examples
    --------
    >>> from sklearn.decomposition import PCA
    >>> pca = PCA().fit(X)
    >>> pca_result = PCAResult.from_sklearn(pca, X)
    >>> fig = biplot(pca_result)
    >>> fig = biplot(pca_result, include_cases=False)
    >>> fig = biplot(pca_result, components=(3, 4))
    """
    if renderer is None:
        renderer = PlotlyBiplotRenderer()

    # Validate first so input errors take precedence over renderer errors
    selected = validate_components(pca_result, components)
    check_rendering_capability(renderer)
    data = compute_biplot_data(pca_result, selected, include_cases=include_cases)

    loadings = data['loadings']
    cases = data['cases']
    x_col, y_col = loadings.columns[:2]
    var_x, var_y = data['variance_explained']

    chart = renderer.create_chart()
    chart = renderer.set_axis_labels(
        chart,
        AXIS_LABEL_TEMPLATE.format(component=x_col, percent=var_x),
        AXIS_LABEL_TEMPLATE.format(component=y_col, percent=var_y)
    )

    if include_variables:
        chart = renderer.add_text_layer(
            chart,
            loadings[x_col], loadings[y_col], loadings[VARIABLES_COLUMN],
            color=VARIABLE_COLOR, name='variables'
        )
        chart = renderer.add_arrow_layer(
            chart,
            loadings[ORIGIN_COLUMN], loadings[ORIGIN_COLUMN],
            loadings[x_col], loadings[y_col],
            color=ARROW_COLOR, name='loadings'
        )

    if cases is not None:
        chart = renderer.add_text_layer(
            chart,
            cases[x_col], cases[y_col], cases[NAMES_COLUMN],
            color=CASE_COLOR, name='cases'
        )

    logger.debug(
        "Built biplot of %s vs %s (variables=%s, cases=%s)",
        x_col, y_col, include_variables, cases is not None
    )
    return chart
