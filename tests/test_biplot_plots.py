from unittest.mock import MagicMock

import numpy as np
import plotly.graph_objects as go
import pytest

from biplot_utils import (
    PCAResult,
    PlotlyBiplotRenderer,
    InvalidArgument,
    InvalidComponentSelection,
    MissingRenderingCapability,
    DegenerateScaleError,
    check_rendering_capability,
    biplot
)
from tests.conftest import ROTATION, SCORES, SDEV


class TestBiplot:
    """Tests for the biplot entry point with the default Plotly renderer"""

    def test_returns_figure_with_all_layers(self, small_pca):
        fig = biplot(small_pca)

        assert isinstance(fig, go.Figure)
        assert [trace.name for trace in fig.data] == ['variables', 'loadings', 'cases']
        # One arrowhead per variable
        assert len(fig.layout.annotations) == 3

    def test_axis_labels_show_variance_explained(self, small_pca):
        fig = biplot(small_pca)

        assert fig.layout.xaxis.title.text == 'PC1 (55.56% explained var.)'
        assert fig.layout.yaxis.title.text == 'PC2 (33.33% explained var.)'

    def test_variable_layer_positions(self, small_pca):
        fig = biplot(small_pca, components=(2, 3))
        variables = fig.data[0]

        np.testing.assert_allclose(variables.x, ROTATION[:, 1])
        np.testing.assert_allclose(variables.y, ROTATION[:, 2])
        assert list(variables.text) == ['mpg', 'hp', 'wt']
        assert variables.mode == 'text'

    def test_arrows_start_at_origin(self, small_pca):
        fig = biplot(small_pca)
        arrows = fig.data[1]

        # Each segment is tail, tip, gap
        assert list(arrows.x[0::3]) == [0, 0, 0]
        assert list(arrows.y[0::3]) == [0, 0, 0]
        np.testing.assert_allclose(arrows.x[1::3], ROTATION[:, 0])
        assert all(gap is None for gap in arrows.x[2::3])

        tips = [(a.x, a.y) for a in fig.layout.annotations]
        np.testing.assert_allclose(tips, ROTATION[:, :2])
        assert all(a.ax == 0 and a.ay == 0 for a in fig.layout.annotations)

    def test_case_layer_is_scaled(self, small_pca):
        fig = biplot(small_pca)
        cases = fig.data[2]
        factor = 0.8 / 3.5

        np.testing.assert_allclose(cases.x, SCORES[:, 0] * factor)
        np.testing.assert_allclose(cases.y, SCORES[:, 1] * factor)
        assert list(cases.text) == ['Mazda', 'Datsun', 'Hornet', 'Valiant', 'Duster']

    def test_without_cases(self, small_pca):
        fig = biplot(small_pca, include_cases=False)

        assert [trace.name for trace in fig.data] == ['variables', 'loadings']

    def test_without_variables(self, small_pca):
        fig = biplot(small_pca, include_variables=False)

        assert [trace.name for trace in fig.data] == ['cases']
        assert len(fig.layout.annotations) == 0

    def test_only_axis_labels(self, small_pca):
        fig = biplot(small_pca, include_variables=False, include_cases=False)

        assert len(fig.data) == 0
        assert len(fig.layout.annotations) == 0
        assert fig.layout.xaxis.title.text.startswith('PC1')
        assert fig.layout.yaxis.title.text.startswith('PC2')

    def test_is_deterministic(self, sklearn_pca):
        first = biplot(sklearn_pca, components=(1, 3))
        second = biplot(sklearn_pca, components=(1, 3))

        assert first.to_dict() == second.to_dict()

    def test_sklearn_result(self, sklearn_pca):
        fig = biplot(sklearn_pca, components=(3, 4))

        assert fig.layout.xaxis.title.text.startswith('PC3 (')
        assert list(fig.data[0].text) == ['Temp', 'Pressure', 'Flow', 'Level']
        assert len(fig.data[2].x) == 20

    def test_custom_component_names(self, rotation_df, scores_df):
        rotation_df.columns = scores_df.columns = ['Dim.1', 'Dim.2', 'Dim.3']
        fig = biplot(PCAResult(rotation_df, scores_df, SDEV))

        assert fig.layout.xaxis.title.text == 'Dim.1 (55.56% explained var.)'

    def test_invalid_inputs(self, small_pca):
        with pytest.raises(InvalidComponentSelection):
            biplot(small_pca, components=(1, 4))
        with pytest.raises(InvalidArgument):
            biplot(small_pca, components=(1,))
        with pytest.raises(InvalidArgument):
            biplot({'rotation': ROTATION})

    def test_degenerate_cases(self):
        result = PCAResult(ROTATION, np.zeros((5, 3)), SDEV)

        with pytest.raises(DegenerateScaleError):
            biplot(result)
        assert len(biplot(result, include_cases=False).data) == 2


class TestRenderer:
    """Tests for renderer injection and the capability check"""

    @pytest.fixture
    def mock_renderer(self):
        """Renderer that records the layers it is asked to draw"""
        renderer = MagicMock(spec=PlotlyBiplotRenderer)
        chart = MagicMock(name='chart')
        renderer.create_chart.return_value = chart
        renderer.set_axis_labels.return_value = chart
        renderer.add_text_layer.return_value = chart
        renderer.add_arrow_layer.return_value = chart
        return renderer

    def test_injected_renderer_builds_chart(self, small_pca, mock_renderer):
        chart = biplot(small_pca, renderer=mock_renderer)

        assert chart is mock_renderer.create_chart.return_value
        mock_renderer.set_axis_labels.assert_called_once_with(
            chart, 'PC1 (55.56% explained var.)', 'PC2 (33.33% explained var.)'
        )
        assert mock_renderer.add_text_layer.call_count == 2
        assert mock_renderer.add_arrow_layer.call_count == 1

        layer_names = [c.kwargs['name'] for c in mock_renderer.add_text_layer.call_args_list]
        assert layer_names == ['variables', 'cases']

    def test_injected_renderer_layer_colors(self, small_pca, mock_renderer):
        biplot(small_pca, renderer=mock_renderer)

        colors = [c.kwargs['color'] for c in mock_renderer.add_text_layer.call_args_list]
        assert colors == ['red', 'blue']
        assert mock_renderer.add_arrow_layer.call_args.kwargs['color'] == 'red'

    def test_only_axis_labels_with_injected_renderer(self, small_pca, mock_renderer):
        biplot(small_pca, include_variables=False, include_cases=False, renderer=mock_renderer)

        mock_renderer.set_axis_labels.assert_called_once()
        mock_renderer.add_text_layer.assert_not_called()
        mock_renderer.add_arrow_layer.assert_not_called()

    def test_missing_operation(self, small_pca):
        renderer = MagicMock(spec=['create_chart', 'add_text_layer', 'set_axis_labels'])

        with pytest.raises(MissingRenderingCapability) as exc_info:
            biplot(small_pca, renderer=renderer)

        assert exc_info.value.missing == ['add_arrow_layer']
        renderer.create_chart.assert_not_called()

    def test_non_callable_operation(self):
        renderer = MagicMock(spec=PlotlyBiplotRenderer)
        renderer.set_axis_labels = 'not a method'

        with pytest.raises(MissingRenderingCapability, match="set_axis_labels"):
            check_rendering_capability(renderer)

    def test_no_renderer(self):
        with pytest.raises(MissingRenderingCapability) as exc_info:
            check_rendering_capability(None)

        assert len(exc_info.value.missing) == 4

    def test_default_renderer_is_capable(self):
        check_rendering_capability(PlotlyBiplotRenderer())

    def test_validation_precedes_capability_check(self):
        with pytest.raises(InvalidArgument):
            biplot(None, renderer=object())
