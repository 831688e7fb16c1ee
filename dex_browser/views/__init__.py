from .ridgeline_view import RidgelineView
from .stacked_bar_view import StackedBarView
from .parallel_coordinates_view import ParallelCoordinatesView
