"""SVG page rendering flattened curves and their control points."""

from __future__ import annotations

import copy
import gzip
import io
from dataclasses import dataclass
from typing import Optional, Union

import svgwrite
import svgwrite.base
import svgwrite.container
import svgwrite.elementfactory
from svgwrite.extensions import Inkscape

from curvepath.common import SegmentType
from curvepath.control_path import ControlPath
from curvepath.exceptions import InvalidArgument
from curvepath.multipath import MultiPath, ShapeMultiPath


@dataclass
class CurveSvgPage:
    """A page (canvas) described by SVG to draw flattened curves on.

    The drawing coordinates run left-to-right and bottom-to-top, origin in the
    bottom left corner of the canvas.
    Contains groups/layers:
        - root       -- (group) just contains the y-flip and translation to bottom left
            - main   -- editable->locked=False  --  hidden->display="block"
            - debug  -- editable->locked=False  --  hidden->display="none"
    """

    _inkscape: Inkscape  # extension to support layers

    drawing: svgwrite.Drawing
    root_group: svgwrite.container.Group
    main_layer: svgwrite.container.Group
    debug_layer: svgwrite.container.Group

    def __init__(self, canvas_width_mm: float, canvas_height_mm: float, scale: float = 1.0):
        """
        Initialize the SVG page.

        Args:
            canvas_width_mm (float): The width of the canvas in millimeters.
            canvas_height_mm (float): The height of the canvas in millimeters.
            scale (float, optional): Drawing units per millimeter. Defaults to 1.0.
        """
        vb_width: float = scale * canvas_width_mm
        vb_height: float = scale * canvas_height_mm

        # profile="full" to support numbers with more than 4 decimal digits
        self.drawing = svgwrite.Drawing(
            size=(f"{canvas_width_mm}mm", f"{canvas_height_mm}mm"),
            viewBox=f"0 0 {vb_width} {vb_height}",
            profile="full",
        )

        # flip y-axis and move the origin to bottom-left
        self.root_group = self.drawing.g(id="root", transform=f"scale(1,-1) translate(0,{-vb_height})")

        self._inkscape = Inkscape(self.drawing)
        self.main_layer = self._inkscape.layer(label="main", locked=False)
        self.debug_layer = self._inkscape.layer(label="debug", locked=False, display="none")

    def add(
        self,
        element: Union[svgwrite.base.BaseElement, svgwrite.elementfactory.ElementBuilder],
        add_to_debug_layer: bool = False,
    ) -> Union[svgwrite.base.BaseElement, svgwrite.elementfactory.ElementBuilder]:
        """Add a SVG element as subelement either to main or debug layer."""
        if add_to_debug_layer:
            return self.debug_layer.add(element)
        return self.main_layer.add(element)

    @staticmethod
    def path_data(multipath: MultiPath) -> str:
        """SVG path data ("M x y L x y ...") of a MultiPath.

        For a ShapeMultiPath the basis vectors select the drawn coordinates,
        otherwise the first two coordinates are used.
        """
        if multipath.dimension < 2:
            raise InvalidArgument(f"MultiPath needs at least 2 dimensions to be drawn, got {multipath.dimension}")
        ai0, ai1 = (0, 1)
        if isinstance(multipath, ShapeMultiPath):
            ai0, ai1 = multipath.basis_vectors

        points = multipath.points
        types = multipath.types
        commands = []
        for point, seg_type in zip(points, types):
            command = "M" if seg_type == SegmentType.MOVE_TO else "L"
            commands.append(f"{command} {point[ai0]:g} {point[ai1]:g}")
        return " ".join(commands)

    def add_multipath(
        self,
        multipath: MultiPath,
        stroke: str = "black",
        stroke_width: float = 0.1,
        add_to_debug_layer: bool = False,
    ) -> Optional[svgwrite.base.BaseElement]:
        """Draw a MultiPath as unfilled SVG path. Returns None for an empty buffer."""
        if multipath.num_points == 0:
            return None
        element = self.drawing.path(
            d=self.path_data(multipath),
            stroke=stroke,
            stroke_width=stroke_width,
            fill="none",
        )
        return self.add(element, add_to_debug_layer)

    def add_control_points(
        self,
        control_path: ControlPath,
        radius: float = 0.5,
        fill: str = "red",
        add_to_debug_layer: bool = True,
    ) -> svgwrite.container.Group:
        """Mark every control point with a circle, on the debug layer by default."""
        group = self.drawing.g(fill=fill, stroke="none")
        for point in control_path.points:
            location = point.location
            group.add(self.drawing.circle(center=(float(location[0]), float(location[1])), r=radius))
        return self.add(group, add_to_debug_layer)

    def save_as(
        self,
        filename: str,
        include_debug_layer: bool = False,
        pretty: bool = False,
        indent: int = 2,
        compressed: bool = False,
    ):
        """Save as SVG file

        Args:
            filename (str): path and filename
            include_debug_layer (bool, optional): True if file should contain debug_layer. Defaults to False.
            pretty (bool, optional): True for easy readable output. Defaults to False.
            indent (int, optional): Indention if pretty is enabled. Defaults to 2 spaces.
            compressed (bool, optional): Save as compressed svgz-file. Defaults to False.
        """
        drawing_for_save = self.assemble_tree(
            copy.deepcopy(self.drawing),
            copy.deepcopy(self.root_group),
            copy.deepcopy(self.main_layer),
            copy.deepcopy(self.debug_layer),
            include_debug_layer,
        )

        svg_buffer = io.StringIO()
        drawing_for_save.write(svg_buffer, pretty=pretty, indent=indent)
        output_data = svg_buffer.getvalue().encode("utf-8")
        if compressed:
            output_data = gzip.compress(output_data)

        with open(filename, "wb") as svg_file:
            svg_file.write(output_data)

    @classmethod
    def assemble_tree(
        cls,
        drawing: svgwrite.Drawing,
        root_group: svgwrite.container.Group,
        main_layer: svgwrite.container.Group,
        debug_layer: Optional[svgwrite.container.Group] = None,
        include_debug_layer: bool = False,
    ) -> svgwrite.Drawing:
        """Put root group and layers into the drawing. The debug layer is drawn below main."""
        drawing.add(root_group)
        if include_debug_layer and debug_layer:
            root_group.add(debug_layer)
        root_group.add(main_layer)
        return drawing
