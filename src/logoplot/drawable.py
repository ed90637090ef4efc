## base class of drawable for logoplot
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved
## See licensing terms here: https://github.com/rdevaul/yapCAD/blob/master/LICENSE

import logging
import math
from typing import NamedTuple, Tuple

logger = logging.getLogger(__name__)

## tolerance used when testing segment end points against the canvas
epsilon = 0.0000001

DEFAULT_WIDTH = 500
DEFAULT_HEIGHT = 500
DEFAULT_PEN_COLOR = 7   # white


class OutOfBoundsError(ValueError):
    """A line segment leaves the drawing area."""


class BadColorError(ValueError):
    """A pen color index is not in the palette."""


class Segment(NamedTuple):
    """A recorded line segment, in canvas coordinates (y grows downward)."""
    start: Tuple[float, float]
    end: Tuple[float, float]
    color: int


def end_coordinates(x, y, heading, distance):
    """Return the point reached by travelling ``distance`` from (x, y)
    along ``heading``.

    Heading 0 points up the canvas and headings grow clockwise; the canvas
    y axis points down, so FORWARD at heading 0 decreases y.  Raises
    OutOfBoundsError when heading or distance is not a finite number.
    """
    if not (math.isfinite(heading) and math.isfinite(distance)):
        raise OutOfBoundsError(
            "cannot travel {:g} units at heading {:g}".format(distance, heading))
    rad = math.radians(heading - 90.0)
    return (x + distance * math.cos(rad), y + distance * math.sin(rad))


## Generic pen-plotter canvas.  Subclasses extend _draw_segment() to
## render each accepted segment to a specific output format.

class Drawable:
    """Base class for logoplot drawables"""

    ## fixed, ordered pen palette: name, [r, g, b], AutoCAD color
    ## index (None where there is no exact match)
    palette = [
        ('black',   [0, 0, 0],       0),
        ('blue',    [0, 0, 255],     5),
        ('cyan',    [0, 255, 255],   4),
        ('green',   [0, 255, 0],     3),
        ('red',     [255, 0, 0],     1),
        ('magenta', [255, 0, 255],   6),
        ('yellow',  [255, 255, 0],   2),
        ('white',   [255, 255, 255], 7),
        ('brown',   [165, 42, 42],   None),
        ('tan',     [210, 180, 140], None),
        ('forest',  [34, 139, 34],   None),
        ('aqua',    [127, 255, 212], None),
        ('salmon',  [250, 128, 114], None),
        ('purple',  [128, 0, 128],   None),
        ('orange',  [255, 165, 0],   30),
        ('grey',    [128, 128, 128], 8),
    ]

    def __init__(self, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT):
        for dim in (width, height):
            if isinstance(dim, bool) or not isinstance(dim, (int, float)) or dim <= 0:
                raise ValueError('bad canvas dimension: ' + str(dim))
        self.__width = width
        self.__height = height
        self.__segments = []

    ## Various property functions

    @property
    def width(self):
        return self.__width

    @property
    def height(self):
        return self.__height

    @property
    def segments(self):
        return list(self.__segments)

    def dimensions(self):
        return (self.__width, self.__height)

    def center(self):
        return (self.__width / 2.0, self.__height / 2.0)

    ## palette access -- indices are validated here, not by callers

    def color_index(self, c):
        if isinstance(c, bool) or not isinstance(c, int) \
           or c < 0 or c >= len(self.palette):
            raise BadColorError('colormap index out of range: {}'.format(c))
        return c

    def colorname(self, c):
        return self.palette[self.color_index(c)][0]

    def rgb(self, c):
        return list(self.palette[self.color_index(c)][1])

    def inbounds(self, p):
        return -epsilon <= p[0] <= self.__width + epsilon and \
            -epsilon <= p[1] <= self.__height + epsilon

    ## drawing

    def end_coordinates(self, x, y, heading, distance):
        return end_coordinates(x, y, heading, distance)

    def draw_line(self, x, y, heading, distance, color):
        """Draw a segment from (x, y) along ``heading`` for ``distance``
        units with palette color ``color``; return the end point.

        Raises BadColorError for an unknown color and OutOfBoundsError
        when either end of the segment lies off the canvas.  Nothing is
        drawn when an error is raised.
        """
        color = self.color_index(color)
        start = (x, y)
        end = self.end_coordinates(x, y, heading, distance)
        for p in (start, end):
            if not self.inbounds(p):
                raise OutOfBoundsError(
                    'line from ({:.2f}, {:.2f}) to ({:.2f}, {:.2f}) leaves the '
                    '{} x {} canvas'.format(start[0], start[1], end[0], end[1],
                                            self.__width, self.__height))
        self._draw_segment(start, end, color)
        return end

    def _draw_segment(self, start, end, color):
        logger.debug('segment %s -> %s color %d', start, end, color)
        self.__segments.append(Segment(start, end, color))

    ## cause drawing page to be rendered -- nothing to render in the base class
    def display(self):
        logger.info('%d segment(s) drawn', len(self.__segments))
        return True

    def __repr__(self):
        return 'a {} x {} Drawable instance'.format(self.__width, self.__height)
