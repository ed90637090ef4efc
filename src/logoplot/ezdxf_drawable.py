## simple logoplot framework for dxf-rendered drawings using the
## ezdxf package.
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import logging

import ezdxf
from ezdxf import colors

import logoplot.drawable as drawable

logger = logging.getLogger(__name__)

## class to provide dxf drawing functionality
class ezdxfDraw(drawable.Drawable):

    def __init__(self, width=drawable.DEFAULT_WIDTH, height=drawable.DEFAULT_HEIGHT):
        super().__init__(width, height)

        # setup=False avoids creating default blocks (like _CLOSEDFILLED) that
        # contain SOLID entities unsupported by some CAD programs (e.g., FreeCAD)
        self.__doc = ezdxf.new(dxfversion='R2010', setup=False)
        self.__doc.header['$MEASUREMENT'] = 1 # metric
        self.__doc.header['$INSUNITS'] = 4 # millimeters
        self.__doc.header['$EXTMIN'] = (0, 0, 0)
        self.__doc.header['$EXTMAX'] = (width, height, 0)
        self.__doc.layers.new('PATHS',  dxfattribs={'color': 7}) #white
        self.__msp = self.__doc.modelspace()
        self.__filename = "logoplot-out"
        self.__layer = 'PATHS'

    def __repr__(self):
        return 'an instance of ezdxfDraw'

    ## properties

    @property
    def doc(self):
        return self.__doc

    @property
    def layer(self):
        return self.__layer

    @layer.setter
    def layer(self, layer):
        if not self.__doc.layers.has_entry(layer):
            raise ValueError('bad layer passed to layer setter: {}'.format(layer))
        self.__layer = layer

    @property
    def filename(self):
        return self.__filename

    def _set_filename(self,name):
        self.__filename = name

    @filename.setter
    def filename(self,name):
        if not isinstance(name,str):
            raise ValueError('bad (non-string) filename: '+str(name))
        self._set_filename(name)

    def saveas(self, name):
        self.filename = name

    ## Overload the base class segment hook.  Canvas y grows downward;
    ## DXF y grows upward, so flip about the canvas height.

    def _draw_segment(self, start, end, color):
        super()._draw_segment(start, end, color)
        h = self.height
        dxfattribs = {'layer': self.__layer,
                      'true_color': colors.rgb2int(self.rgb(color))}
        aci = self.palette[color][2]
        if aci is not None:
            dxfattribs['color'] = aci
        self.__msp.add_line((start[0], h - start[1]), (end[0], h - end[1]),
                            dxfattribs=dxfattribs)

    def display(self):
        name = self.filename
        if not name.lower().endswith('.dxf'):
            name = "{}.dxf".format(name)
        logger.info('writing %d segment(s) to %s', len(self.segments), name)
        self.__doc.saveas(name)
        return name
