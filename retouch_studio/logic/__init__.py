"""
Engine Package for Retouch Studio

Contains data structures and business logic:
- Layer / LayerStack: Layers addressed by stable handles
- HistoryManager: Snapshot-based undo/redo
- Viewport: Zoom and pan mapping
- Editor: The facade a host application drives
- ProjectManager: PNG save and file export

"""

from .editor import Editor
from .history import HistoryManager
from .layer import Layer
from .layer_stack import LayerStack
from .project import ProjectManager, SavedImage
from .raster import RenderSurfaceError
from .segmentation import HeuristicSegmenter, SegmentationResult, Segmenter
from .viewport import Viewport

__all__ = [
    'Editor', 'HistoryManager', 'Layer', 'LayerStack', 'ProjectManager', 'SavedImage',
    'RenderSurfaceError', 'HeuristicSegmenter', 'SegmentationResult', 'Segmenter', 'Viewport',
]
