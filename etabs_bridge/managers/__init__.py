# Per-category call-sites exposed by ModelHandle
from .analysis import AnalysisManager, CaseStatusRecord, RunCaseFlag
from .areas import AreaManager, AreaPoints
from .base import BaseManager
from .design import (
    ConcreteBeamSummary,
    ConcreteColumnSummary,
    ConcreteDesignManager,
    SteelDesignManager,
    SteelDesignSummary,
    VerifyPassedResult,
)
from .frames import FrameManager, FramePoints, FrameReleases, FrameSection
from .groups import GroupManager, ObjectAssignment, SelectionManager
from .loads import ComboEntry, ComboManager, LoadCaseManager, LoadPatternManager
from .model_info import FileManager, ModelInfoManager, ProgramInfo, VersionInfo
from .points import PointCoordinates, PointManager, PointRestraint
from .properties import (
    AreaSectionManager,
    CircleSection,
    FrameSectionManager,
    IsotropicProperties,
    MaterialInfo,
    MaterialManager,
    RectangleSection,
    SlabProperty,
)
from .results import (
    BaseReaction,
    BaseReactions,
    FrameForce,
    JointDisplacement,
    JointReaction,
    ModalMassRatio,
    ModalPeriod,
    ResultsManager,
    StoryDrift,
)
from .stories import StoryDefinition, StoryLayout, StoryManager
from .tables import DatabaseTableManager, TableEditResult, TableInfo
