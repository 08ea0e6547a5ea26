"""
Data Models for the ETABS automation bridge

Enumerations mirror the integer codes of the ETABSv1 API so that values can be
passed straight through the COM boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .constants import MINIMUM_SUPPORTED_VERSION


class HandleState(Enum):
    """Lifecycle state of a model handle"""
    UNATTACHED = "unattached"
    ATTACHED = "attached"
    DISPOSED = "disposed"


class ForceUnit(Enum):
    """eForce"""
    LB = 1
    KIP = 2
    N = 3
    KN = 4
    KGF = 5
    TONF = 6


class LengthUnit(Enum):
    """eLength"""
    INCH = 1
    FT = 2
    MICRON = 3
    MM = 4
    CM = 5
    M = 6


class TemperatureUnit(Enum):
    """eTemperature"""
    F = 1
    C = 2


class ItemType(Enum):
    """eItemType - how a name argument is interpreted by object calls"""
    OBJECTS = 0
    GROUP = 1
    SELECTED_OBJECTS = 2


class ItemTypeElm(Enum):
    """eItemTypeElm - how a name argument is interpreted by results calls"""
    OBJECT_ELM = 0
    ELEMENT = 1
    GROUP_ELM = 2
    SELECTION_ELM = 3


class ObjectType(Enum):
    """Object type codes returned by selection and group queries"""
    POINT = 1
    FRAME = 2
    CABLE = 3
    TENDON = 4
    AREA = 5
    SOLID = 6
    LINK = 7


class MaterialType(Enum):
    """eMatType"""
    STEEL = 1
    CONCRETE = 2
    NO_DESIGN = 3
    ALUMINUM = 4
    COLD_FORMED = 5
    REBAR = 6
    TENDON = 7
    MASONRY = 8


class LoadPatternType(Enum):
    """eLoadPatternType"""
    DEAD = 1
    SUPER_DEAD = 2
    LIVE = 3
    REDUCE_LIVE = 4
    QUAKE = 5
    WIND = 6
    SNOW = 7
    OTHER = 8
    MOVE = 9
    TEMPERATURE = 10
    ROOF_LIVE = 11
    NOTIONAL = 12
    PATTERN_LIVE = 13
    WAVE = 14
    BRAKING = 15
    CENTRIFUGAL = 16
    FRICTION = 17
    ICE = 18
    WIND_ON_LIVE_LOAD = 19
    HORIZONTAL_EARTH_PRESSURE = 20
    VERTICAL_EARTH_PRESSURE = 21
    EARTH_SURCHARGE = 22
    DOWN_DRAG = 23
    VEHICLE_COLLISION = 24
    VESSEL_COLLISION = 25
    TEMPERATURE_GRADIENT = 26
    SETTLEMENT = 27
    SHRINKAGE = 28
    CREEP = 29
    WATERLOAD_PRESSURE = 30
    LIVE_LOAD_SURCHARGE = 31
    LOCKED_IN_FORCES = 32
    PEDESTRIAN_LL = 33
    PRESTRESS = 34
    HYPERSTATIC = 35
    BOUYANCY = 36
    STREAM_FLOW = 37
    IMPACT = 38
    CONSTRUCTION = 39


class LoadCaseType(Enum):
    """eLoadCaseType"""
    LINEAR_STATIC = 1
    NONLINEAR_STATIC = 2
    MODAL = 3
    RESPONSE_SPECTRUM = 4
    LINEAR_HISTORY = 5
    NONLINEAR_HISTORY = 6
    LINEAR_DYNAMIC = 7
    NONLINEAR_DYNAMIC = 8
    MOVING_LOAD = 9
    BUCKLING = 10
    STEADY_STATE = 11
    POWER_SPECTRAL_DENSITY = 12
    LINEAR_STATIC_MULTI_STEP = 13
    HYPERSTATIC = 14


class ComboType(Enum):
    """Response combination type"""
    LINEAR_ADDITIVE = 0
    ENVELOPE = 1
    ABSOLUTE_ADDITIVE = 2
    SRSS = 3
    RANGE_ADDITIVE = 4


class ComboEntryType(Enum):
    """eCNameType - whether a combination entry is a case or a nested combo"""
    LOAD_CASE = 0
    LOAD_COMBO = 1


class SlabType(Enum):
    """eSlabType"""
    SLAB = 0
    DROP = 1
    STIFF = 2
    RIBBED = 3
    WAFFLE = 4
    MAT = 5
    FOOTING = 6


class ShellType(Enum):
    """eShellType"""
    SHELL_THIN = 1
    SHELL_THICK = 2
    MEMBRANE = 3
    LAYERED = 6


class CaseStatus(Enum):
    """Analysis case run status"""
    NOT_RUN = 1
    COULD_NOT_START = 2
    NOT_FINISHED = 3
    FINISHED = 4

    @property
    def description(self) -> str:
        return self.name.replace("_", " ").title()


# eUnits preset codes accepted by InitializeNewModel / returned by GetDatabaseUnits
_PRESET_CODES: Dict[Tuple[ForceUnit, LengthUnit, TemperatureUnit], int] = {
    (ForceUnit.LB, LengthUnit.INCH, TemperatureUnit.F): 1,
    (ForceUnit.LB, LengthUnit.FT, TemperatureUnit.F): 2,
    (ForceUnit.KIP, LengthUnit.INCH, TemperatureUnit.F): 3,
    (ForceUnit.KIP, LengthUnit.FT, TemperatureUnit.F): 4,
    (ForceUnit.KN, LengthUnit.MM, TemperatureUnit.C): 5,
    (ForceUnit.KN, LengthUnit.M, TemperatureUnit.C): 6,
    (ForceUnit.KGF, LengthUnit.MM, TemperatureUnit.C): 7,
    (ForceUnit.KGF, LengthUnit.M, TemperatureUnit.C): 8,
    (ForceUnit.N, LengthUnit.MM, TemperatureUnit.C): 9,
    (ForceUnit.N, LengthUnit.M, TemperatureUnit.C): 10,
    (ForceUnit.TONF, LengthUnit.MM, TemperatureUnit.C): 11,
    (ForceUnit.TONF, LengthUnit.M, TemperatureUnit.C): 12,
    (ForceUnit.KN, LengthUnit.CM, TemperatureUnit.C): 13,
    (ForceUnit.KGF, LengthUnit.CM, TemperatureUnit.C): 14,
    (ForceUnit.N, LengthUnit.CM, TemperatureUnit.C): 15,
    (ForceUnit.TONF, LengthUnit.CM, TemperatureUnit.C): 16,
}
_PRESETS_BY_CODE = {code: units for units, code in _PRESET_CODES.items()}


@dataclass(frozen=True)
class UnitConfiguration:
    """Present unit triple of a model session.

    Defaults to kN, m, C, the value reported before the first successful
    native get/set.

    Attributes:
        force: Force unit
        length: Length unit
        temperature: Temperature unit
    """
    force: ForceUnit = ForceUnit.KN
    length: LengthUnit = LengthUnit.M
    temperature: TemperatureUnit = TemperatureUnit.C

    @property
    def is_metric(self) -> bool:
        """True for the kN, m, C default system"""
        return (self.force, self.length, self.temperature) == (
            ForceUnit.KN, LengthUnit.M, TemperatureUnit.C)

    @property
    def is_us(self) -> bool:
        """True for the kip, ft, F system"""
        return (self.force, self.length, self.temperature) == (
            ForceUnit.KIP, LengthUnit.FT, TemperatureUnit.F)

    @property
    def preset_code(self) -> Optional[int]:
        """eUnits code for this triple, or None when no preset matches"""
        return _PRESET_CODES.get((self.force, self.length, self.temperature))

    @classmethod
    def from_codes(cls, force: int, length: int, temperature: int) -> "UnitConfiguration":
        """Build from raw eForce / eLength / eTemperature integers"""
        return cls(ForceUnit(int(force)), LengthUnit(int(length)), TemperatureUnit(int(temperature)))

    @classmethod
    def from_preset_code(cls, code: int) -> "UnitConfiguration":
        """Build from an eUnits code"""
        try:
            force, length, temperature = _PRESETS_BY_CODE[int(code)]
        except KeyError:
            raise ValueError(f"Unknown unit preset code: {code}")
        return cls(force, length, temperature)

    @classmethod
    def from_preset_name(cls, name: str) -> "UnitConfiguration":
        """Build from a name such as 'kN_m_C' or 'kip_ft_F' (case-insensitive)"""
        parts = name.strip().lower().split("_")
        if len(parts) != 3:
            raise ValueError(f"Invalid unit preset name: {name!r}")
        force_name, length_name, temperature_name = parts
        force_name = "tonf" if force_name == "ton" else force_name
        length_name = "inch" if length_name == "in" else length_name
        try:
            return cls(
                ForceUnit[force_name.upper()],
                LengthUnit[length_name.upper()],
                TemperatureUnit[temperature_name.upper()],
            )
        except KeyError:
            raise ValueError(f"Invalid unit preset name: {name!r}")

    def __str__(self) -> str:
        return f"{self.force.name}, {self.length.name}, {self.temperature.name}"


US_KIP_IN = UnitConfiguration(ForceUnit.KIP, LengthUnit.INCH, TemperatureUnit.F)
US_KIP_FT = UnitConfiguration(ForceUnit.KIP, LengthUnit.FT, TemperatureUnit.F)
METRIC_KN_M = UnitConfiguration(ForceUnit.KN, LengthUnit.M, TemperatureUnit.C)
METRIC_KN_MM = UnitConfiguration(ForceUnit.KN, LengthUnit.MM, TemperatureUnit.C)
METRIC_N_MM = UnitConfiguration(ForceUnit.N, LengthUnit.MM, TemperatureUnit.C)
METRIC_N_M = UnitConfiguration(ForceUnit.N, LengthUnit.M, TemperatureUnit.C)


@dataclass(frozen=True)
class SessionDescriptor:
    """A running ETABS process found by discovery.

    Attributes:
        process_id: OS process id
        process_name: Executable stem (normally 'ETABS')
        executable_path: Full path of the executable, if readable
        major_version: File major version (0 when unknown)
        minor_version: File minor version
        build_version: File build number
        has_main_window: Whether the process owns a visible top-level window
        window_title: Title of that window
        min_supported_version: Version floor used to compute is_supported
    """
    process_id: int
    process_name: str = "ETABS"
    executable_path: Optional[str] = None
    major_version: int = 0
    minor_version: int = 0
    build_version: int = 0
    has_main_window: bool = False
    window_title: str = ""
    min_supported_version: int = MINIMUM_SUPPORTED_VERSION

    @property
    def full_version(self) -> str:
        return f"{self.major_version}.{self.minor_version}.{self.build_version}"

    @property
    def is_supported(self) -> bool:
        return self.major_version >= self.min_supported_version

    def __str__(self) -> str:
        supported = "Supported" if self.is_supported else "Not Supported"
        return (f"ETABS v{self.full_version} (PID: {self.process_id}) - "
                f"{self.window_title} [{supported}]")


@dataclass(frozen=True)
class ManagerCallContext:
    """Diagnostic context attached to every native call and raised error.

    Attributes:
        operation: Native operation or logical operation name
        targets: Identifiers the call was issued for
        item_type: Name of the item-type / filter kind, when relevant
    """
    operation: str
    targets: Tuple[str, ...] = ()
    item_type: Optional[str] = None

    def describe(self) -> str:
        text = self.operation
        if self.targets:
            shown = ", ".join(f"'{t}'" for t in self.targets[:5])
            if len(self.targets) > 5:
                shown += f" (+{len(self.targets) - 5} more)"
            text += f" on {shown}"
        if self.item_type:
            text += f" (item type: {self.item_type})"
        return text

    def for_target(self, target: str) -> "ManagerCallContext":
        """Same operation narrowed to a single identifier"""
        return ManagerCallContext(self.operation, (target,), self.item_type)
