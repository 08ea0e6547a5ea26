"""
Material, frame section and area section properties.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..core.data_models import MaterialType, ShellType, SlabType
from ..core.errors import UnexpectedError, ValidationError, require_name, require_positive, require_range
from ..core.mapper import ColumnDecoder
from .base import BaseManager


@dataclass(frozen=True)
class MaterialInfo:
    """Basic material data (GetMaterial)"""
    name: str
    material_type: MaterialType
    color: int = -1
    notes: str = ""
    guid: str = ""


@dataclass(frozen=True)
class IsotropicProperties:
    """Isotropic mechanical properties in present units.

    Attributes:
        e: Modulus of elasticity
        u: Poisson's ratio
        a: Coefficient of thermal expansion
        g: Shear modulus (derived by ETABS; ignored on set)
    """
    e: float
    u: float
    a: float
    g: float = 0.0


@dataclass(frozen=True)
class RectangleSection:
    """Rectangular frame section; depth is t3, width is t2"""
    name: str
    material: str
    depth: float
    width: float
    color: int = -1
    notes: str = ""


@dataclass(frozen=True)
class CircleSection:
    """Solid circular frame section"""
    name: str
    material: str
    diameter: float
    color: int = -1
    notes: str = ""


@dataclass(frozen=True)
class SlabProperty:
    """Slab area property"""
    name: str
    slab_type: SlabType
    shell_type: ShellType
    material: str
    thickness: float
    color: int = -1
    notes: str = ""


def _enum_output(enum_type, value, context):
    try:
        return enum_type(int(value))
    except (TypeError, ValueError) as e:
        raise UnexpectedError(f"Unknown {enum_type.__name__} code {value!r}", context=context) from e


class MaterialManager(BaseManager):
    """Material properties (PropMaterial). Material kinds are the closed MaterialType enum."""

    def names(self, material_type: Optional[MaterialType] = None) -> List[str]:
        """Material names, optionally restricted to one material type."""
        context = self._context("PropMaterial.GetNameList", item_type=material_type)
        if material_type is not None and not isinstance(material_type, MaterialType):
            raise ValidationError("material_type", material_type, "must be a MaterialType", context)
        code = material_type.value if material_type else 0
        return self._records(
            context, "PropMaterial.GetNameList", (0, [], code),
            ("count", "names"), ColumnDecoder("names", str))

    def add_material(
        self,
        material_type: MaterialType,
        region: str,
        standard: str,
        grade: str,
        user_name: str = "",
    ) -> str:
        """Add a material from the ETABS library; returns the assigned name.

        Example: add_material(MaterialType.STEEL, "United States", "ASTM A992", "Grade 50")
        """
        context = self._context("PropMaterial.AddMaterial", user_name or grade, material_type)
        if not isinstance(material_type, MaterialType):
            raise ValidationError("material_type", material_type, "must be a MaterialType", context)
        require_name(region, "region", context)
        require_name(standard, "standard", context)
        require_name(grade, "grade", context)
        outputs = self._execute(
            context, "PropMaterial.AddMaterial", "", material_type.value, region, standard, grade, user_name)
        return str(outputs[0]) if outputs else user_name

    def get_material(self, name: str) -> MaterialInfo:
        context = self._context("PropMaterial.GetMaterial", name)
        require_name(name, context=context)
        material_type, color, notes, guid = self._outputs(
            context, "PropMaterial.GetMaterial", 4, name, 0, 0, "", "")
        return MaterialInfo(
            name, _enum_output(MaterialType, material_type, context), int(color), str(notes), str(guid))

    def isotropic(self, name: str, temperature: float = 0.0) -> IsotropicProperties:
        context = self._context("PropMaterial.GetMPIsotropic", name)
        require_name(name, context=context)
        e, u, a, g = self._outputs(
            context, "PropMaterial.GetMPIsotropic", 4, name, 0.0, 0.0, 0.0, 0.0, temperature)
        return IsotropicProperties(float(e), float(u), float(a), float(g))

    def set_isotropic(self, name: str, props: IsotropicProperties, temperature: float = 0.0) -> None:
        context = self._context("PropMaterial.SetMPIsotropic", name)
        require_name(name, context=context)
        require_positive(props.e, "e", context)
        # Poisson's ratio of an isotropic solid is bounded by -1 and 0.5
        require_range(props.u, "u", -1.0, 0.5, context)
        require_range(props.a, "a", context=context)
        self._execute(context, "PropMaterial.SetMPIsotropic", name, props.e, props.u, props.a, temperature)


class FrameSectionManager(BaseManager):
    """Frame section properties (PropFrame)."""

    def names(self) -> List[str]:
        return self._names(self._context("PropFrame.GetNameList"), "PropFrame.GetNameList")

    def set_rectangle(self, section: RectangleSection) -> None:
        context = self._context("PropFrame.SetRectangle", section.name)
        require_name(section.name, context=context)
        require_name(section.material, "material", context)
        require_positive(section.depth, "depth", context)
        require_positive(section.width, "width", context)
        self._execute(
            context, "PropFrame.SetRectangle", section.name, section.material,
            section.depth, section.width, section.color, section.notes, "")

    def rectangle(self, name: str) -> RectangleSection:
        context = self._context("PropFrame.GetRectangle", name)
        require_name(name, context=context)
        _, material, depth, width, color, notes, _ = self._outputs(
            context, "PropFrame.GetRectangle", 7, name, "", "", 0.0, 0.0, 0, "", "")
        return RectangleSection(name, str(material), float(depth), float(width), int(color), str(notes))

    def set_circle(self, section: CircleSection) -> None:
        context = self._context("PropFrame.SetCircle", section.name)
        require_name(section.name, context=context)
        require_name(section.material, "material", context)
        require_positive(section.diameter, "diameter", context)
        self._execute(
            context, "PropFrame.SetCircle", section.name, section.material,
            section.diameter, section.color, section.notes, "")

    def circle(self, name: str) -> CircleSection:
        context = self._context("PropFrame.GetCircle", name)
        require_name(name, context=context)
        _, material, diameter, color, notes, _ = self._outputs(
            context, "PropFrame.GetCircle", 6, name, "", "", 0.0, 0, "", "")
        return CircleSection(name, str(material), float(diameter), int(color), str(notes))


class AreaSectionManager(BaseManager):
    """Area section properties (PropArea)."""

    def names(self) -> List[str]:
        return self._names(self._context("PropArea.GetNameList"), "PropArea.GetNameList")

    def set_slab(self, slab: SlabProperty) -> None:
        context = self._context("PropArea.SetSlab", slab.name)
        require_name(slab.name, context=context)
        require_name(slab.material, "material", context)
        require_positive(slab.thickness, "thickness", context)
        self._execute(
            context, "PropArea.SetSlab", slab.name, slab.slab_type.value, slab.shell_type.value,
            slab.material, slab.thickness, slab.color, slab.notes, "")

    def slab(self, name: str) -> SlabProperty:
        context = self._context("PropArea.GetSlab", name)
        require_name(name, context=context)
        slab_type, shell_type, material, thickness, color, notes, _ = self._outputs(
            context, "PropArea.GetSlab", 7, name, 0, 0, "", 0.0, 0, "", "")
        return SlabProperty(
            name,
            _enum_output(SlabType, slab_type, context),
            _enum_output(ShellType, shell_type, context),
            str(material), float(thickness), int(color), str(notes))

    def set_wall(
        self,
        name: str,
        material: str,
        thickness: float,
        shell_type: ShellType = ShellType.SHELL_THIN,
        color: int = -1,
        notes: str = "",
    ) -> None:
        """Define a wall property with a specified thickness."""
        context = self._context("PropArea.SetWall", name)
        require_name(name, context=context)
        require_name(material, "material", context)
        require_positive(thickness, "thickness", context)
        # eWallPropType 0 = Specified
        self._execute(
            context, "PropArea.SetWall", name, 0, shell_type.value, material, thickness, color, notes, "")
