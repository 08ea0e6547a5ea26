"""
Unit tests for UnitConfiguration and the per-session UnitSystemCache.
"""

import pytest

from etabs_bridge.core.data_models import (
    US_KIP_FT,
    ForceUnit,
    LengthUnit,
    TemperatureUnit,
    UnitConfiguration,
)
from etabs_bridge.core.errors import NativeCallError, UnexpectedError, ValidationError
from etabs_bridge.core.observers import EventKind
from tests.fixtures.com_fakes import FakeComError


class TestUnitConfiguration:
    """Tests for the unit triple."""

    def test_default_is_kn_m_c(self):
        units = UnitConfiguration()
        assert units.force == ForceUnit.KN
        assert units.length == LengthUnit.M
        assert units.temperature == TemperatureUnit.C
        assert units.is_metric
        assert not units.is_us

    def test_preset_codes(self):
        assert UnitConfiguration().preset_code == 6
        assert US_KIP_FT.preset_code == 4
        assert UnitConfiguration.from_preset_code(5) == UnitConfiguration(
            ForceUnit.KN, LengthUnit.MM, TemperatureUnit.C)

    def test_unknown_preset_code(self):
        with pytest.raises(ValueError):
            UnitConfiguration.from_preset_code(99)

    def test_preset_without_code(self):
        units = UnitConfiguration(ForceUnit.LB, LengthUnit.MM, TemperatureUnit.F)
        assert units.preset_code is None

    @pytest.mark.parametrize("name,expected", [
        ("kN_m_C", UnitConfiguration()),
        ("kip_ft_F", US_KIP_FT),
        ("KIP_IN_F", UnitConfiguration(ForceUnit.KIP, LengthUnit.INCH, TemperatureUnit.F)),
        ("ton_m_C", UnitConfiguration(ForceUnit.TONF, LengthUnit.M, TemperatureUnit.C)),
    ])
    def test_from_preset_name(self, name, expected):
        assert UnitConfiguration.from_preset_name(name) == expected

    @pytest.mark.parametrize("name", ["kN_m", "furlong_m_C", ""])
    def test_invalid_preset_name(self, name):
        with pytest.raises(ValueError):
            UnitConfiguration.from_preset_name(name)

    def test_from_codes(self):
        assert UnitConfiguration.from_codes(2, 2, 1) == US_KIP_FT


class TestUnitSystemCache:
    """Tests for get/set through a model handle."""

    def test_initial_value(self, handle, sap_model):
        """Test that the cache reports kN, m, C before any native call."""
        assert handle.units.cached == UnitConfiguration()
        assert sap_model.calls == []

    def test_set_updates_cache(self, handle, sap_model):
        assert handle.units.set(US_KIP_FT) is True
        assert sap_model.calls_to("SetPresentUnits_2") == [(2, 2, 1)]
        assert handle.units.cached == US_KIP_FT

    def test_failed_set_keeps_cache(self, handle, sap_model, recorder):
        sap_model.respond("SetPresentUnits_2", 1)
        with pytest.raises(NativeCallError) as info:
            handle.units.set(US_KIP_FT)
        assert info.value.return_code == 1
        assert handle.units.cached == UnitConfiguration()
        assert EventKind.FAILED in recorder.kinds()

    def test_set_rejects_other_types(self, handle, sap_model):
        with pytest.raises(ValidationError):
            handle.units.set("kN_m_C")
        assert sap_model.calls == []

    def test_get_reads_and_caches(self, handle, sap_model):
        sap_model.respond("GetPresentUnits_2", (0, 3, 4, 2))
        units = handle.units.get()
        assert units == UnitConfiguration(ForceUnit.N, LengthUnit.MM, TemperatureUnit.C)
        assert handle.units.cached == units

    def test_failed_get_returns_last_good_value(self, handle, sap_model):
        """Test that a failed read never raises and reports the last good value."""
        handle.units.set(US_KIP_FT)
        sap_model.respond("GetPresentUnits_2", (1, 0, 0, 0))
        assert handle.units.get() == US_KIP_FT

    def test_get_with_invalid_codes_returns_cache(self, handle, sap_model):
        sap_model.respond("GetPresentUnits_2", (0, 99, 6, 2))
        assert handle.units.get() == UnitConfiguration()

    def test_get_with_com_fault_returns_cache(self, handle, sap_model):
        sap_model.respond("GetPresentUnits_2", FakeComError(-2147352567))
        assert handle.units.get() == UnitConfiguration()

    def test_database_units(self, handle, sap_model):
        sap_model.respond("GetDatabaseUnits", 4)
        assert handle.units.database_units() == US_KIP_FT

    def test_database_units_unknown_code(self, handle, sap_model):
        sap_model.respond("GetDatabaseUnits", 0)
        with pytest.raises(UnexpectedError):
            handle.units.database_units()
