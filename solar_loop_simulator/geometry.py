"""
Geometry Module
===============
Collector panel and loop piping geometry with preset configurations.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class PanelGeometry:
    """Collector panel construction (area comes from the run parameters)"""
    height_m: float = 1.5               # Characteristic height for convection [m]
    mass_per_m2: float = 10.0           # Absorber + glazing mass [kg/m2]
    specific_heat: float = 900.0        # Aluminium/glass construction [J/kg*K]
    name: str = "Flat Plate"

    def thermal_mass(self, area_m2: float) -> float:
        """Panel mass [kg]"""
        return self.mass_per_m2 * area_m2

    def heat_capacity(self, area_m2: float) -> float:
        """Panel heat capacity [J/K]"""
        return self.thermal_mass(area_m2) * self.specific_heat

    def to_dict(self) -> Dict:
        """Convert to dictionary for display"""
        return {
            "Name": self.name,
            "Height": f"{self.height_m} m",
            "Mass": f"{self.mass_per_m2} kg/m2",
            "Cp": f"{self.specific_heat} J/kg*K",
        }


@dataclass(frozen=True)
class LoopPipeGeometry:
    """Piping between panel and tank"""
    inner_diameter_mm: float = 15.0     # [mm]
    length_m: float = 20.0              # Total loop length [m]
    roughness_mm: float = 0.0015        # Drawn copper [mm]
    name: str = "1/2 in Copper"

    @property
    def inner_diameter_m(self) -> float:
        return self.inner_diameter_mm / 1000

    @property
    def flow_area_m2(self) -> float:
        """Cross-section [m2]"""
        return np.pi * self.inner_diameter_m ** 2 / 4

    @property
    def relative_roughness(self) -> float:
        return self.roughness_mm / self.inner_diameter_mm

    @property
    def length_to_diameter(self) -> float:
        return self.length_m / self.inner_diameter_m

    def to_dict(self) -> Dict:
        """Convert to dictionary for display"""
        return {
            "Name": self.name,
            "Inner Diameter": f"{self.inner_diameter_mm} mm",
            "Length": f"{self.length_m} m",
            "Roughness": f"{self.roughness_mm} mm",
        }


class GeometryPresets:
    """Common collector loop configurations"""

    @staticmethod
    def get_pipe_presets() -> Dict[str, LoopPipeGeometry]:
        return {
            "1/2 in Copper": LoopPipeGeometry(),
            "3/4 in Copper": LoopPipeGeometry(
                inner_diameter_mm=20.0, length_m=20.0, name="3/4 in Copper"),
            "PEX 16 mm": LoopPipeGeometry(
                inner_diameter_mm=12.0, length_m=20.0, roughness_mm=0.007, name="PEX 16 mm"),
        }

    @staticmethod
    def get_panel_presets() -> Dict[str, PanelGeometry]:
        return {
            "Flat Plate": PanelGeometry(),
            "Tall Flat Plate": PanelGeometry(height_m=2.0, name="Tall Flat Plate"),
            "Unglazed Polymer": PanelGeometry(
                height_m=1.2, mass_per_m2=4.0, specific_heat=1500.0, name="Unglazed Polymer"),
        }
