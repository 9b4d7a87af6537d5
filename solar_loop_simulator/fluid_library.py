"""
Fluid Library
=============
Catalog of heat-transfer fluids available for the solar loop.
"""

from dataclasses import dataclass
from typing import Dict, List, Union
from enum import Enum

from .air_properties import DEG_F_PER_K


# Reference temperature at which catalog properties are tabulated [F] (20 C)
REFERENCE_TEMP_F = 68.0


class FluidType(Enum):
    """Fluids selectable for the collector loop"""
    WATER = "water"
    ETHYLENE_GLYCOL = "ethylene_glycol"
    MINERAL_OIL = "mineral_oil"
    SILICONE = "silicone"
    PROPYLENE_GLYCOL = "propylene_glycol"


@dataclass(frozen=True)
class FluidProperties:
    """Heat-transfer fluid with properties at 20 C"""
    name: str
    label: str
    density: float                      # Density [kg/m3]
    specific_heat: float                # Specific heat [J/kg*K]
    viscosity: float                    # Dynamic viscosity [Pa*s]
    thermal_conductivity: float         # Thermal conductivity [W/m*K]
    expansion_coefficient: float        # Volumetric expansion [1/K]
    freezing_point: float               # [F], informational only
    boiling_point: float                # [F], informational only
    description: str = ""

    @property
    def kinematic_viscosity(self) -> float:
        """Kinematic viscosity [m2/s]"""
        return self.viscosity / self.density

    def density_at(self, temp_f: float) -> float:
        """
        Density at temperature [kg/m3]

        Linearised around the reference temperature with the volumetric
        expansion coefficient. Only differences of this value matter to the
        thermosiphon solver, so the linear form is sufficient.
        """
        delta_k = (temp_f - REFERENCE_TEMP_F) / DEG_F_PER_K
        return self.density * (1 - self.expansion_coefficient * delta_k)


FLUIDS: Dict[FluidType, FluidProperties] = {
    FluidType.WATER: FluidProperties(
        name="water",
        label="Water",
        density=998.0,
        specific_heat=4186.0,
        viscosity=0.001002,
        thermal_conductivity=0.598,
        expansion_coefficient=2.07e-4,
        freezing_point=32.0,
        boiling_point=212.0,
        description="Best heat capacity; needs freeze protection outdoors",
    ),
    FluidType.ETHYLENE_GLYCOL: FluidProperties(
        name="ethylene_glycol",
        label="Ethylene Glycol",
        density=1113.0,
        specific_heat=2382.0,
        viscosity=0.0161,
        thermal_conductivity=0.252,
        expansion_coefficient=5.7e-4,
        freezing_point=8.6,
        boiling_point=387.0,
        description="Antifreeze for closed loops; toxic",
    ),
    FluidType.MINERAL_OIL: FluidProperties(
        name="mineral_oil",
        label="Mineral Oil",
        density=850.0,
        specific_heat=1880.0,
        viscosity=0.034,
        thermal_conductivity=0.13,
        expansion_coefficient=7.0e-4,
        freezing_point=14.0,
        boiling_point=590.0,
        description="High-temperature unpressurised loops",
    ),
    FluidType.SILICONE: FluidProperties(
        name="silicone",
        label="Silicone Oil",
        density=920.0,
        specific_heat=1465.0,
        viscosity=0.048,
        thermal_conductivity=0.15,
        expansion_coefficient=9.6e-4,
        freezing_point=-58.0,
        boiling_point=572.0,
        description="Wide operating range, low heat capacity",
    ),
    FluidType.PROPYLENE_GLYCOL: FluidProperties(
        name="propylene_glycol",
        label="Propylene Glycol",
        density=1036.0,
        specific_heat=2480.0,
        viscosity=0.042,
        thermal_conductivity=0.200,
        expansion_coefficient=7.2e-4,
        freezing_point=-74.0,
        boiling_point=370.0,
        description="Food-safe antifreeze for domestic hot water",
    ),
}


class FluidLibrary:
    """Read-only fluid catalog"""

    def __init__(self):
        self._fluids: Dict[FluidType, FluidProperties] = dict(FLUIDS)

    def get_fluid(self, fluid_id: Union[FluidType, str]) -> FluidProperties:
        """Get fluid properties by type or string id"""
        try:
            fluid_type = fluid_id if isinstance(fluid_id, FluidType) else FluidType(fluid_id)
        except ValueError:
            raise ValueError(f"Fluid '{fluid_id}' not found. Available: {self.list_fluids()}") from None
        return self._fluids[fluid_type]

    def list_fluids(self) -> List[str]:
        """List all fluid ids"""
        return [fluid_type.value for fluid_type in self._fluids]

    def list_labels(self) -> Dict[str, str]:
        """Map fluid id to display label"""
        return {fluid_type.value: props.label for fluid_type, props in self._fluids.items()}

    def get_fluid_info(self, fluid_id: Union[FluidType, str]) -> Dict:
        """Get fluid properties as a dictionary for display"""
        fluid = self.get_fluid(fluid_id)
        return {
            "Name": fluid.label,
            "Density": f"{fluid.density} kg/m3",
            "Specific Heat": f"{fluid.specific_heat} J/kg*K",
            "Viscosity": f"{fluid.viscosity} Pa*s",
            "Conductivity": f"{fluid.thermal_conductivity} W/m*K",
            "Freezing Point": f"{fluid.freezing_point} F",
            "Boiling Point": f"{fluid.boiling_point} F",
            "Description": fluid.description,
        }


_LIBRARY = FluidLibrary()


def get_library() -> FluidLibrary:
    """Get the fluid library"""
    return _LIBRARY


def lookup(fluid_id: Union[FluidType, str]) -> FluidProperties:
    """Shortcut for get_library().get_fluid()"""
    return _LIBRARY.get_fluid(fluid_id)
