"""
Air Properties
==============
Temperature-dependent properties of ambient air, evaluated at the film
temperature of the collector surface.

All temperatures passed in are degrees Fahrenheit; conversion to absolute
temperature happens here so the correlations stay in SI.
"""

import numpy as np
from dataclasses import dataclass


DEG_F_PER_K = 1.8

# Atmosphere
SEA_LEVEL_PRESSURE = 101325.0   # [Pa]
R_AIR = 287.05                  # Specific gas constant [J/kg*K]
T_STANDARD = 288.15             # ISA sea-level temperature [K]
GRAVITY = 9.81                  # [m/s2]

# Sutherland's law
MU_REF = 1.716e-5               # Reference viscosity [Pa*s]
T_REF_SUTHERLAND = 273.15       # [K]
S_SUTHERLAND = 110.4            # Sutherland constant for air [K]

# Linear fits around 0 C
K_AIR_REF = 0.0241              # [W/m*K]
K_AIR_SLOPE = 7.7e-5            # [W/m*K per K]
PR_REF = 0.715
PR_SLOPE = -1.0e-4              # [1/K]


def fahrenheit_to_kelvin(temp_f):
    return (temp_f - 32.0) / DEG_F_PER_K + 273.15


def kelvin_to_fahrenheit(temp_k):
    return (temp_k - 273.15) * DEG_F_PER_K + 32.0


@dataclass(frozen=True)
class AirProperties:
    """Air properties at one film temperature"""
    density: float                  # [kg/m3]
    viscosity: float                # Dynamic viscosity [Pa*s]
    thermal_conductivity: float     # [W/m*K]
    prandtl: float                  # [-]

    @property
    def kinematic_viscosity(self) -> float:
        """[m2/s]"""
        return self.viscosity / self.density


def air_pressure(elevation_m: float = 0.0) -> float:
    """Barometric pressure [Pa]; negative elevations are treated as sea level"""
    elevation_m = max(0.0, elevation_m)
    return SEA_LEVEL_PRESSURE * np.exp(-(GRAVITY * elevation_m) / (R_AIR * T_STANDARD))


def air_density(temp_f: float, elevation_m: float = 0.0) -> float:
    """Ideal gas density [kg/m3]"""
    return air_pressure(elevation_m) / (R_AIR * fahrenheit_to_kelvin(temp_f))


def air_viscosity(temp_f: float) -> float:
    """Sutherland's formula [Pa*s]"""
    temp_k = fahrenheit_to_kelvin(temp_f)
    return (MU_REF * (T_REF_SUTHERLAND + S_SUTHERLAND) / (temp_k + S_SUTHERLAND)
            * (temp_k / T_REF_SUTHERLAND) ** 1.5)


def air_thermal_conductivity(temp_f: float, irradiance: float = 0.0) -> float:
    """
    Thermal conductivity [W/m*K]

    Linear in temperature. A non-zero irradiance applies a small empirical
    boost (10% on the base value, 5% on the slope at 1000 W/m2).
    """
    base = K_AIR_REF * (1 + (irradiance / 1000) * 0.1)
    slope = K_AIR_SLOPE * (1 + (irradiance / 1000) * 0.05)
    return base + slope * (fahrenheit_to_kelvin(temp_f) - T_REF_SUTHERLAND)


def prandtl_number(temp_f: float, flow_rate: float = 0.0) -> float:
    """Prandtl number, with up to +10% for loop flow rates of 10 L/min and above"""
    base = PR_REF + PR_SLOPE * (fahrenheit_to_kelvin(temp_f) - T_REF_SUTHERLAND)
    flow_effect = min(flow_rate / 10, 1.0) * 0.1
    return base * (1 + flow_effect)


def air_properties(film_temp_f: float,
                   irradiance: float = 0.0,
                   flow_rate: float = 0.0,
                   elevation_m: float = 0.0) -> AirProperties:
    """Evaluate all air properties at the film temperature"""
    return AirProperties(
        density=air_density(film_temp_f, elevation_m),
        viscosity=air_viscosity(film_temp_f),
        thermal_conductivity=air_thermal_conductivity(film_temp_f, irradiance),
        prandtl=prandtl_number(film_temp_f, flow_rate),
    )
