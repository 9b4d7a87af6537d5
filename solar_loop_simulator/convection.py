"""
Convection Module
=================
Panel-to-ambient convective heat transfer coefficient: Churchill-Chu natural
convection off a vertical plate plus a light-wind forced term.
"""

from .air_properties import DEG_F_PER_K, GRAVITY, air_properties, fahrenheit_to_kelvin


H_FLOOR = 5.0                   # Returned below MIN_DELTA_T [W/m2*K]
MIN_DELTA_T = 0.1               # [F]
DEFAULT_PANEL_HEIGHT = 1.5      # [m]
WIND_SPEED = 0.5                # Assumed light wind [m/s]


def churchill_chu_nusselt(ra: float, pr: float) -> float:
    """Churchill-Chu laminar correlation, used across the full Ra range"""
    return 0.68 + 0.67 * ra ** 0.25 / (1 + (0.492 / pr) ** (9 / 16)) ** (4 / 9)


def forced_convection_coefficient(elevation_m: float = 0.0) -> float:
    """McAdams wind coefficient 5.7 + 3.8*v [W/m2*K]"""
    wind_speed = WIND_SPEED * (1 + max(0.0, elevation_m) / 1000)
    return 5.7 + 3.8 * wind_speed


def convective_coefficient(panel_temp: float,
                           ambient_temp: float,
                           panel_height: float = DEFAULT_PANEL_HEIGHT,
                           irradiance: float = 0.0,
                           flow_rate: float = 0.0,
                           elevation_m: float = 0.0) -> float:
    """
    Heat transfer coefficient from panel surface to ambient air [W/m2*K]

    Args:
        panel_temp: Panel temperature [F]
        ambient_temp: Ambient temperature [F]
        panel_height: Characteristic length of the plate [m]
        irradiance: Optional correction input for air conductivity [W/m2]
        flow_rate: Optional correction input for Prandtl number [L/min]
        elevation_m: Optional correction for air density and wind [m]
    """
    delta_t = abs(panel_temp - ambient_temp)
    if delta_t < MIN_DELTA_T:
        return H_FLOOR

    film_temp = (panel_temp + ambient_temp) / 2
    air = air_properties(film_temp, irradiance, flow_rate, elevation_m)

    # Ideal-gas expansion coefficient
    beta = 1 / fahrenheit_to_kelvin(film_temp)
    delta_k = delta_t / DEG_F_PER_K

    Gr = GRAVITY * beta * delta_k * panel_height ** 3 / air.kinematic_viscosity ** 2
    Ra = Gr * air.prandtl
    Nu = churchill_chu_nusselt(Ra, air.prandtl)

    h_natural = Nu * air.thermal_conductivity / panel_height
    return float(h_natural + forced_convection_coefficient(elevation_m))
